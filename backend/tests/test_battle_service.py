import asyncio

import pytest

from battlecore.combat.combat_engine import CombatEngine
from battlecore.combat.errors import CombatantNotFoundError
from battlecore.combat.models import Archetype, BuffType, CharacterSnapshot, CharacterUpdate, EncounterState
from battlecore.combat.monster_generator import MonsterGenerator
from battlecore.combat.state_store import EncounterStateStore
from battlecore.services import BattleService, InMemoryCharacterRepository

_SLIMES = {"slime": {"name": "Slime", "level": 1, "hp": 40, "attack": 3, "defense": 1, "exp": 30, "drops": []}}


def _hero(**overrides):
    data = dict(id="hero", name="Hero", level=1, health=100, max_health=100, attack=200, defense=200)
    data.update(overrides)
    return CharacterSnapshot(**data)


def _service(*characters):
    repository = InMemoryCharacterRepository({c.id: c for c in characters})
    engine = CombatEngine(monster_generator=MonsterGenerator(catalog=_SLIMES))
    return BattleService(repository, engine=engine), repository


@pytest.mark.asyncio
async def test_consecutive_wins_count_streak():
    service, repository = _service(_hero())

    for seed in range(4):
        outcome = await service.hunt("hero", rng_seed=seed)
        assert outcome.won is True

    stored = await repository.get_snapshot("hero")
    assert stored.streak == 4
    assert stored.highest_streak == 4
    assert stored.wins == 4
    assert stored.experience > 0
    assert stored.coins > 0


@pytest.mark.asyncio
async def test_loss_resets_streak_and_keeps_best():
    service, repository = _service(_hero(health=1, attack=0, defense=0, streak=5, highest_streak=5))

    outcome = await service.hunt("hero", rng_seed=1)

    assert outcome.won is False
    stored = await repository.get_snapshot("hero")
    assert stored.streak == 0
    assert stored.highest_streak == 5
    assert stored.losses == 1
    assert stored.health == 0


@pytest.mark.asyncio
async def test_concurrent_hunts_for_one_character_are_serialized():
    service, repository = _service(_hero())

    await asyncio.gather(*(service.hunt("hero", rng_seed=seed) for seed in range(6)))

    stored = await repository.get_snapshot("hero")
    assert stored.streak == 6
    assert stored.wins == 6


@pytest.mark.asyncio
async def test_combo_state_carries_across_encounters():
    service, repository = _service(_hero(archetype=Archetype.COMBO))

    await service.hunt("hero", rng_seed=1)
    assert repository.raw("hero")["encounter_state"]["combo_count"] == 1

    await service.hunt("hero", rng_seed=2)
    assert repository.raw("hero")["encounter_state"]["combo_count"] == 2
    assert service.state_store.get("hero").combo_count == 2


@pytest.mark.asyncio
async def test_unknown_character_raises_not_found():
    service, _ = _service(_hero())

    with pytest.raises(CombatantNotFoundError):
        await service.hunt("nobody")


@pytest.mark.asyncio
async def test_failed_commit_leaves_cache_untouched():
    class _BrokenRepository(InMemoryCharacterRepository):
        async def commit_many(self, updates):
            raise RuntimeError("storage down")

    repository = _BrokenRepository({"hero": _hero(archetype=Archetype.COMBO)})
    service = BattleService(repository, engine=CombatEngine(monster_generator=MonsterGenerator(catalog=_SLIMES)))

    with pytest.raises(RuntimeError):
        await service.hunt("hero", rng_seed=1)

    assert service.state_store.get("hero") is None
    assert (await repository.get_snapshot("hero")).streak == 0


@pytest.mark.asyncio
async def test_duel_updates_both_records_but_not_streak():
    strong = _hero(id="a", name="A", streak=3)
    weak = _hero(id="b", name="B", health=10, max_health=10, attack=1, defense=1)
    service, repository = _service(strong, weak)

    outcome = await service.duel("a", "b", rng_seed=4)

    assert outcome.winner_id == "a"
    a = await repository.get_snapshot("a")
    b = await repository.get_snapshot("b")
    assert (a.wins, a.losses, a.streak) == (1, 0, 3)
    assert (b.wins, b.losses, b.health) == (0, 1, 0)


@pytest.mark.asyncio
async def test_duel_with_self_rejected():
    service, _ = _service(_hero())

    with pytest.raises(ValueError):
        await service.duel("hero", "hero")


@pytest.mark.asyncio
async def test_commit_many_is_all_or_nothing():
    repository = InMemoryCharacterRepository({"hero": _hero()})
    update = CharacterUpdate(
        health=50,
        max_health=100,
        level=1,
        experience=10,
        attack=200,
        defense=200,
        streak=1,
        highest_streak=1,
        wins=1,
        losses=0,
        coins=5,
        encounter_state=EncounterState(),
    )

    with pytest.raises(CombatantNotFoundError):
        await repository.commit_many({"hero": update, "ghost": update})

    assert (await repository.get_snapshot("hero")).health == 100


@pytest.mark.asyncio
async def test_state_store_lock_times_out_while_held():
    store = EncounterStateStore(lock_timeout=0.01)

    async with store.open("hero"):
        with pytest.raises(asyncio.TimeoutError):
            async with store.open("hero"):
                pass

    async with store.open("hero") as handle:
        assert handle.character_ids == ("hero",)


@pytest.mark.asyncio
async def test_external_state_write_between_hunts_survives():
    service, repository = _service(_hero())
    await service.hunt("hero", rng_seed=1, now=1000.0)

    buffed = (await repository.get_snapshot("hero")).model_copy(
        update={
            "encounter_state": {
                "active_buffs": [{"kind": BuffType.ATTACK.value, "magnitude": 50, "expires_at": 1000.0 + 3600}],
            }
        }
    )
    await repository.add(buffed)

    outcome = await service.hunt("hero", rng_seed=2, now=1000.0)

    assert [(b.kind, b.magnitude) for b in outcome.player_state.active_buffs] == [(BuffType.ATTACK, 50)]
    stored = repository.raw("hero")
    assert len(stored["encounter_state"]["active_buffs"]) == 1
    assert stored["streak"] == 2


@pytest.mark.asyncio
async def test_state_store_reads_persisted_state_and_keeps_flushed_copy():
    store = EncounterStateStore()
    snapshot = _hero(encounter_state={"combo_count": 1})

    async with store.open("hero") as handle:
        assert handle.current_state(snapshot).combo_count == 1
        handle.flush("hero", EncounterState(combo_count=4))

    assert store.get("hero").combo_count == 4

    async with store.open("hero") as handle:
        assert handle.current_state(snapshot).combo_count == 1
        with pytest.raises(KeyError):
            handle.flush("other", EncounterState())

    store.discard("hero")
    assert store.get("hero") is None


@pytest.mark.asyncio
async def test_state_store_drops_locks_once_released():
    store = EncounterStateStore(lock_timeout=0.01)

    async with store.open("a", "b"):
        assert store.held() == ["a", "b"]
        with pytest.raises(asyncio.TimeoutError):
            async with store.open("b"):
                pass
        assert store.held() == ["a", "b"]

    assert store.held() == []


@pytest.mark.asyncio
async def test_concurrent_hunts_leave_no_locks_behind():
    service, _ = _service(_hero(id="x", name="X"), _hero(id="y", name="Y"))

    await asyncio.gather(*(service.hunt(cid, rng_seed=i) for i, cid in enumerate(["x", "y", "x", "y"])))

    assert service.state_store.held() == []

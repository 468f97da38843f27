import json
from fractions import Fraction

import pytest

from battlecore.combat.dice import DiceRoller
from battlecore.combat.errors import MonsterNotFoundError
from battlecore.combat.monster_catalog import MONSTER_CATALOG, load_catalog, normalize_entry
from battlecore.combat.monster_generator import MonsterGenerator, bucket_weights, streak_bonus


def _entry(level, hp=100, attack=10, defense=10, exp=10, drops=None):
    return {"name": f"Lv{level}", "level": level, "hp": hp, "attack": attack, "defense": defense, "exp": exp, "drops": drops or []}


@pytest.mark.parametrize("level", [1, 5, 12, 30, 45, 80])
@pytest.mark.parametrize("streak", [0, 1, 9, 24, 60, 150])
def test_generated_stats_never_below_catalog_base(level, streak):
    generator = MonsterGenerator(catalog=load_catalog())
    rng = DiceRoller(seed=level * 1000 + streak)

    for _ in range(5):
        monster = generator.generate(level, streak, rng=rng)
        base = MONSTER_CATALOG[monster.catalog_id]
        assert monster.hp >= base["hp"]
        assert monster.attack >= base["attack"]
        assert monster.defense >= base["defense"]
        assert monster.exp >= base["exp"]


def test_streak_zero_keeps_base_stats():
    generator = MonsterGenerator(catalog={"slime": _entry(3, hp=77, attack=9, defense=4, exp=21)})

    monster = generator.generate(3, 0, rng=DiceRoller(seed=1))

    assert (monster.hp, monster.attack, monster.defense, monster.exp) == (77, 9, 4, 21)
    assert monster.coins == 10
    assert monster.name == "Lv3"
    assert monster.rank == ""


def test_streak_bonus_diminishes_per_tier():
    assert streak_bonus(0) == 0
    assert streak_bonus(10) == Fraction(3, 10)
    assert streak_bonus(25) == Fraction(6, 10)
    assert streak_bonus(100) == Fraction(11, 10)
    assert streak_bonus(500) == streak_bonus(100)


def test_high_level_player_adds_flat_hp():
    generator = MonsterGenerator(catalog={"slime": _entry(55)})

    monster = generator.generate(55, 4, rng=DiceRoller(seed=1))

    assert monster.hp == 112 + 4 * 25
    assert monster.attack == 10
    assert monster.defense == 10
    assert monster.exp == 11
    assert monster.coins == 5


@pytest.mark.parametrize(
    "streak,label",
    [(9, ""), (10, "Veteran"), (25, "Elite"), (50, "Champion"), (100, "Legendary"), (250, "Legendary")],
)
def test_rank_prefix(streak, label):
    generator = MonsterGenerator(catalog={"slime": _entry(1)})

    monster = generator.generate(1, streak, rng=DiceRoller(seed=1))

    assert monster.rank == label
    assert monster.name == (f"{label} Lv1" if label else "Lv1")


def test_bucket_weights_shift_toward_harder_buckets():
    assert bucket_weights(0) == {"same": 50.0, "below_near": 35.0, "slightly_above": 12.0, "much_above": 3.0}
    assert bucket_weights(25) == {"same": 37.5, "below_near": 22.5, "slightly_above": 26.0, "much_above": 14.0}
    assert bucket_weights(50) == bucket_weights(400)


def test_only_nonempty_buckets_are_sampled():
    generator = MonsterGenerator(catalog={"brute": _entry(18)})

    for seed in range(10):
        assert generator.generate(10, 0, rng=DiceRoller(seed=seed)).catalog_id == "brute"


def test_fallback_to_lowest_level_monsters():
    generator = MonsterGenerator(catalog={"giant": _entry(40), "ogre": _entry(30)})

    monster = generator.generate(1, 0, rng=DiceRoller(seed=3))

    assert monster.catalog_id == "ogre"


def test_same_seed_same_monster():
    generator = MonsterGenerator(catalog=load_catalog())

    first = generator.generate(12, 7, rng=DiceRoller(seed=123))
    second = generator.generate(12, 7, rng=DiceRoller(seed=123))

    assert first.to_dict() == second.to_dict()


def test_empty_catalog_raises_not_found():
    with pytest.raises(MonsterNotFoundError):
        MonsterGenerator(catalog={}).generate(5, 0, rng=DiceRoller(seed=1))


def test_negative_inputs_rejected():
    generator = MonsterGenerator(catalog={"slime": _entry(1)})
    with pytest.raises(ValueError):
        generator.generate(-1, 0)
    with pytest.raises(ValueError):
        generator.generate(1, -1)


def test_builtin_catalog_is_valid():
    for catalog_id, entry in MONSTER_CATALOG.items():
        assert normalize_entry(catalog_id, entry)["level"] == entry["level"]


def test_load_catalog_from_json(tmp_path):
    path = tmp_path / "monsters.json"
    path.write_text(json.dumps({"rat": {"name": "Rat", "level": 1, "hp": 20, "attack": 2, "defense": 1, "exp": 5, "coins": 9}}))

    catalog = load_catalog(str(path))

    assert catalog["rat"]["coins"] == 9
    monster = MonsterGenerator(catalog=catalog).generate(1, 0, rng=DiceRoller(seed=1))
    assert monster.coins == 9


def test_load_catalog_reports_every_problem(tmp_path):
    path = tmp_path / "monsters.json"
    path.write_text(json.dumps({"bad": {"name": "", "level": 0, "hp": "x", "attack": 1, "defense": 1, "exp": 1}}))

    with pytest.raises(ValueError) as exc_info:
        load_catalog(str(path))

    message = str(exc_info.value)
    assert "name is required" in message
    assert "level must be >= 1" in message
    assert "hp must be an integer" in message


def test_load_catalog_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_catalog(str(tmp_path / "missing.json"))


def test_coins_are_not_streak_scaled_before_rewards():
    generator = MonsterGenerator(catalog={"slime": _entry(3, exp=100)})

    monster = generator.generate(3, 40, rng=DiceRoller(seed=1))

    assert monster.exp > 100
    assert monster.coins == 50

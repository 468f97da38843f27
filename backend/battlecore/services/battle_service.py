"""
Battle orchestration.

Reads a character once, resolves the encounter with the combat engine and
writes every result back in one repository commit while the character's
encounter state is held open.
"""
from __future__ import annotations

import logging
from typing import Optional

from battlecore.combat.combat_engine import CombatEngine
from battlecore.combat.models.character import CharacterSnapshot, CharacterUpdate
from battlecore.combat.models.combat_result import BattleOutcome, DuelOutcome
from battlecore.combat.models.encounter_state import EncounterState
from battlecore.combat.progression import apply_experience
from battlecore.combat.state_store import EncounterStateStore
from battlecore.config import settings

from .character_repository import CharacterRepository

logger = logging.getLogger(__name__)


def build_battle_update(snapshot: CharacterSnapshot, outcome: BattleOutcome) -> CharacterUpdate:
    """Translate a battle outcome into the character's post-encounter record."""
    health = min(outcome.final_health, snapshot.max_health)
    progression = apply_experience(
        level=snapshot.level,
        experience=snapshot.experience,
        attack=snapshot.attack,
        defense=snapshot.defense,
        health=health,
        max_health=snapshot.max_health,
        amount=outcome.exp,
    )
    return CharacterUpdate(
        health=progression.health,
        max_health=progression.max_health,
        level=progression.level,
        experience=progression.experience,
        attack=progression.attack,
        defense=progression.defense,
        streak=outcome.new_streak,
        highest_streak=max(snapshot.highest_streak, outcome.new_streak),
        wins=snapshot.wins + (1 if outcome.won else 0),
        losses=snapshot.losses + (0 if outcome.won else 1),
        coins=snapshot.coins + outcome.coins,
        encounter_state=outcome.player_state,
    )


def build_duel_update(
    snapshot: CharacterSnapshot,
    won: bool,
    final_health: int,
    state: EncounterState,
) -> CharacterUpdate:
    """Duels change health, record and encounter state; the hunt streak is untouched."""
    return CharacterUpdate(
        health=min(final_health, snapshot.max_health),
        max_health=snapshot.max_health,
        level=snapshot.level,
        experience=snapshot.experience,
        attack=snapshot.attack,
        defense=snapshot.defense,
        streak=snapshot.streak,
        highest_streak=snapshot.highest_streak,
        wins=snapshot.wins + (1 if won else 0),
        losses=snapshot.losses + (0 if won else 1),
        coins=snapshot.coins,
        encounter_state=state,
    )


class BattleService:
    """Serialized, atomic hunt and duel entry points."""

    def __init__(
        self,
        repository: CharacterRepository,
        state_store: Optional[EncounterStateStore] = None,
        engine: Optional[CombatEngine] = None,
    ) -> None:
        self.repository = repository
        self.state_store = state_store or EncounterStateStore()
        self.engine = engine or CombatEngine()

    async def hunt(
        self,
        character_id: str,
        enemy_level: Optional[int] = None,
        rng_seed: Optional[int] = None,
        now: Optional[float] = None,
    ) -> BattleOutcome:
        """
        Fight one generated monster.

        Args:
            character_id: character to fight with
            enemy_level: level used for monster selection, defaults to the character's level
            rng_seed: seed for the encounter, defaults to settings.default_seed
            now: wall clock used for buff expiry

        Raises:
            CombatantNotFoundError: unknown character id
        """
        seed = rng_seed if rng_seed is not None else settings.default_seed
        async with self.state_store.open(character_id) as handle:
            snapshot = await self.repository.get_snapshot(character_id)
            state = handle.current_state(snapshot)
            working = snapshot.model_copy(update={"encounter_state": state})

            level = enemy_level if enemy_level is not None else snapshot.level
            outcome = self.engine.resolve_battle(working, level, snapshot.streak, rng_seed=seed, now=now)

            update = build_battle_update(snapshot, outcome)
            try:
                await self.repository.commit(character_id, update)
            except Exception as exc:
                logger.error("Failed to commit battle result for %s: %s", character_id, exc)
                raise
            handle.flush(character_id, outcome.player_state)

        return outcome

    async def duel(
        self,
        challenger_id: str,
        challenged_id: str,
        rng_seed: Optional[int] = None,
        now: Optional[float] = None,
    ) -> DuelOutcome:
        """Fight another character; both are held for the whole encounter."""
        if challenger_id == challenged_id:
            raise ValueError("A character cannot duel itself")

        seed = rng_seed if rng_seed is not None else settings.default_seed
        async with self.state_store.open(challenger_id, challenged_id) as handle:
            challenger = await self.repository.get_snapshot(challenger_id)
            challenged = await self.repository.get_snapshot(challenged_id)

            a = challenger.model_copy(update={"encounter_state": handle.current_state(challenger)})
            b = challenged.model_copy(update={"encounter_state": handle.current_state(challenged)})
            outcome = self.engine.resolve_duel(a, b, rng_seed=seed, now=now)

            updates = {
                snapshot.id: build_duel_update(
                    snapshot,
                    won=outcome.winner_id == snapshot.id,
                    final_health=outcome.final_health[snapshot.id],
                    state=outcome.states[snapshot.id],
                )
                for snapshot in (challenger, challenged)
            }
            try:
                await self.repository.commit_many(updates)
            except Exception as exc:
                logger.error("Failed to commit duel %s vs %s: %s", challenger_id, challenged_id, exc)
                raise
            for character_id in updates:
                handle.flush(character_id, outcome.states[character_id])

        return outcome

"""Combat system package."""

from .combat_engine import CombatEngine, resolve_battle, resolve_duel
from .errors import CombatantNotFoundError, MonsterNotFoundError
from .monster_generator import MonsterGenerator
from .rewards import RewardCalculator
from .state_store import EncounterStateStore

__all__ = [
    "CombatEngine",
    "resolve_battle",
    "resolve_duel",
    "CombatantNotFoundError",
    "MonsterNotFoundError",
    "MonsterGenerator",
    "RewardCalculator",
    "EncounterStateStore",
]

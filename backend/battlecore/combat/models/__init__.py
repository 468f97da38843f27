"""Data models for the combat system."""

from .combatant import Archetype, BuffType, Combatant, CombatantType, Monster, StatusEffect
from .encounter_state import ActiveBuff, EncounterState, StatusEffectInstance
from .combat_session import BattleLog, BattleLogEntry, EncounterEndReason, EncounterSession
from .combat_result import BattleOutcome, DuelOutcome, RewardResult
from .character import CharacterSnapshot, CharacterUpdate, ItemEffect

__all__ = [
    "Archetype",
    "BuffType",
    "Combatant",
    "CombatantType",
    "Monster",
    "StatusEffect",
    "ActiveBuff",
    "EncounterState",
    "StatusEffectInstance",
    "BattleLog",
    "BattleLogEntry",
    "EncounterEndReason",
    "EncounterSession",
    "BattleOutcome",
    "DuelOutcome",
    "RewardResult",
    "CharacterSnapshot",
    "CharacterUpdate",
    "ItemEffect",
]

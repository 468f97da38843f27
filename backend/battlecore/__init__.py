"""Turn-based combat resolution core."""

from .combat import CombatEngine, resolve_battle, resolve_duel

__all__ = ["CombatEngine", "resolve_battle", "resolve_duel"]

"""Experience and level-up."""
import logging
from dataclasses import dataclass

from .rules import (
    LEVEL_UP_ATTACK_GAIN,
    LEVEL_UP_DEFENSE_GAIN,
    exp_needed_for_level,
    max_health_for_level,
)

logger = logging.getLogger(__name__)


@dataclass
class ProgressionResult:
    level: int
    experience: int
    attack: int
    defense: int
    health: int
    max_health: int
    levels_gained: int = 0

    @property
    def leveled_up(self) -> bool:
        return self.levels_gained > 0


def apply_experience(
    level: int,
    experience: int,
    attack: int,
    defense: int,
    health: int,
    max_health: int,
    amount: int,
) -> ProgressionResult:
    """
    Add experience and apply every level-up it pays for.

    Experience is cumulative; reaching ``level * 1000`` moves to the next
    level. Each level grants flat attack/defense and a full heal to the new
    level's max health.
    """
    if amount < 0:
        raise ValueError(f"amount must be >= 0 (got {amount})")

    result = ProgressionResult(
        level=level,
        experience=experience + amount,
        attack=attack,
        defense=defense,
        health=health,
        max_health=max_health,
    )

    # Multi-level jumps are possible at high streak multipliers
    while result.experience >= exp_needed_for_level(result.level):
        result.level += 1
        result.levels_gained += 1
        result.attack += LEVEL_UP_ATTACK_GAIN
        result.defense += LEVEL_UP_DEFENSE_GAIN
        result.max_health = max(result.max_health, max_health_for_level(result.level))
        result.health = result.max_health

    if result.leveled_up:
        logger.info("level up: %d -> %d", level, result.level)
    return result

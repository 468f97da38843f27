"""Status effect helpers."""
import logging
from dataclasses import dataclass, field
from typing import List

from .models.combatant import StatusEffect
from .models.encounter_state import EncounterState, StatusEffectInstance

logger = logging.getLogger(__name__)


@dataclass
class StatusTickResult:
    new_health: int
    messages: List[str] = field(default_factory=list)
    expired: List[StatusEffectInstance] = field(default_factory=list)
    damage_taken: int = 0
    healed: int = 0


def is_stunned(state: EncounterState) -> bool:
    """Check if the owner of this state cannot act this turn."""
    return state.has_status_effect(StatusEffect.STUN)


def tick(owner_id: str, state: EncounterState, current_health: int, max_health: int) -> StatusTickResult:
    """Apply and age the owner's pending effects once.

    POISON/BURN subtract their magnitude, HEAL_OVER_TIME adds it (clamped to
    max_health). Every effect loses one remaining turn and is dropped at <= 0.
    """
    health = current_health
    damage_taken = 0
    healed = 0
    messages: List[str] = []
    kept: List[StatusEffectInstance] = []
    expired: List[StatusEffectInstance] = []

    for effect in state.status_effects:
        if effect.kind == StatusEffect.POISON:
            health -= effect.magnitude
            damage_taken += effect.magnitude
            messages.append(f"Poison deals {effect.magnitude} damage!")
        elif effect.kind == StatusEffect.BURN:
            health -= effect.magnitude
            damage_taken += effect.magnitude
            messages.append(f"Burning! Takes {effect.magnitude} damage!")
        elif effect.kind == StatusEffect.HEAL_OVER_TIME:
            restored = max(0, min(effect.magnitude, max_health - max(health, 0)))
            health += restored
            healed += restored
            messages.append(f"Regeneration restores {restored} HP!")
        elif effect.kind == StatusEffect.STUN:
            messages.append("Stunned!")

        if effect.tick():
            expired.append(effect)
        else:
            kept.append(effect)

    state.status_effects = kept
    health = max(0, min(health, max_health))
    if expired:
        logger.debug(
            "%s: %d status effect(s) expired: %s",
            owner_id,
            len(expired),
            [e.kind.value for e in expired],
        )

    return StatusTickResult(
        new_health=health,
        messages=messages,
        expired=expired,
        damage_taken=damage_taken,
        healed=healed,
    )

"""Archetype special mechanics.

Every archetype is a tag on the combatant; one handler per tag is looked up
in ``_HANDLERS`` and invoked through :func:`apply_archetype_effect` after each
landed hit by the archetype's owner.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from . import rules
from .dice import DiceRoller
from .models.combatant import Archetype, Combatant, StatusEffect
from .models.encounter_state import EncounterState, StatusEffectInstance

logger = logging.getLogger(__name__)


@dataclass
class HitContext:
    """Everything an archetype handler may read or mutate for one hit."""

    attacker: Combatant
    raw_damage: int
    is_critical: bool
    state: EncounterState
    defender_state: EncounterState
    rng: DiceRoller


@dataclass
class ArchetypeOutcome:
    damage: int
    messages: List[str] = field(default_factory=list)
    inflicted: Optional[StatusEffectInstance] = None


def _combo(ctx: HitContext) -> ArchetypeOutcome:
    state = ctx.state
    damage = ctx.raw_damage
    messages: List[str] = []

    state.combo_count += 1
    if state.combo_count >= rules.COMBO_THRESHOLD and not state.second_wind_active:
        state.second_wind_active = True
        state.second_wind_turns_left = rules.SECOND_WIND_HITS
        damage *= rules.SECOND_WIND_MULTIPLIER
        messages.append(f"{ctx.attacker.name} enters SECOND WIND! (x{rules.SECOND_WIND_MULTIPLIER})")
    elif state.second_wind_active:
        damage *= rules.SECOND_WIND_MULTIPLIER
        state.second_wind_turns_left -= 1
        if state.second_wind_turns_left <= 0:
            state.end_second_wind()
            messages.append(f"{ctx.attacker.name}'s second wind fades.")

    return ArchetypeOutcome(damage=damage, messages=messages)


def _crit_amplifier(ctx: HitContext) -> ArchetypeOutcome:
    if not ctx.is_critical:
        return ArchetypeOutcome(damage=ctx.raw_damage)
    return ArchetypeOutcome(
        damage=ctx.raw_damage * rules.CRIT_AMPLIFIER_MULTIPLIER,
        messages=[f"{ctx.attacker.name} amplifies the critical strike! (x{rules.CRIT_AMPLIFIER_MULTIPLIER})"],
    )


def _inflict(
    ctx: HitContext,
    kind: StatusEffect,
    chance: float,
    ratio: float,
    duration: int,
    verb: str,
) -> ArchetypeOutcome:
    if not ctx.rng.chance(chance):
        return ArchetypeOutcome(damage=ctx.raw_damage)
    magnitude = int(math.floor(ctx.raw_damage * ratio))
    effect = ctx.defender_state.add_status_effect(
        kind,
        magnitude=magnitude,
        duration=duration,
        source_tag=f"{ctx.attacker.id}:{kind.value.lower()}",
    )
    logger.debug("%s inflicted %s(%d, %d turns)", ctx.attacker.id, kind.value, magnitude, duration)
    return ArchetypeOutcome(
        damage=ctx.raw_damage,
        messages=[f"{ctx.attacker.name} {verb} the target! ({magnitude} per turn, {duration} turns)"],
        inflicted=effect,
    )


def _poison(ctx: HitContext) -> ArchetypeOutcome:
    return _inflict(
        ctx,
        StatusEffect.POISON,
        chance=rules.POISON_PROC_CHANCE,
        ratio=rules.POISON_DAMAGE_RATIO,
        duration=rules.POISON_DURATION,
        verb="poisons",
    )


def _burn(ctx: HitContext) -> ArchetypeOutcome:
    return _inflict(
        ctx,
        StatusEffect.BURN,
        chance=rules.BURN_PROC_CHANCE,
        ratio=rules.BURN_DAMAGE_RATIO,
        duration=rules.BURN_DURATION,
        verb="burns",
    )


_HANDLERS: Dict[Archetype, Callable[[HitContext], ArchetypeOutcome]] = {
    Archetype.COMBO: _combo,
    Archetype.CRIT_AMPLIFIER: _crit_amplifier,
    Archetype.POISON: _poison,
    Archetype.BURN: _burn,
}


def apply_archetype_effect(
    attacker: Combatant,
    raw_damage: int,
    is_critical: bool,
    state: EncounterState,
    defender_state: EncounterState,
    rng: DiceRoller,
) -> ArchetypeOutcome:
    """Apply the attacker's archetype to one landed hit.

    Args:
        attacker: The combatant that landed the hit.
        raw_damage: Damage from the damage calculator.
        is_critical: Whether the hit was critical.
        state: Attacker's encounter state (combo / second wind live here).
        defender_state: Defender's encounter state (receives status effects).
        rng: Injected random source.

    Returns:
        ArchetypeOutcome with the final (floored) damage and log lines.
    """
    if attacker.archetype is None:
        return ArchetypeOutcome(damage=raw_damage)

    handler = _HANDLERS[attacker.archetype]
    outcome = handler(
        HitContext(
            attacker=attacker,
            raw_damage=raw_damage,
            is_critical=is_critical,
            state=state,
            defender_state=defender_state,
            rng=rng,
        )
    )
    outcome.damage = int(math.floor(outcome.damage))
    return outcome

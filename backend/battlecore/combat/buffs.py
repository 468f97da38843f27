"""Effective stats: snapshot + equipped item effects + active buffs."""
import logging
from typing import Dict, Mapping, Optional

from .models.character import CharacterSnapshot, ItemEffect
from .models.combatant import BuffType, Combatant, CombatantType
from .models.encounter_state import EncounterState

logger = logging.getLogger(__name__)


def buff_totals(state: EncounterState, now: Optional[float] = None) -> Dict[str, int]:
    """Sum unexpired buffs per stat. ALL counts toward every stat."""
    totals = {"attack": 0, "defense": 0, "speed": 0}
    for buff in state.active_buffs:
        if buff.is_expired(now):
            continue
        if buff.kind in (BuffType.ATTACK, BuffType.ALL):
            totals["attack"] += buff.magnitude
        if buff.kind in (BuffType.DEFENSE, BuffType.ALL):
            totals["defense"] += buff.magnitude
        if buff.kind in (BuffType.SPEED, BuffType.ALL):
            totals["speed"] += buff.magnitude
    return totals


def item_totals(item_ids, item_table: Mapping[str, ItemEffect]) -> ItemEffect:
    """Aggregate equipped item effects; unknown item ids are skipped."""
    total = ItemEffect()
    for item_id in item_ids:
        effect = item_table.get(item_id)
        if effect is None:
            logger.debug("No effect registered for item %s", item_id)
            continue
        total.attack += effect.attack
        total.defense += effect.defense
        total.speed += effect.speed
        total.max_health += effect.max_health
    return total


def effective_combatant(
    snapshot: CharacterSnapshot,
    state: EncounterState,
    item_table: Optional[Mapping[str, ItemEffect]] = None,
    now: Optional[float] = None,
) -> Combatant:
    """Build the encounter-scoped combatant for a stored character."""
    items = item_totals(snapshot.equipped_items, item_table or {})
    buffs = buff_totals(state, now)
    max_hp = max(1, snapshot.max_health + items.max_health)
    return Combatant(
        id=snapshot.id,
        name=snapshot.name,
        combatant_type=CombatantType.PLAYER,
        level=snapshot.level,
        hp=min(snapshot.health, max_hp),
        max_hp=max_hp,
        attack=max(0, snapshot.attack + items.attack + buffs["attack"]),
        defense=max(0, snapshot.defense + items.defense + buffs["defense"]),
        speed=max(0, snapshot.speed + items.speed + buffs["speed"]),
        archetype=snapshot.archetype,
    )

"""Speed-based turn order."""
from typing import NamedTuple

from .models.combatant import Combatant


class TurnOrder(NamedTuple):
    faster: Combatant
    slower: Combatant


def resolve_order(first: Combatant, second: Combatant) -> TurnOrder:
    """Higher speed acts first; equal or missing speed keeps argument order."""
    first_speed = first.speed or 0
    second_speed = second.speed or 0
    if second_speed > first_speed:
        return TurnOrder(faster=second, slower=first)
    return TurnOrder(faster=first, slower=second)

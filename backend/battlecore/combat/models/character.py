"""Persisted character records as seen by the combat core."""
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from .combatant import Archetype
from .encounter_state import EncounterState


class ItemEffect(BaseModel):
    """Flat stat bonus granted by an equipped item."""

    attack: int = 0
    defense: int = 0
    speed: int = 0
    max_health: int = 0


class CharacterSnapshot(BaseModel):
    """Full stat snapshot read once at encounter start."""

    id: str
    name: str
    level: int = Field(default=1, ge=1)
    experience: int = Field(default=0, ge=0)
    health: int = Field(ge=0)
    max_health: int = Field(ge=1)
    attack: int = Field(ge=0)
    defense: int = Field(ge=0)
    speed: int = Field(default=0, ge=0)
    archetype: Optional[Archetype] = None

    # Streak / record
    streak: int = Field(default=0, ge=0)
    highest_streak: int = Field(default=0, ge=0)
    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)

    coins: int = Field(default=0, ge=0)

    # Raw persisted payload; may be missing or corrupt, see EncounterState.load
    encounter_state: Any = None
    equipped_items: List[str] = Field(default_factory=list)


class CharacterUpdate(BaseModel):
    """Everything written back after one encounter, applied atomically."""

    health: int = Field(ge=0)
    max_health: int = Field(ge=1)
    level: int = Field(ge=1)
    experience: int = Field(ge=0)
    attack: int = Field(ge=0)
    defense: int = Field(ge=0)
    streak: int = Field(ge=0)
    highest_streak: int = Field(ge=0)
    wins: int = Field(ge=0)
    losses: int = Field(ge=0)
    coins: int = Field(ge=0)
    encounter_state: EncounterState = Field(default_factory=EncounterState)

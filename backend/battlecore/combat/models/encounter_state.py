"""
Per-character encounter state (combo / second wind / status effects / buffs).

This is the only combat state that outlives a single encounter. It is read
once when an encounter opens and written back once when it closes.
"""
from __future__ import annotations

import logging
import time
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError

from .combatant import BuffType, StatusEffect

logger = logging.getLogger(__name__)


class StatusEffectInstance(BaseModel):
    """Turn-decaying status effect."""

    kind: StatusEffect
    magnitude: int = Field(default=0, ge=0)
    remaining_turns: int = Field(ge=0)
    source_tag: str = ""

    def tick(self) -> bool:
        """Age by one owner-turn. Returns True once the effect has expired."""
        self.remaining_turns -= 1
        return self.remaining_turns <= 0


class ActiveBuff(BaseModel):
    """Wall-clock buff (expires_at is epoch seconds)."""

    kind: BuffType
    magnitude: int = Field(default=0, ge=0)
    expires_at: float
    source_tag: str = ""

    def is_expired(self, now: Optional[float] = None) -> bool:
        return self.expires_at <= (time.time() if now is None else now)


class EncounterState(BaseModel):
    """Combat state owned by one character."""

    combo_count: int = Field(default=0, ge=0)
    second_wind_active: bool = False
    second_wind_turns_left: int = Field(default=0, ge=0)
    status_effects: List[StatusEffectInstance] = Field(default_factory=list)
    active_buffs: List[ActiveBuff] = Field(default_factory=list)

    @classmethod
    def load(cls, payload: Any, owner_id: str = "") -> "EncounterState":
        """Parse a persisted payload, falling back to an empty state.

        Accepts a model instance, a dict or a JSON string. Missing, corrupt
        or invalid payloads are recovered locally rather than raised.
        """
        if payload is None or payload == "":
            return cls()
        if isinstance(payload, cls):
            return payload.model_copy(deep=True)
        try:
            if isinstance(payload, (str, bytes)):
                return cls.model_validate_json(payload)
            return cls.model_validate(payload)
        except (ValidationError, ValueError, TypeError):
            logger.warning("Invalid encounter state for %s, reinitializing", owner_id or "<unknown>", exc_info=True)
            return cls()

    def add_status_effect(
        self,
        kind: StatusEffect,
        magnitude: int,
        duration: int,
        source_tag: str = "",
    ) -> StatusEffectInstance:
        effect = StatusEffectInstance(
            kind=kind,
            magnitude=max(0, magnitude),
            remaining_turns=duration,
            source_tag=source_tag,
        )
        self.status_effects.append(effect)
        return effect

    def has_status_effect(self, kind: StatusEffect) -> bool:
        return any(se.kind == kind and se.remaining_turns > 0 for se in self.status_effects)

    def prune_expired_buffs(self, now: Optional[float] = None) -> int:
        """Drop expired buffs. Returns how many were removed."""
        before = len(self.active_buffs)
        self.active_buffs = [b for b in self.active_buffs if not b.is_expired(now)]
        return before - len(self.active_buffs)

    def end_second_wind(self) -> None:
        self.second_wind_active = False
        self.second_wind_turns_left = 0
        self.combo_count = 0

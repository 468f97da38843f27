"""
Character persistence seen by the battle service.

Any backing store only has to provide ``get_snapshot`` and ``commit``; the
in-memory implementation is used by the CLI and the tests.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol

from battlecore.combat.errors import CombatantNotFoundError
from battlecore.combat.models.character import CharacterSnapshot, CharacterUpdate

logger = logging.getLogger(__name__)


class CharacterRepository(Protocol):
    async def get_snapshot(self, character_id: str) -> CharacterSnapshot:
        ...

    async def commit(self, character_id: str, update: CharacterUpdate) -> CharacterSnapshot:
        ...

    async def commit_many(self, updates: Dict[str, CharacterUpdate]) -> Dict[str, CharacterSnapshot]:
        ...


class InMemoryCharacterRepository:
    """Dict-backed repository storing JSON-mode dumps, like a document store would."""

    def __init__(self, characters: Optional[Dict[str, CharacterSnapshot]] = None) -> None:
        self._records: Dict[str, Dict[str, Any]] = {}
        self._lock = asyncio.Lock()
        for character in (characters or {}).values():
            self._records[character.id] = character.model_dump(mode="json")

    async def add(self, character: CharacterSnapshot) -> None:
        async with self._lock:
            self._records[character.id] = character.model_dump(mode="json")
        logger.info("Saved character '%s' (%s)", character.name, character.id)

    async def get_snapshot(self, character_id: str) -> CharacterSnapshot:
        record = self._records.get(character_id)
        if record is None:
            raise CombatantNotFoundError(character_id)
        return CharacterSnapshot(**record)

    async def commit(self, character_id: str, update: CharacterUpdate) -> CharacterSnapshot:
        """Apply every field of ``update`` at once; nothing changes if validation fails."""
        snapshots = await self.commit_many({character_id: update})
        return snapshots[character_id]

    async def commit_many(self, updates: Dict[str, CharacterUpdate]) -> Dict[str, CharacterSnapshot]:
        """All-or-nothing commit over several characters."""
        async with self._lock:
            staged: Dict[str, Dict[str, Any]] = {}
            snapshots: Dict[str, CharacterSnapshot] = {}
            for character_id, update in updates.items():
                record = self._records.get(character_id)
                if record is None:
                    raise CombatantNotFoundError(character_id)
                merged = dict(record)
                merged.update(update.model_dump(mode="json"))
                # Validate everything before swapping so a bad update leaves all records untouched
                snapshots[character_id] = CharacterSnapshot(**merged)
                staged[character_id] = merged
            self._records.update(staged)

        logger.debug("committed %s", sorted(staged))
        return snapshots

    def raw(self, character_id: str) -> Optional[Dict[str, Any]]:
        """Stored JSON payload, mainly for inspection."""
        record = self._records.get(character_id)
        return dict(record) if record is not None else None

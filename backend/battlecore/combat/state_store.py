"""
Per-character encounter state store.

Owned by the orchestration layer and passed by handle. Opening a character
serializes every encounter touching it. The persisted snapshot is always the
source of encounter state; the cache keeps the last state this process
flushed after a successful commit.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Iterable, List, Optional

from battlecore.config import settings

from .models.character import CharacterSnapshot
from .models.encounter_state import EncounterState

logger = logging.getLogger(__name__)


class EncounterHandle:
    """Access to the states of the characters held open by one encounter."""

    def __init__(self, store: "EncounterStateStore", character_ids: Iterable[str]) -> None:
        self._store = store
        self.character_ids = tuple(character_ids)

    def _check(self, character_id: str) -> None:
        if character_id not in self.character_ids:
            raise KeyError(f"{character_id} is not held by this encounter")

    def current_state(self, snapshot: CharacterSnapshot) -> EncounterState:
        """
        Encounter state as persisted in the snapshot.

        The repository is the source of truth. The cache only tells whether
        someone else wrote the state since this process last flushed it.
        """
        self._check(snapshot.id)
        state = EncounterState.load(snapshot.encounter_state, owner_id=snapshot.id)
        cached = self._store._cache.get(snapshot.id)
        if cached is not None and cached != state:
            logger.debug("encounter state for %s changed outside this process", snapshot.id)
        return state

    def flush(self, character_id: str, state: EncounterState) -> None:
        """Publish the post-encounter state; call only after the commit succeeded."""
        self._check(character_id)
        self._store._cache[character_id] = state.model_copy(deep=True)
        logger.info(
            "encounter state flushed: %s combo=%d effects=%d buffs=%d",
            character_id,
            state.combo_count,
            len(state.status_effects),
            len(state.active_buffs),
        )


class EncounterStateStore:
    """In-memory encounter state cache with per-character locks."""

    def __init__(self, lock_timeout: Optional[float] = None) -> None:
        self.lock_timeout = lock_timeout if lock_timeout is not None else settings.state_lock_timeout
        self._locks: Dict[str, asyncio.Lock] = {}
        # Holders plus waiters per lock; the lock is dropped when this reaches zero
        self._users: Dict[str, int] = {}
        self._cache: Dict[str, EncounterState] = {}

    def _checkout(self, character_id: str) -> asyncio.Lock:
        lock = self._locks.get(character_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[character_id] = lock
        self._users[character_id] = self._users.get(character_id, 0) + 1
        return lock

    def _checkin(self, character_id: str) -> None:
        users = self._users[character_id] - 1
        if users:
            self._users[character_id] = users
        else:
            del self._users[character_id]
            del self._locks[character_id]

    @asynccontextmanager
    async def open(self, *character_ids: str) -> AsyncIterator[EncounterHandle]:
        """
        Hold the given characters for one encounter.

        Locks are taken in sorted id order so two duels over the same pair
        cannot deadlock.

        Raises:
            asyncio.TimeoutError: a lock was not acquired within lock_timeout
        """
        ordered = sorted(set(character_ids))
        locks = [self._checkout(character_id) for character_id in ordered]
        acquired = []
        try:
            for lock in locks:
                await asyncio.wait_for(lock.acquire(), timeout=self.lock_timeout)
                acquired.append(lock)
            logger.debug("encounter opened for %s", ordered)
            yield EncounterHandle(self, ordered)
        finally:
            for lock in reversed(acquired):
                lock.release()
            for character_id in ordered:
                self._checkin(character_id)

    def held(self) -> List[str]:
        """Character ids with an open or pending encounter."""
        return sorted(self._locks)

    def get(self, character_id: str) -> Optional[EncounterState]:
        """State last flushed by this process, if any."""
        state = self._cache.get(character_id)
        return state.model_copy(deep=True) if state is not None else None

    def discard(self, character_id: str) -> None:
        self._cache.pop(character_id, None)

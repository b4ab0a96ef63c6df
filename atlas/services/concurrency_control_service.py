"""
Concurrency Control Service for the Atlas game

One re-entrant lock per room id. A room operation (resolve, mutate, snapshot)
holds its room's lock for its whole duration; rooms never share a lock.
Locks exist only for rooms that were created, so unknown ids never add one.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from atlas.core.errors import ErrorCode, GameRuleError

logger = logging.getLogger(__name__)


class ConcurrencyControlService:
    """Hands out and forgets per-room locks."""

    def __init__(self):
        self._room_locks: Dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def create_room_lock(self, room_id: str) -> threading.RLock:
        """Lock for a newly created room. Calling it twice returns the same lock."""
        with self._guard:
            return self._room_locks.setdefault(room_id, threading.RLock())

    def get_room_lock(self, room_id: str) -> Optional[threading.RLock]:
        """Existing lock for ``room_id``, or None if the room has none."""
        with self._guard:
            return self._room_locks.get(room_id)

    def cleanup_room_lock(self, room_id: str) -> None:
        """Forget a destroyed room's lock. Unknown ids are ignored."""
        with self._guard:
            if self._room_locks.pop(room_id, None) is not None:
                logger.debug(f"Dropped lock for room {room_id}")

    def lock_count(self) -> int:
        with self._guard:
            return len(self._room_locks)

    @contextmanager
    def room_operation(self, room_id: str) -> Iterator[None]:
        """
        Hold ``room_id``'s lock for the body of the with-block.

        Raises:
            GameRuleError: ROOM_NOT_FOUND when no lock was created for the room
        """
        lock = self.get_room_lock(room_id)
        if lock is None:
            raise GameRuleError(ErrorCode.ROOM_NOT_FOUND, 'Room not found', {'room_id': room_id})
        with lock:
            yield

"""
Room Registry for the Atlas game

Owns every Room in the process and is the single source of truth for whether a
room exists. Callers never keep Room references between events: they pass the
room id each time and the registry resolves it under the room's lock.
"""

import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from atlas.config.game_settings import GameSettings, get_game_settings
from atlas.core.errors import ErrorCode, GameRuleError
from atlas.place_validator import PlaceValidator
from atlas.room import HistoryEntry, Player, Room
from atlas.services.concurrency_control_service import ConcurrencyControlService

logger = logging.getLogger(__name__)


def new_room_id(length: int = 6) -> str:
    """Short random room token."""
    return uuid.uuid4().hex[:length]


@dataclass
class RemovalResult:
    """Outcome of removing a player from a room."""
    player: Optional[Player]
    snapshot: Optional[Dict[str, Any]]
    room_destroyed: bool = False


class RoomRegistry:
    """Creates, resolves and destroys rooms with per-room locking."""

    def __init__(self, place_validator: PlaceValidator,
                 game_settings: Optional[GameSettings] = None,
                 id_factory: Optional[Callable[[], str]] = None):
        """
        Args:
            place_validator: Injected into every room for place-name checks
            game_settings: Room limits; defaults to the global settings
            id_factory: Room id generator; defaults to a short uuid token
        """
        self.place_validator = place_validator
        self.game_settings = game_settings or get_game_settings()
        self._id_factory = id_factory or (lambda: new_room_id(self.game_settings.room_id_length))
        self._rooms: Dict[str, Room] = {}
        self._rooms_lock = threading.RLock()
        self.concurrency_control = ConcurrencyControlService()

    # Room Lifecycle Operations

    def create_room(self) -> str:
        """
        Create an empty room and return its identifier. Never fails.
        """
        with self._rooms_lock:
            room_id = self._id_factory()
            while room_id in self._rooms:
                logger.warning(f"Room id collision on {room_id}, generating another")
                room_id = self._id_factory()

            self._rooms[room_id] = Room(
                room_id,
                self.place_validator,
                max_players=self.game_settings.max_players_per_room,
                host_only_start=self.game_settings.host_only_start
            )
            self.concurrency_control.create_room_lock(room_id)
            logger.info(f"Created room {room_id}")
            return room_id

    def get_room(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    def require_room(self, room_id: str) -> Room:
        """
        Resolve a room or raise.

        Raises:
            GameRuleError: ROOM_NOT_FOUND
        """
        room = self._rooms.get(room_id)
        if room is None:
            raise GameRuleError(ErrorCode.ROOM_NOT_FOUND, 'Room not found', {'room_id': room_id})
        return room

    def remove_room(self, room_id: str) -> bool:
        """
        Delete a room. Idempotent.

        Returns:
            True if a room was deleted, False if it didn't exist
        """
        with self._rooms_lock:
            removed = self._rooms.pop(room_id, None) is not None
        if removed:
            self.concurrency_control.cleanup_room_lock(room_id)
            logger.info(f"Deleted room {room_id}")
        return removed

    def room_exists(self, room_id: str) -> bool:
        return room_id in self._rooms

    def get_all_room_ids(self) -> List[str]:
        with self._rooms_lock:
            return list(self._rooms.keys())

    @contextmanager
    def room_operation(self, room_id: str) -> Iterator[Room]:
        """Hold the room's lock and yield the room, re-resolved inside the lock."""
        with self.concurrency_control.room_operation(room_id):
            yield self.require_room(room_id)

    # Room State Operations

    def get_room_state(self, room_id: str) -> Optional[Dict[str, Any]]:
        """Snapshot of a room, or None if it doesn't exist."""
        lock = self.concurrency_control.get_room_lock(room_id)
        if lock is None:
            return None
        with lock:
            room = self._rooms.get(room_id)
            return room.to_dict() if room else None

    def get_stats(self) -> Dict[str, int]:
        with self._rooms_lock:
            rooms = list(self._rooms.values())
        return {
            'rooms': len(rooms),
            'players': sum(len(room.players) for room in rooms),
            'games_in_progress': sum(1 for room in rooms if room.started)
        }

    # Player and Turn Operations

    def create_room_for_player(self, connection_id: str, username: str) -> Tuple[str, Dict[str, Any]]:
        """
        Create a room with ``connection_id`` as its first player and host.

        Returns:
            Tuple of (room_id, snapshot)
        """
        room_id = self.create_room()
        with self.room_operation(room_id) as room:
            room.add_player(connection_id, username)
            return room_id, room.to_dict()

    def add_player(self, room_id: str, connection_id: str, username: str) -> Dict[str, Any]:
        """
        Add a player to an existing room.

        Raises:
            GameRuleError: ROOM_NOT_FOUND, GAME_ALREADY_STARTED, ROOM_FULL or ALREADY_IN_ROOM
        """
        with self.room_operation(room_id) as room:
            room.add_player(connection_id, username)
            return room.to_dict()

    def start_game(self, room_id: str, connection_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Start the room's game. Starting a running game changes nothing.

        Raises:
            GameRuleError: ROOM_NOT_FOUND or NOT_HOST
        """
        with self.room_operation(room_id) as room:
            room.start(connection_id)
            return room.to_dict()

    def submit_place(self, room_id: str, connection_id: str, place_name: str) -> Tuple[HistoryEntry, Dict[str, Any]]:
        """
        Submit a play for the acting connection.

        Returns:
            Tuple of (accepted history entry, snapshot)

        Raises:
            GameRuleError: ROOM_NOT_FOUND, NOT_YOUR_TURN, INVALID_PLACE, WRONG_LETTER or ALREADY_USED
        """
        with self.room_operation(room_id) as room:
            entry = room.submit(connection_id, place_name)
            return entry, room.to_dict()

    def remove_player(self, room_id: str, connection_id: str) -> RemovalResult:
        """
        Remove a player, destroying the room if it becomes empty.

        Unknown rooms and non-members yield a result with no player.
        """
        lock = self.concurrency_control.get_room_lock(room_id)
        if lock is None:
            return RemovalResult(player=None, snapshot=None)
        with lock:
            room = self._rooms.get(room_id)
            if room is None:
                return RemovalResult(player=None, snapshot=None)

            player = room.remove_player(connection_id)
            if player is None:
                return RemovalResult(player=None, snapshot=room.to_dict())

            if not room.is_empty:
                return RemovalResult(player=player, snapshot=room.to_dict())

            with self._rooms_lock:
                self._rooms.pop(room_id, None)

        self.concurrency_control.cleanup_room_lock(room_id)
        logger.info(f"Room {room_id} is empty and was destroyed")
        return RemovalResult(player=player, snapshot=None, room_destroyed=True)

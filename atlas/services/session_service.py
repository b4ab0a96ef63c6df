"""
Session Service - Binds Socket.IO connections to room memberships.

This service handles:
- Connection to room binding, at most one room per connection
- Explicit release of a binding on leave or disconnect
- Session lookup by connection
"""

import logging
import threading
from typing import Dict, Optional

from atlas.core.errors import ErrorCode, ValidationError

logger = logging.getLogger(__name__)


class SessionService:
    """Manages connection sessions. A binding must be removed before it can be replaced."""

    def __init__(self):
        """Initialize the session service."""
        # socket_id -> {'room_id': ..., 'username': ...}
        self._sessions: Dict[str, Dict[str, str]] = {}
        self._lock = threading.Lock()
        logger.info("SessionService initialized")

    def create_session(self, socket_id: str, room_id: str, username: str) -> None:
        """Bind a connection to a room.

        Args:
            socket_id: Socket.IO connection ID
            room_id: Room the connection joined
            username: Display name used in that room

        Raises:
            ValidationError: ALREADY_IN_ROOM if the connection is already bound
        """
        with self._lock:
            existing = self._sessions.get(socket_id)
            if existing is not None:
                raise ValidationError(
                    ErrorCode.ALREADY_IN_ROOM,
                    'You are already in a room. Leave it first.',
                    {'room_id': existing['room_id']}
                )
            self._sessions[socket_id] = {
                'room_id': room_id,
                'username': username
            }
        logger.debug(f"Bound connection {socket_id} ({username}) to room {room_id}")

    def get_session(self, socket_id: str) -> Optional[Dict[str, str]]:
        """Get session information by connection ID, or None if unbound."""
        return self._sessions.get(socket_id)

    def remove_session(self, socket_id: str) -> Optional[Dict[str, str]]:
        """Release a connection's binding.

        Returns:
            The removed session info or None if not found
        """
        with self._lock:
            session_info = self._sessions.pop(socket_id, None)
        if session_info:
            logger.debug(f"Released connection {socket_id} from room {session_info['room_id']}")
        return session_info

    def get_sessions_count(self) -> int:
        return len(self._sessions)

"""
Broadcast Service - Centralized Socket.IO message broadcasting.

This service handles all outbound emissions:
- Room-wide snapshot broadcasts (updateRoom, gameStarted, updateGame, playerLeft)
- Targeted messages to a single connection (roomState, error)

Delivery is fire-and-forget; emit failures are logged and never propagate.
"""

import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


class BroadcastService:
    """Centralized service for all Socket.IO broadcasting operations."""

    def __init__(self, socketio, room_registry):
        """Initialize the broadcast service.

        Args:
            socketio: Flask-SocketIO instance for emitting messages
            room_registry: Room registry used to load snapshots
        """
        self.socketio = socketio
        self.room_registry = room_registry

    # Core emission methods

    def emit_to_room(self, event: str, data: Any, room_id: str):
        """Emit an event to every connection joined to a room."""
        try:
            self.socketio.emit(event, data, to=room_id)
            logger.debug(f'Emitted {event} to room {room_id}')
        except Exception as e:
            logger.error(f'Error emitting {event} to room {room_id}: {e}')

    def emit_to_player(self, event: str, data: Any, socket_id: str):
        """Emit an event to a single connection."""
        try:
            self.socketio.emit(event, data, to=socket_id)
            logger.debug(f'Emitted {event} to player {socket_id}')
        except Exception as e:
            logger.error(f'Error emitting {event} to player {socket_id}: {e}')

    def emit_error_to_player(self, message: str, socket_id: str):
        """Send a human-readable rejection reason to one connection."""
        self.emit_to_player('error', message, socket_id)

    # High-level broadcast methods

    def broadcast_room_update(self, room_id: str, snapshot: Dict[str, Any]):
        """Membership changed in the lobby."""
        self.emit_to_room('updateRoom', snapshot, room_id)

    def broadcast_game_started(self, room_id: str, snapshot: Dict[str, Any]):
        self.emit_to_room('gameStarted', snapshot, room_id)

    def broadcast_game_update(self, room_id: str, snapshot: Dict[str, Any]):
        """A play was accepted."""
        self.emit_to_room('updateGame', snapshot, room_id)

    def broadcast_player_left(self, room_id: str, username: str, snapshot: Dict[str, Any]):
        """Tell the remaining players who left, with the repaired room state."""
        self.emit_to_room('playerLeft', {
            'username': username,
            'room': snapshot
        }, room_id)

    def send_room_state_to_player(self, room_id: str, socket_id: str):
        """Send the current snapshot to one connection."""
        snapshot = self.room_registry.get_room_state(room_id)
        if snapshot is None:
            self.emit_error_to_player('Room not found', socket_id)
            return
        self.emit_to_player('roomState', snapshot, socket_id)

"""
Room Connection Handler

This module handles Socket.IO events related to room membership:
creating rooms, joining rooms, leaving rooms, and getting room state.
"""

import logging

from atlas.core.errors import ValidationError
from atlas.services.error_response_factory import with_error_handling, with_ack_error_handling
from .base_handler import BaseRoomHandler

logger = logging.getLogger(__name__)


class RoomConnectionHandler(BaseRoomHandler):
    """Handler for room membership operations like create, join, leave, and state retrieval."""

    @with_ack_error_handling
    def handle_create_room(self, data):
        """
        Handle a player creating a new room. The creator becomes its first player.

        Expected data: the username string.

        Returns:
            Ack payload: {'success': True, 'roomId': ...}
        """
        self.log_handler_start('handle_create_room', data)

        self.require_no_session()
        username = self.validation_service.validate_username(data)

        room_id, snapshot = self.room_registry.create_room_for_player(self.sid, username)
        self._bind_session(room_id, username)
        self.join_socketio_room(room_id)

        self.log_handler_success('handle_create_room', f'Player {username} created room {room_id}')

        self.broadcast_service.broadcast_room_update(room_id, snapshot)

        return self.error_response_factory.create_success_response({'roomId': room_id})

    @with_ack_error_handling
    def handle_join_room(self, data):
        """
        Handle a player joining an existing room.

        Expected data format:
        {
            'roomId': 'ab12cd',
            'username': 'display name'
        }

        Returns:
            Ack payload: {'success': True, 'roomData': snapshot}
        """
        self.log_handler_start('handle_join_room', data)

        self.require_no_session()
        room_id, username = self.validation_service.validate_join_data(data)

        snapshot = self.room_registry.add_player(room_id, self.sid, username)
        self._bind_session(room_id, username)
        self.join_socketio_room(room_id)

        self.log_handler_success('handle_join_room', f'Player {username} joined room {room_id}')

        self.broadcast_service.broadcast_room_update(room_id, snapshot)

        return self.error_response_factory.create_success_response({'roomData': snapshot})

    @with_error_handling
    def handle_leave_room(self, data=None):
        """Handle a player leaving their current room."""
        self.log_handler_start('handle_leave_room', data)

        session_info = self.require_session()
        room_id = session_info['room_id']
        username = session_info['username']

        result = self.room_registry.remove_player(room_id, self.sid)

        self.leave_socketio_room(room_id)
        self.session_service.remove_session(self.sid)

        self.log_handler_success('handle_leave_room', f'Player {username} left room {room_id}')

        if not result.room_destroyed and result.player is not None:
            self.broadcast_service.broadcast_player_left(room_id, result.player.username, result.snapshot)

        return self.error_response_factory.create_success_response()

    @with_error_handling
    def handle_get_room_state(self, data=None):
        """Send the current snapshot of the requester's room to the requester."""
        self.log_handler_start('handle_get_room_state', data)

        session_info = self.require_session()
        self.broadcast_service.send_room_state_to_player(session_info['room_id'], self.sid)

        self.log_handler_success('handle_get_room_state')

    def _bind_session(self, room_id: str, username: str) -> None:
        """
        Bind the requester to the room it was just added to.

        If another event bound the connection first, the player entry is
        taken back out so no member is left without a session.
        """
        try:
            self.session_service.create_session(self.sid, room_id, username)
        except ValidationError:
            self.room_registry.remove_player(room_id, self.sid)
            logger.warning(f"Rolled back {self.sid} from room {room_id}: connection already bound")
            raise

"""
Game Action Handler

This module handles Socket.IO events related to game actions:
starting the game and submitting places.
"""

import logging

from atlas.services.error_response_factory import with_error_handling
from .base_handler import BaseGameHandler

logger = logging.getLogger(__name__)


class GameActionHandler(BaseGameHandler):
    """Handler for game actions like starting the game and submitting places."""

    @with_error_handling
    def handle_start_game(self, data=None):
        """
        Handle a request to start the game in the requester's room.

        Starting a game that is already running changes nothing; the current
        state is broadcast again.
        """
        self.log_handler_start('handle_start_game', data)

        session_info = self.require_session()
        room_id = session_info['room_id']

        snapshot = self.room_registry.start_game(room_id, self.sid)

        self.log_handler_success('handle_start_game', f'Game running in room {room_id}')

        self.broadcast_service.broadcast_game_started(room_id, snapshot)

    @with_error_handling
    def handle_submit_place(self, data):
        """
        Handle a place submission for the requester's turn.

        Expected data: the place name string.
        Rejections are sent as an ``error`` event to the requester only.
        """
        self.log_handler_start('handle_submit_place', data)

        session_info = self.require_session()
        room_id = session_info['room_id']

        place_name = self.validation_service.validate_place_name(data)
        self.require_started(room_id)

        entry, snapshot = self.room_registry.submit_place(room_id, self.sid, place_name)

        self.log_handler_success(
            'handle_submit_place',
            f'{entry.player} played {entry.place} in room {room_id}'
        )

        self.broadcast_service.broadcast_game_update(room_id, snapshot)

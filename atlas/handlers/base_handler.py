"""
Base Handler Classes

Shared plumbing for the Socket.IO handler classes: service lookup through the
container, the requester's connection id, and the session guards every event
starts with.
"""

import logging
from abc import ABC
from typing import Any, Dict, Optional
from flask import request
from flask_socketio import join_room, leave_room

from container import get_container
from atlas.core.errors import ErrorCode, GameRuleError, ValidationError

logger = logging.getLogger(__name__)


class BaseHandler(ABC):
    """
    Services are looked up on every access rather than cached, so a handler
    created at start-up follows the container when tests reconfigure it.
    """

    def _service(self, name: str):
        return get_container().get(name)

    @property
    def room_registry(self):
        return self._service('RoomRegistry')

    @property
    def validation_service(self):
        return self._service('ValidationService')

    @property
    def error_response_factory(self):
        return self._service('ErrorResponseFactory')

    @property
    def session_service(self):
        return self._service('SessionService')

    @property
    def broadcast_service(self):
        return self._service('BroadcastService')

    @property
    def sid(self) -> str:
        """Connection id of the client whose event is being handled."""
        return request.sid  # type: ignore[attr-defined]

    def get_current_session(self) -> Optional[Dict[str, Any]]:
        return self.session_service.get_session(self.sid)

    def require_session(self) -> Dict[str, Any]:
        """
        Session of the requester.

        Raises:
            ValidationError: NOT_IN_ROOM
        """
        session_info = self.get_current_session()
        if not session_info:
            raise ValidationError(ErrorCode.NOT_IN_ROOM, 'You are not currently in a room')
        return session_info

    def require_no_session(self) -> None:
        """
        Raises:
            ValidationError: ALREADY_IN_ROOM
        """
        session_info = self.get_current_session()
        if session_info:
            raise ValidationError(
                ErrorCode.ALREADY_IN_ROOM,
                'You are already in a room. Leave it first.',
                {'room_id': session_info['room_id']}
            )

    def log_handler_start(self, handler_name: str, data: Any = None) -> None:
        logger.info(f'{handler_name} <- {self.sid}')
        if data is not None:
            logger.debug(f'{handler_name} data: {data!r}')

    def log_handler_success(self, handler_name: str, message: Optional[str] = None) -> None:
        suffix = f': {message}' if message else ''
        logger.info(f'{handler_name} ok for {self.sid}{suffix}')


class RoomHandlerMixin:
    """Socket.IO room membership, used as the broadcast target for a game room."""

    def join_socketio_room(self, room_id: str) -> None:
        join_room(room_id)
        logger.debug(f'{request.sid} joined Socket.IO room {room_id}')  # type: ignore[attr-defined]

    def leave_socketio_room(self, room_id: str) -> None:
        leave_room(room_id)
        logger.debug(f'{request.sid} left Socket.IO room {room_id}')  # type: ignore[attr-defined]


class BaseRoomHandler(BaseHandler, RoomHandlerMixin):
    """Base class for handlers that change room membership."""
    pass


class BaseGameHandler(BaseHandler):
    """Base class for handlers that act on a room's game."""

    def require_started(self, room_id: str) -> None:
        """
        Raises:
            GameRuleError: ROOM_NOT_FOUND, or GAME_NOT_STARTED while the room is in the lobby
        """
        room = self.room_registry.require_room(room_id)
        if not room.started:
            raise GameRuleError(ErrorCode.GAME_NOT_STARTED, 'Game has not started yet')

"""
Socket.IO event handlers for the Atlas game.

This module provides the registration function and the connection/disconnection
handlers. Game events are routed through the SocketEventRouter to the handler
classes.
"""

import logging
from flask import request
from flask_socketio import emit

from container import get_container
from .socket_event_router import setup_router
from .room_connection_handler import RoomConnectionHandler
from .game_action_handler import GameActionHandler

logger = logging.getLogger(__name__)


def register_socket_handlers(socketio_instance):
    """Register every Socket.IO event handler with the SocketIO instance."""
    router = setup_router()

    room_handler = RoomConnectionHandler()
    game_handler = GameActionHandler()

    # Connection lifecycle events bypass the router
    socketio_instance.on_event('connect', handle_connect)
    socketio_instance.on_event('disconnect', handle_disconnect)

    router.register_route('createRoom', room_handler.handle_create_room)
    router.register_route('joinRoom', room_handler.handle_join_room)
    router.register_route('leaveRoom', room_handler.handle_leave_room)
    router.register_route('getRoomState', room_handler.handle_get_room_state)

    router.register_route('startGame', game_handler.handle_start_game)
    router.register_route('submitPlace', game_handler.handle_submit_place)

    router.register_with_socketio(socketio_instance)

    logger.info(f"Registered {len(router.get_registered_events())} socket event handlers")
    return router


def handle_connect(auth=None):
    """Handle client connection with Origin enforcement in production."""
    app_config = get_container().get_app_config()

    origin = request.headers.get('Origin')
    if app_config.is_production:
        allowed = set(app_config.allowed_origins)
        if '*' not in allowed and origin and origin not in allowed:
            logger.warning(f'Rejecting connection from disallowed Origin: {origin}')
            return False
    logger.info(f'Client connected: {request.sid} from Origin: {origin}')
    emit('connected', {'status': 'Connected to Atlas server'})


def handle_disconnect(reason=None):
    """A disconnect removes the player from their room permanently."""
    container = get_container()
    session_service = container.get('SessionService')
    room_registry = container.get('RoomRegistry')
    broadcast_service = container.get('BroadcastService')

    sid = request.sid
    logger.info(f'Client disconnected: {sid}')

    session_info = session_service.remove_session(sid)
    if not session_info:
        return

    room_id = session_info['room_id']
    result = room_registry.remove_player(room_id, sid)
    if result.player is None:
        return

    if result.room_destroyed:
        logger.info(f'Last player left, room {room_id} destroyed')
    else:
        broadcast_service.broadcast_player_left(room_id, result.player.username, result.snapshot)

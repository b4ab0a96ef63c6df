"""
Unit tests for Socket.IO handler registration and room membership handlers.
"""

import pytest
from unittest.mock import MagicMock, Mock, patch

from atlas.core.errors import ErrorCode
from atlas.handlers.room_connection_handler import RoomConnectionHandler
from atlas.handlers.socket_handlers import handle_connect, handle_disconnect, register_socket_handlers


class TestRegisterSocketHandlers:

    def test_registers_every_event(self):
        socketio = Mock()

        router = register_socket_handlers(socketio)

        assert sorted(router.get_registered_events()) == [
            'createRoom', 'getRoomState', 'joinRoom', 'leaveRoom', 'startGame', 'submitPlace'
        ]
        registered = [c.args[0] for c in socketio.on_event.call_args_list]
        assert registered[:2] == ['connect', 'disconnect']
        assert set(registered[2:]) == set(router.get_registered_events())
        socketio.on_event.assert_any_call('connect', handle_connect)
        socketio.on_event.assert_any_call('disconnect', handle_disconnect)


class TestSessionBindRollback:
    """A connection bound by a concurrent event must not stay in a second room."""

    @pytest.fixture(autouse=True)
    def racing_request(self, session_service):
        with patch('atlas.handlers.base_handler.request', new=MagicMock()) as request:
            request.sid = 'sid1'
            # Another event from the same connection already passed the guard and bound it
            with patch.object(RoomConnectionHandler, 'require_no_session'):
                session_service.create_session('sid1', 'elsewhere', 'Alice')
                yield

    def test_join_is_rolled_back(self, room_registry, session_service):
        room_id, _ = room_registry.create_room_for_player('sid0', 'Host')

        ack = RoomConnectionHandler().handle_join_room({'roomId': room_id, 'username': 'Alice'})

        assert ack['success'] is False
        assert ack['code'] == ErrorCode.ALREADY_IN_ROOM.value
        assert [p['id'] for p in room_registry.get_room_state(room_id)['players']] == ['sid0']
        assert session_service.get_session('sid1')['room_id'] == 'elsewhere'

    def test_create_is_rolled_back(self, room_registry):
        ack = RoomConnectionHandler().handle_create_room('Alice')

        assert ack['success'] is False
        assert ack['code'] == ErrorCode.ALREADY_IN_ROOM.value
        assert room_registry.get_stats()['rooms'] == 0
        assert room_registry.concurrency_control.lock_count() == 0

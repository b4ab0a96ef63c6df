"""
Unit tests for the Socket.IO event router.
"""

import pytest
from unittest.mock import MagicMock, Mock, patch

from atlas.handlers.socket_event_router import (
    EventRouteNotFoundError,
    SocketEventRouter,
    setup_router,
)


@pytest.fixture(autouse=True)
def mock_request():
    with patch('atlas.handlers.socket_event_router.request', new=MagicMock()) as request:
        request.sid = 'sid1'
        yield request


class TestSocketEventRouter:

    def setup_method(self):
        self.router = SocketEventRouter()

    def test_route_result_is_returned(self):
        handler = Mock(return_value={'success': True}, __name__='handler')
        self.router.register_route('createRoom', handler)

        assert self.router.handle_event('createRoom', 'Alice') == {'success': True}
        handler.assert_called_once_with('Alice')

    def test_unknown_event(self):
        with pytest.raises(EventRouteNotFoundError):
            self.router.handle_event('nope')

    def test_middleware_can_rewrite_data(self):
        handler = Mock(return_value=None, __name__='handler')
        self.router.register_route('submitPlace', handler)

        def upper(event_name, data):
            return data.upper()

        self.router.add_middleware(upper)
        self.router.handle_event('submitPlace', 'peru')

        handler.assert_called_once_with('PERU')

    def test_handler_errors_propagate(self):
        self.router.register_route('boom', Mock(side_effect=RuntimeError('x'), __name__='boom'))

        with pytest.raises(RuntimeError):
            self.router.handle_event('boom')

    def test_register_with_socketio(self):
        socketio = Mock()
        handler = Mock(return_value='ack', __name__='handler')
        self.router.register_route('getRoomState', handler)

        self.router.register_with_socketio(socketio)

        event_name, bound = socketio.on_event.call_args.args
        assert event_name == 'getRoomState'
        assert bound() == 'ack'
        handler.assert_called_once_with(None)

    def test_setup_router_returns_fresh_router(self):
        router = setup_router()

        assert router is not setup_router()
        assert router.get_registered_events() == []

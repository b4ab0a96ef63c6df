"""
Unit tests for SessionService connection-to-room bindings.
"""

import pytest

from atlas.core.errors import ErrorCode, ValidationError
from atlas.services.session_service import SessionService


class TestSessionService:

    def setup_method(self):
        self.session_service = SessionService()

    def test_create_and_get_session(self):
        self.session_service.create_session('sid1', 'room1', 'Alice')

        assert self.session_service.get_session('sid1') == {'room_id': 'room1', 'username': 'Alice'}
        assert self.session_service.get_sessions_count() == 1

    def test_unknown_session(self):
        assert self.session_service.get_session('nope') is None

    def test_binding_is_single_assignment(self):
        self.session_service.create_session('sid1', 'room1', 'Alice')

        with pytest.raises(ValidationError) as exc_info:
            self.session_service.create_session('sid1', 'room2', 'Alice')

        assert exc_info.value.code == ErrorCode.ALREADY_IN_ROOM
        assert exc_info.value.details == {'room_id': 'room1'}
        assert self.session_service.get_session('sid1')['room_id'] == 'room1'

    def test_remove_session_allows_rebinding(self):
        self.session_service.create_session('sid1', 'room1', 'Alice')

        removed = self.session_service.remove_session('sid1')
        self.session_service.create_session('sid1', 'room2', 'Alice')

        assert removed == {'room_id': 'room1', 'username': 'Alice'}
        assert self.session_service.get_session('sid1')['room_id'] == 'room2'

    def test_remove_unknown_session(self):
        assert self.session_service.remove_session('nope') is None
        assert self.session_service.get_sessions_count() == 0

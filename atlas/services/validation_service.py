"""
Validation Service for the Atlas game

Checks the shape of inbound Socket.IO payloads before they reach a room.
Game rules (turns, letters, duplicates) are the room's business, not this one.
"""

import logging
import re
from typing import Any, Dict, Iterable, Optional, Tuple

from atlas.config.game_settings import GameSettings, get_game_settings
from atlas.core.errors import ErrorCode, ValidationError

logger = logging.getLogger(__name__)


class ValidationService:
    """Payload checks for room ids, usernames and place submissions."""

    MAX_ROOM_ID_LENGTH = 50
    ROOM_ID_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')

    # Error raised when a required join field is absent
    MISSING_FIELD_ERRORS = {
        'roomId': (ErrorCode.MISSING_ROOM_ID, "Room ID is required"),
        'username': (ErrorCode.MISSING_PLAYER_NAME, "Username is required"),
    }

    def __init__(self, game_settings: Optional[GameSettings] = None):
        self.game_settings = game_settings or get_game_settings()

    def validate_room_id(self, room_id: Any) -> str:
        """
        Returns:
            The room id without surrounding whitespace

        Raises:
            ValidationError: MISSING_ROOM_ID or INVALID_ROOM_ID
        """
        if not isinstance(room_id, str) or not room_id.strip():
            raise ValidationError(ErrorCode.MISSING_ROOM_ID, "Room ID is required")

        room_id = room_id.strip()
        if len(room_id) > self.MAX_ROOM_ID_LENGTH:
            raise ValidationError(
                ErrorCode.INVALID_ROOM_ID,
                f"Room ID must be {self.MAX_ROOM_ID_LENGTH} characters or less",
                {"max_length": self.MAX_ROOM_ID_LENGTH, "actual_length": len(room_id)}
            )
        if not self.ROOM_ID_PATTERN.match(room_id):
            raise ValidationError(
                ErrorCode.INVALID_ROOM_ID,
                "Room ID can only contain letters, numbers, hyphens, and underscores"
            )
        return room_id

    def validate_username(self, username: Any) -> str:
        """
        Display names are trimmed and length-capped. Two players may share one.

        Raises:
            ValidationError: MISSING_PLAYER_NAME or PLAYER_NAME_TOO_LONG
        """
        if not isinstance(username, str) or not username.strip():
            raise ValidationError(ErrorCode.MISSING_PLAYER_NAME, "Username is required")

        username = username.strip()
        limit = self.game_settings.max_player_name_length
        if len(username) > limit:
            raise ValidationError(
                ErrorCode.PLAYER_NAME_TOO_LONG,
                f"Username must be {limit} characters or less",
                {"max_length": limit, "actual_length": len(username)}
            )
        return username

    def validate_place_name(self, place_name: Any) -> str:
        """
        Only the type and length are checked; the value is returned as sent.

        Raises:
            ValidationError: INVALID_DATA or PLACE_NAME_TOO_LONG
        """
        if not isinstance(place_name, str):
            raise ValidationError(ErrorCode.INVALID_DATA, "Place name must be a string")

        limit = self.game_settings.max_place_name_length
        if len(place_name.strip()) > limit:
            raise ValidationError(
                ErrorCode.PLACE_NAME_TOO_LONG,
                f"Place name must be {limit} characters or less",
                {"max_length": limit}
            )
        return place_name

    def validate_join_data(self, data: Any) -> Tuple[str, str]:
        """
        Check a joinRoom payload of the form ``{'roomId': ..., 'username': ...}``.

        Returns:
            Tuple of (room_id, username)
        """
        data = self.validate_socket_data(data, ('roomId', 'username'))
        return self.validate_room_id(data['roomId']), self.validate_username(data['username'])

    def validate_socket_data(self, data: Any, required_fields: Iterable[str] = ()) -> Dict:
        """
        Require a dict payload holding ``required_fields``.

        A single missing join field gets its specific error code; anything
        else missing is reported as INVALID_DATA.
        """
        if not isinstance(data, dict):
            raise ValidationError(ErrorCode.INVALID_DATA, "Invalid data format - expected dictionary")

        missing = [name for name in required_fields if name not in data]
        if len(missing) == 1 and missing[0] in self.MISSING_FIELD_ERRORS:
            code, message = self.MISSING_FIELD_ERRORS[missing[0]]
            raise ValidationError(code, message)
        if missing:
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                f"Missing required fields: {', '.join(missing)}",
                {"missing_fields": missing}
            )
        return data

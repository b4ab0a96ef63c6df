"""
Core error definitions for the Atlas game server

Provides error codes and the exceptions raised by room operations and payload
validation. Nothing here depends on other services.
"""

from enum import Enum
from typing import Dict, Optional


class ErrorCode(Enum):
    """Standardized error codes for the application."""

    # Payload Errors
    INVALID_DATA = "INVALID_DATA"
    MISSING_ROOM_ID = "MISSING_ROOM_ID"
    INVALID_ROOM_ID = "INVALID_ROOM_ID"
    MISSING_PLAYER_NAME = "MISSING_PLAYER_NAME"
    PLAYER_NAME_TOO_LONG = "PLAYER_NAME_TOO_LONG"
    PLACE_NAME_TOO_LONG = "PLACE_NAME_TOO_LONG"

    # Session Errors
    ALREADY_IN_ROOM = "ALREADY_IN_ROOM"
    NOT_IN_ROOM = "NOT_IN_ROOM"

    # Room Management Errors
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_FULL = "ROOM_FULL"
    GAME_ALREADY_STARTED = "GAME_ALREADY_STARTED"
    NOT_HOST = "NOT_HOST"

    # Turn Errors
    GAME_NOT_STARTED = "GAME_NOT_STARTED"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    INVALID_PLACE = "INVALID_PLACE"
    WRONG_LETTER = "WRONG_LETTER"
    ALREADY_USED = "ALREADY_USED"

    # System Errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AtlasError(Exception):
    """Base class for errors reported back to the originating connection."""

    def __init__(self, code: ErrorCode, message: str, details: Optional[Dict] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(AtlasError):
    """Raised when an inbound payload is malformed."""


class GameRuleError(AtlasError):
    """Raised when a room operation is rejected. Room state is left unchanged."""

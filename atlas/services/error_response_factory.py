"""
Error Response Factory for the Atlas game

Provides standardized ack payloads and error emission, plus the decorators
socket handlers use to turn raised errors into client-facing responses.
"""

import logging
import traceback
from functools import wraps
from typing import Any, Dict, Optional

from flask_socketio import emit

from atlas.core.errors import AtlasError, ErrorCode

logger = logging.getLogger(__name__)


class ErrorResponseFactory:
    """Factory responsible for creating standardized error and success responses."""

    def create_success_response(self, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Create a success ack.

        Args:
            data: Fields merged into the ack alongside ``success``

        Returns:
            e.g. {'success': True, 'roomId': 'ab12cd'}
        """
        response = {'success': True}
        response.update(data or {})
        return response

    def create_error_response(self, code: ErrorCode, message: str, details: Optional[Dict] = None) -> Dict[str, Any]:
        """
        Create a failure ack.

        Args:
            code: Error code enum
            message: Human-readable error message
            details: Optional additional error details

        Returns:
            {'success': False, 'message': ..., 'code': ..., 'details': {...}}
        """
        return {
            'success': False,
            'message': message,
            'code': code.value,
            'details': details or {}
        }

    def emit_error(self, code: ErrorCode, message: str):
        """
        Emit an ``error`` event carrying the reason string to the requesting client.
        """
        logger.warning(f"Emitting error: {code.value} - {message}")
        emit('error', message)

    def handle_exception(self, e: Exception, context: str = "Unknown") -> tuple:
        """
        Map an exception to an error code and client-safe message.

        Returns:
            Tuple of (error_code, error_message)
        """
        if isinstance(e, AtlasError):
            return e.code, e.message

        logger.error(f"Unexpected exception in {context}: {str(e)}")
        logger.error(f"Exception traceback: {traceback.format_exc()}")

        return ErrorCode.INTERNAL_ERROR, "An internal error occurred"


def with_error_handling(func):
    """
    Decorator for Socket.IO event handlers whose failures are reported as an
    ``error`` event to the sender.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            factory = ErrorResponseFactory()
            error_code, error_message = factory.handle_exception(e, func.__name__)
            factory.emit_error(error_code, error_message)
            return None

    return wrapper


def with_ack_error_handling(func):
    """
    Decorator for Socket.IO event handlers that answer through the ack
    callback; failures become a ``{'success': False, ...}`` ack.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            factory = ErrorResponseFactory()
            error_code, error_message = factory.handle_exception(e, func.__name__)
            details = e.details if isinstance(e, AtlasError) else None
            logger.info(f"{func.__name__} rejected: {error_code.value} - {error_message}")
            return factory.create_error_response(error_code, error_message, details)

    return wrapper

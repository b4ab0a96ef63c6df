"""
Services package for the Atlas game

Contains the service classes wired together by the service container.
"""

from .broadcast_service import BroadcastService
from .concurrency_control_service import ConcurrencyControlService
from .error_response_factory import ErrorResponseFactory
from .session_service import SessionService
from .validation_service import ValidationService

__all__ = [
    'BroadcastService',
    'ConcurrencyControlService',
    'ErrorResponseFactory',
    'SessionService',
    'ValidationService'
]

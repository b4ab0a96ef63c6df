"""
Global pytest configuration and fixtures.
Provides service fixtures for proper dependency injection in tests.
"""

import pytest
import os

from tests.helpers.room_helpers import TEST_PLACES

# Ensure testing environment
os.environ.setdefault('FLASK_ENV', 'testing')


@pytest.fixture(scope="function", autouse=True)
def reset_global_container():
    """Reset the global container before each test to ensure clean state."""
    from container import reset_container, configure_container
    from config_factory import ConfigurationFactory
    from atlas.config.game_settings import reset_game_settings
    from atlas.place_validator import StaticPlaceValidator

    reset_container()
    reset_game_settings()

    # Reconfigure against the real app socketio so integration clients see broadcasts
    from app import socketio as app_socketio
    config_factory = ConfigurationFactory()
    config_factory.reset()
    config_factory.load_from_environment()
    configure_container(
        socketio=app_socketio,
        config=config_factory.to_dict(),
        overrides={'PlaceValidator': StaticPlaceValidator(TEST_PLACES)}
    )

    yield


@pytest.fixture(scope="function")
def container():
    """The configured global service container."""
    from container import get_container
    return get_container()


@pytest.fixture(scope="function")
def room_registry(container):
    """Provide RoomRegistry through dependency injection."""
    return container.get('RoomRegistry')


@pytest.fixture(scope="function")
def session_service(container):
    """Provide SessionService through dependency injection."""
    return container.get('SessionService')

"""
Unit tests for the service container.
"""

import pytest

from atlas.place_validator import StaticPlaceValidator
from atlas.room_registry import RoomRegistry
from container import (
    CircularDependencyError,
    ServiceContainer,
    ServiceLifecycle,
    ServiceNotFoundError,
    configure_container,
    get_container,
)
from tests.helpers.socket_mocks import create_mock_socketio


class Counter:
    instances = 0

    def __init__(self):
        Counter.instances += 1


class TestServiceContainer:

    def setup_method(self):
        self.container = ServiceContainer()
        Counter.instances = 0

    def test_singleton_lifecycle(self):
        self.container.register('Counter', Counter)

        assert self.container.get('Counter') is self.container.get('Counter')
        assert Counter.instances == 1

    def test_transient_lifecycle(self):
        self.container.register('Counter', Counter, lifecycle=ServiceLifecycle.TRANSIENT)

        assert self.container.get('Counter') is not self.container.get('Counter')
        assert Counter.instances == 2

    def test_dependencies_are_injected(self):
        self.container.register('Name', lambda: 'atlas')
        self.container.register('Greeting', lambda name, punctuation='!': f'hello {name}{punctuation}',
                                dependencies=['Name'], config={'punctuation': '?'})

        assert self.container.get('Greeting') == 'hello atlas?'

    def test_unknown_service(self):
        with pytest.raises(ServiceNotFoundError):
            self.container.get('Missing')

    def test_duplicate_registration(self):
        self.container.register('Counter', Counter)

        with pytest.raises(ValueError):
            self.container.register('Counter', Counter)

    def test_factory_must_be_callable(self):
        with pytest.raises(ValueError):
            self.container.register('Bad', 'not callable')

    def test_circular_dependency(self):
        self.container.register('A', lambda b: b, dependencies=['B'])
        self.container.register('B', lambda a: a, dependencies=['A'])

        with pytest.raises(CircularDependencyError):
            self.container.get('A')

    def test_external_dependency(self):
        sentinel = object()
        self.container.set_external_dependency('socketio', sentinel)

        assert self.container.has_service('socketio')
        assert self.container.get('socketio') is sentinel

    def test_missing_dependency(self):
        self.container.register('Needy', lambda x: x, dependencies=['Nothing'])

        with pytest.raises(ServiceNotFoundError):
            self.container.get('Needy')

    def test_app_config_from_container_config(self):
        self.container.set_config({'max_players_per_room': 3, 'environment': 'testing', 'unrelated': 1})

        app_config = self.container.get_app_config()

        assert app_config.max_players_per_room == 3
        assert app_config.is_testing


class TestConfigureContainer:

    def test_all_services_resolve(self):
        container = configure_container(
            socketio=create_mock_socketio(),
            config={'environment': 'testing'},
            overrides={'PlaceValidator': StaticPlaceValidator(['Peru'])}
        )

        for name in ('GameSettings', 'PlaceValidator', 'ErrorResponseFactory', 'SessionService',
                     'ValidationService', 'RoomRegistry', 'BroadcastService'):
            assert container.get(name) is not None
        assert isinstance(container.get('RoomRegistry'), RoomRegistry)
        assert container.get('RoomRegistry').place_validator.is_valid('peru')

    def test_configured_limits_reach_the_registry(self):
        container = configure_container(
            socketio=create_mock_socketio(),
            config={'environment': 'testing', 'max_players_per_room': 2, 'room_id_length': 12},
            overrides={'PlaceValidator': StaticPlaceValidator(['Peru'])}
        )

        registry = container.get('RoomRegistry')
        room_id = registry.create_room()
        assert len(room_id) == 12
        assert registry.get_room(room_id).max_players == 2

    def test_default_place_validator_uses_bundled_dataset(self):
        container = configure_container(socketio=create_mock_socketio(), config={'environment': 'testing'})

        assert container.get('PlaceValidator').is_valid('Argentina')

    def test_reconfigure_replaces_global_state(self):
        first = configure_container(socketio=create_mock_socketio(), config={'environment': 'testing'},
                                    overrides={'PlaceValidator': StaticPlaceValidator(['Peru'])})
        registry = first.get('RoomRegistry')

        configure_container(socketio=create_mock_socketio(), config={'environment': 'testing'},
                            overrides={'PlaceValidator': StaticPlaceValidator(['Peru'])})

        assert get_container() is first
        assert get_container().get('RoomRegistry') is not registry

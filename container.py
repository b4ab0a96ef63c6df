"""
Service container for Atlas.

Services are registered by name with a factory and the names of the services it
needs; `get()` builds them on first use and hands them their dependencies as
positional arguments, in the order they were declared.
"""

from typing import Dict, Any, List, Optional, Callable
from dataclasses import dataclass, field
from enum import Enum
import inspect


class ServiceLifecycle(Enum):
    SINGLETON = "singleton"  # built once, cached
    TRANSIENT = "transient"  # built on every get()


@dataclass
class ServiceDefinition:
    """Recipe for one service."""
    name: str
    factory: Callable
    dependencies: List[str] = field(default_factory=list)
    lifecycle: ServiceLifecycle = ServiceLifecycle.SINGLETON
    config: Dict[str, Any] = field(default_factory=dict)


class CircularDependencyError(Exception):
    """Two or more services depend on each other"""
    pass


class ServiceNotFoundError(Exception):
    """No service or external dependency under that name"""
    pass


class ServiceContainer:
    """
    Name-based registry of services and their dependencies.

    Instances placed with `set_external_dependency()` (the SocketIO server,
    test doubles) take precedence over registered factories of the same name.
    """

    def __init__(self):
        self._services: Dict[str, ServiceDefinition] = {}
        self._instances: Dict[str, Any] = {}
        self._resolving: List[str] = []
        self._config: Dict[str, Any] = {}

    def register(
        self,
        name: str,
        factory: Callable,
        dependencies: Optional[List[str]] = None,
        lifecycle: ServiceLifecycle = ServiceLifecycle.SINGLETON,
        config: Optional[Dict[str, Any]] = None
    ) -> 'ServiceContainer':
        """
        Add a service definition.

        Args:
            name: Lookup name
            factory: Class or callable producing the service
            dependencies: Names resolved and passed positionally to the factory
            lifecycle: Singleton (default) or transient
            config: Extra keyword arguments for non-class factories

        Raises:
            ValueError: Duplicate name or non-callable factory
        """
        if name in self._services:
            raise ValueError(f"Service '{name}' is already registered")
        if not callable(factory):
            raise ValueError(f"Factory for '{name}' must be callable")

        self._services[name] = ServiceDefinition(
            name, factory, list(dependencies or []), lifecycle, dict(config or {})
        )
        return self

    def configure_services(self) -> 'ServiceContainer':
        """Register the game services."""
        from atlas.config.game_settings import GameSettings
        from atlas.place_validator import create_place_validator
        from atlas.room_registry import RoomRegistry
        from atlas.services.validation_service import ValidationService
        from atlas.services.error_response_factory import ErrorResponseFactory
        from atlas.services.session_service import SessionService
        from atlas.services.broadcast_service import BroadcastService

        self.register('GameSettings', lambda: GameSettings(self.get_app_config()))
        self.register('PlaceValidator', create_place_validator,
                      config={'places_file': self._config.get('places_file') or None})
        self.register('ErrorResponseFactory', ErrorResponseFactory)
        self.register('SessionService', SessionService)
        self.register('ValidationService', ValidationService, dependencies=['GameSettings'])
        self.register('RoomRegistry', RoomRegistry, dependencies=['PlaceValidator', 'GameSettings'])
        # 'socketio' is supplied by configure_container()
        self.register('BroadcastService', BroadcastService, dependencies=['socketio', 'RoomRegistry'])
        return self

    def set_external_dependency(self, name: str, instance: Any) -> 'ServiceContainer':
        """Provide a ready-made instance under ``name``."""
        self._instances[name] = instance
        return self

    def set_config(self, config: Dict[str, Any]) -> 'ServiceContainer':
        self._config.update(config)
        return self

    def get_config(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def get_app_config(self):
        """
        AppConfig for this container: built from the container's config dict
        when one was given, else the globally loaded config, else defaults.
        """
        from config_factory import AppConfig, ConfigError, Environment, get_config

        if not self._config:
            try:
                return get_config()
            except ConfigError:
                return AppConfig()

        known = AppConfig.__dataclass_fields__
        values = {key: value for key, value in self._config.items() if key in known}
        if isinstance(values.get('environment'), str):
            values['environment'] = Environment(values['environment'])
        return AppConfig(**values)

    def get(self, name: str) -> Any:
        """
        Return the service, building it (and its dependencies) if needed.

        Raises:
            ServiceNotFoundError: Unknown name
            CircularDependencyError: The dependency graph loops back to ``name``
        """
        if name in self._instances:
            return self._instances[name]
        if name not in self._services:
            raise ServiceNotFoundError(f"Service '{name}' is not registered")
        return self._build(self._services[name])

    def _build(self, definition: ServiceDefinition) -> Any:
        if definition.name in self._resolving:
            chain = ' -> '.join(self._resolving + [definition.name])
            raise CircularDependencyError(f"Circular dependency detected: {chain}")

        self._resolving.append(definition.name)
        try:
            args = [self.get(dep) for dep in definition.dependencies]
            if inspect.isclass(definition.factory):
                instance = definition.factory(*args)
            else:
                instance = definition.factory(*args, **definition.config)
        finally:
            self._resolving.pop()

        if definition.lifecycle is ServiceLifecycle.SINGLETON:
            self._instances[definition.name] = instance
        return instance

    def has_service(self, name: str) -> bool:
        return name in self._services or name in self._instances

    def clear(self) -> 'ServiceContainer':
        """Forget every service, instance and config value."""
        self._services.clear()
        self._instances.clear()
        self._resolving.clear()
        self._config.clear()
        return self

    def __repr__(self) -> str:
        return f"ServiceContainer(services={len(self._services)}, instances={len(self._instances)})"


_app_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """The process-wide container, created empty on first use."""
    global _app_container
    if _app_container is None:
        _app_container = ServiceContainer()
    return _app_container


def reset_container() -> None:
    global _app_container
    _app_container = None


def configure_container(socketio=None, config=None, overrides=None) -> ServiceContainer:
    """
    Reset the global container and register the game services.

    Args:
        socketio: Flask-SocketIO server used by BroadcastService
        config: AppConfig field values (see ConfigurationFactory.to_dict)
        overrides: Instances to use instead of the registered factories,
            keyed by service name (e.g. a StaticPlaceValidator in tests)
    """
    container = get_container().clear()

    if socketio is not None:
        container.set_external_dependency('socketio', socketio)
    if config is not None:
        container.set_config(config)
    for name, instance in (overrides or {}).items():
        container.set_external_dependency(name, instance)

    return container.configure_services()

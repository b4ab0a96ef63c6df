"""
Configuration Factory - environment-driven settings for the Atlas server.

Every setting lives on the AppConfig dataclass and can be supplied through an
environment variable of the same name in upper case (see ENV_SETTINGS).
"""

import os
import logging
from typing import Any, Dict, List, Optional, Tuple
from enum import Enum
from dataclasses import dataclass, fields


DEFAULT_SECRET_KEY = 'dev-secret-key-change-in-production'
DEFAULT_ALLOWED_ORIGINS = 'http://localhost:3000,http://localhost:5173'


class Environment(Enum):
    """Deployment environments"""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class ConfigError(Exception):
    """Invalid or missing configuration"""
    pass


@dataclass
class AppConfig:
    """Server, game and deployment settings, validated on construction."""

    # Flask
    secret_key: str = DEFAULT_SECRET_KEY
    debug: bool = False
    flask_env: str = 'development'

    # Listening address
    host: str = '0.0.0.0'
    port: int = 10000

    # Rooms and turns
    max_players_per_room: int = 0  # 0 = unlimited
    host_only_start: bool = False
    room_id_length: int = 6
    max_player_name_length: int = 20
    max_place_name_length: int = 100

    # Socket.IO transport
    cors_allowed_origins: str = DEFAULT_ALLOWED_ORIGINS  # comma-separated, '*' for any
    ping_timeout: int = 60
    ping_interval: int = 25

    # Place dataset, '' for the bundled file
    places_file: str = ''

    # Gunicorn
    worker_connections: int = 1000
    timeout: int = 30
    keepalive: int = 2
    log_level: str = 'info'

    environment: Environment = Environment.DEVELOPMENT

    def __post_init__(self):
        self._validate()

    def _validate(self):
        """Raise ConfigError for out-of-range values."""
        bounds = {
            'port': (1, 65535),
            'max_players_per_room': (0, 100),
            'room_id_length': (4, 32),
            'max_player_name_length': (1, 100),
            'max_place_name_length': (1, 500),
            'ping_timeout': (1, 3600),
            'ping_interval': (1, 3600),
        }
        for name, (low, high) in bounds.items():
            value = getattr(self, name)
            if not low <= value <= high:
                raise ConfigError(f"Invalid {name}: {value} (expected {low}-{high})")

        if self.is_production and self.secret_key == DEFAULT_SECRET_KEY:
            raise ConfigError("Production environment requires a secure SECRET_KEY")

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING

    @property
    def allowed_origins(self) -> List[str]:
        """Parsed CORS allowlist; ['*'] means any origin."""
        return [o.strip() for o in self.cors_allowed_origins.split(',') if o.strip()]


# Environment variable -> (AppConfig field, type)
ENV_SETTINGS: Tuple[Tuple[str, str, type], ...] = (
    ('SECRET_KEY', 'secret_key', str),
    ('DEBUG', 'debug', bool),
    ('HOST', 'host', str),
    ('PORT', 'port', int),
    ('MAX_PLAYERS_PER_ROOM', 'max_players_per_room', int),
    ('HOST_ONLY_START', 'host_only_start', bool),
    ('ROOM_ID_LENGTH', 'room_id_length', int),
    ('MAX_PLAYER_NAME_LENGTH', 'max_player_name_length', int),
    ('MAX_PLACE_NAME_LENGTH', 'max_place_name_length', int),
    ('SOCKETIO_CORS_ALLOWED_ORIGINS', 'cors_allowed_origins', str),
    ('PING_TIMEOUT', 'ping_timeout', int),
    ('PING_INTERVAL', 'ping_interval', int),
    ('PLACES_FILE', 'places_file', str),
    ('WORKER_CONNECTIONS', 'worker_connections', int),
    ('TIMEOUT', 'timeout', int),
    ('KEEPALIVE', 'keepalive', int),
    ('LOG_LEVEL', 'log_level', str),
)


def _environment_for(flask_env: str) -> Environment:
    """Anything other than development or testing is treated as production."""
    if flask_env == 'development':
        return Environment.DEVELOPMENT
    if flask_env == 'testing':
        return Environment.TESTING
    return Environment.PRODUCTION


class ConfigurationFactory:
    """
    Process-wide holder of the active AppConfig.

    Always returns the same instance, so ``ConfigurationFactory()`` anywhere in
    the code sees the configuration loaded at start-up.
    """

    _instance: Optional['ConfigurationFactory'] = None
    _config: Optional[AppConfig] = None

    def __new__(cls) -> 'ConfigurationFactory':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._logger = logging.getLogger(__name__)
            cls._instance._overrides = {}
        return cls._instance

    def _read_env(self, key: str, var_type: type, default: Any) -> Any:
        raw = os.environ.get(key)
        if raw is None:
            return default
        if var_type is bool:
            return raw.lower() in ('true', '1', 'yes', 'on')
        if var_type is int:
            try:
                return int(raw)
            except ValueError:
                self._logger.warning(f"Ignoring non-integer {key}={raw!r}, using {default}")
                return default
        return raw

    def load_from_environment(self, env_prefix: str = '') -> AppConfig:
        """
        Build the configuration from environment variables.

        Args:
            env_prefix: Prepended to every variable name (e.g. 'ATLAS_')
        """
        flask_env = os.environ.get(f'{env_prefix}FLASK_ENV', 'development')
        environment = _environment_for(flask_env)

        defaults = AppConfig()
        values: Dict[str, Any] = {
            'flask_env': flask_env,
            'environment': environment,
        }
        for env_key, field_name, var_type in ENV_SETTINGS:
            default = getattr(defaults, field_name)
            if field_name == 'debug':
                default = environment != Environment.PRODUCTION
            values[field_name] = self._read_env(f'{env_prefix}{env_key}', var_type, default)

        values.update({k: v for k, v in self._overrides.items() if hasattr(defaults, k)})
        self._config = AppConfig(**values)
        self._logger.info(f"Configuration loaded for environment: {environment.value}")
        return self._config

    def load_from_dict(self, config_dict: Dict[str, Any]) -> AppConfig:
        """Build the configuration from a dict of AppConfig field values."""
        values = dict(config_dict)
        if isinstance(values.get('environment'), str):
            values['environment'] = Environment(values['environment'])
        self._config = AppConfig(**values)
        return self._config

    def override_setting(self, key: str, value: Any) -> 'ConfigurationFactory':
        """Pin a setting; it also applies to every later load_from_environment()."""
        self._overrides[key] = value
        if self._config is not None and hasattr(self._config, key):
            setattr(self._config, key, value)
            self._config._validate()
        return self

    def get_config(self) -> AppConfig:
        if self._config is None:
            raise ConfigError("Configuration not loaded. Call load_from_environment() or load_from_dict() first.")
        return self._config

    def reset(self) -> 'ConfigurationFactory':
        self._config = None
        self._overrides.clear()
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Field values of the active configuration, enums as their string value."""
        config = self.get_config()
        result = {}
        for f in fields(config):
            value = getattr(config, f.name)
            result[f.name] = value.value if isinstance(value, Environment) else value
        return result

    def get_flask_config(self) -> Dict[str, Any]:
        """Keys for Flask's app.config.update()."""
        config = self.get_config()
        return {
            'SECRET_KEY': config.secret_key,
            'DEBUG': config.debug,
            'ENV': config.flask_env,
            'MAX_PLAYERS_PER_ROOM': config.max_players_per_room,
            'HOST_ONLY_START': config.host_only_start,
            'PLACES_FILE': config.places_file,
        }


_config_factory = ConfigurationFactory()


def get_config() -> AppConfig:
    return _config_factory.get_config()


def load_config(env_prefix: str = '') -> AppConfig:
    return _config_factory.load_from_environment(env_prefix)


def load_config_from_dict(config_dict: Dict[str, Any]) -> AppConfig:
    return _config_factory.load_from_dict(config_dict)


def override_config(key: str, value: Any) -> ConfigurationFactory:
    return _config_factory.override_setting(key, value)


def reset_config() -> ConfigurationFactory:
    return _config_factory.reset()

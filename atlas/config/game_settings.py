"""
Game Settings

Read-only view of the room and payload limits in AppConfig. Falls back to the
built-in defaults when no configuration has been loaded, so services can be
constructed in isolation.
"""

import logging

logger = logging.getLogger(__name__)

DEFAULTS = {
    'max_players_per_room': 0,
    'host_only_start': False,
    'room_id_length': 6,
    'max_player_name_length': 20,
    'max_place_name_length': 100,
}


class GameSettings:
    """Game limits taken from an AppConfig."""

    def __init__(self, app_config=None):
        """
        Args:
            app_config: AppConfig to read; defaults to the globally loaded one
        """
        if app_config is None:
            from config_factory import ConfigError, get_config
            try:
                app_config = get_config()
            except ConfigError as e:
                logger.warning(f"{e} Using default game settings.")
        self._config = app_config

    def _get(self, name: str):
        if self._config is None:
            return DEFAULTS[name]
        return getattr(self._config, name)

    @property
    def max_players_per_room(self) -> int:
        """0 means no cap."""
        return self._get('max_players_per_room')

    @property
    def host_only_start(self) -> bool:
        return self._get('host_only_start')

    @property
    def room_id_length(self) -> int:
        return self._get('room_id_length')

    @property
    def max_player_name_length(self) -> int:
        return self._get('max_player_name_length')

    @property
    def max_place_name_length(self) -> int:
        return self._get('max_place_name_length')


_game_settings_instance = None


def get_game_settings(app_config=None) -> GameSettings:
    """Shared GameSettings; passing an AppConfig replaces it."""
    global _game_settings_instance
    if _game_settings_instance is None or app_config is not None:
        _game_settings_instance = GameSettings(app_config)
    return _game_settings_instance


def reset_game_settings():
    global _game_settings_instance
    _game_settings_instance = None

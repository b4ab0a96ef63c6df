"""
Atlas - A multiplayer geography word-chain game where each place must start with
the last letter of the one before it.
Main Flask application entry point focusing on app creation, dependency injection, and service wiring.
"""

from flask import Flask
from flask_socketio import SocketIO
import logging
import sys
import yaml

from atlas.place_validator import PlaceDataError
from container import configure_container
from config_factory import load_config, ConfigurationFactory

# Initialize Flask app
app = Flask(__name__)

# Load and apply configuration
app_config = load_config()
config_factory = ConfigurationFactory()
app.config.update(config_factory.get_flask_config())

# Initialize Socket.IO with the configured CORS allowlist
_cors_allowed = app_config.allowed_origins
if _cors_allowed == ['*'] or (not app_config.is_production and not _cors_allowed):
    _cors_allowed = '*'
socketio = SocketIO(
    app,
    cors_allowed_origins=_cors_allowed,
    ping_timeout=app_config.ping_timeout,
    ping_interval=app_config.ping_interval,
    async_mode='eventlet'
)

# Configure logging
logging.basicConfig(level=getattr(logging, app_config.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# Configure service container with dependencies
container = configure_container(socketio=socketio, config=config_factory.to_dict())

# Load the place dataset on startup
try:
    place_validator = container.get('PlaceValidator')
    counts = ', '.join(f'{category}: {count}' for category, count in place_validator.get_category_counts().items())
    logger.info(f"Loaded {place_validator.get_place_count()} places from YAML ({counts})")
except (FileNotFoundError, yaml.YAMLError, PlaceDataError) as e:
    logger.critical(f"FATAL: Place data validation failed, which is critical for game play. Server shutting down. Error: {e}")
    sys.exit(1)

# Register REST endpoints
from atlas.routes.api import create_api_blueprint
app.register_blueprint(create_api_blueprint())

# Register Socket.IO handlers
from atlas.handlers.socket_handlers import register_socket_handlers
register_socket_handlers(socketio)

if __name__ == '__main__':
    logger.info(f"Starting Atlas server on {app_config.host}:{app_config.port}")
    try:
        socketio.run(app, host=app_config.host, port=app_config.port, debug=app_config.debug)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")

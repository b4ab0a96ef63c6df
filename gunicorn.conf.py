"""
Gunicorn configuration for the Atlas application.
Runs a single eventlet worker so every room lives in one process.
"""

import sys
import logging
import yaml

from atlas.place_validator import DatasetPlaceValidator, PlaceDataError
from config_factory import load_config


def on_starting(server):
    """
    Validate the place dataset in the master process before workers are forked.
    A broken dataset stops the server from starting.
    """
    logger = logging.getLogger(__name__)
    places_file = app_config.places_file or None
    logger.info(f"Validating place data {places_file or '(bundled)'} before starting workers...")
    try:
        validator = DatasetPlaceValidator(places_file)
        validator.load_places_from_yaml()
        logger.info(f"Successfully validated {validator.get_place_count()} places.")
    except (FileNotFoundError, yaml.YAMLError, PlaceDataError) as e:
        logger.critical(f"FATAL: Place data validation failed. Server shutting down. Error: {e}")
        sys.exit(1)


# Renamed to avoid conflicts with gunicorn's internal 'config'
app_config = load_config()

# Server socket
bind = f"{app_config.host}:{app_config.port}"
backlog = 2048

# Worker processes
workers = 1  # Must be 1: rooms live in process memory
worker_class = "eventlet"
worker_connections = app_config.worker_connections
timeout = app_config.timeout
keepalive = app_config.keepalive

# Logging
accesslog = "-"
errorlog = "-"
loglevel = app_config.log_level
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'

# Process naming
proc_name = "atlas"

# Server mechanics
preload_app = False
daemon = False
pidfile = None

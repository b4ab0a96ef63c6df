"""
REST API endpoints for the Atlas application.
"""

import logging
from flask import Blueprint, jsonify

from container import get_container

logger = logging.getLogger(__name__)


def create_api_blueprint():
    """Create the API Blueprint. Services are resolved per request from the container."""
    api = Blueprint('api', __name__)

    @api.route('/health')
    def health():
        """Liveness check with room, player and connection counts."""
        container = get_container()
        stats = container.get('RoomRegistry').get_stats()
        stats['sessions'] = container.get('SessionService').get_sessions_count()
        return jsonify({'status': 'healthy', **stats}), 200

    return api

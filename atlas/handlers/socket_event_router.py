"""
Socket Event Router

Maps Socket.IO event names to handler callables, runs payloads through a
middleware chain first, and binds the whole table to a SocketIO server in one
call. A handler's return value becomes the client's ack.
"""

import logging
from typing import Any, Callable, Dict, List
from flask import request

logger = logging.getLogger(__name__)

Middleware = Callable[[str, Any], Any]


class EventRouteNotFoundError(Exception):
    """Raised when no handler is registered for an event."""
    pass


class SocketEventRouter:
    """Event name -> handler table with payload middleware."""

    def __init__(self):
        self._routes: Dict[str, Callable] = {}
        self._middleware: List[Middleware] = []

    def register_route(self, event_name: str, handler: Callable) -> None:
        self._routes[event_name] = handler
        logger.debug(f"Route {event_name} -> {getattr(handler, '__name__', handler)}")

    def add_middleware(self, middleware: Middleware) -> None:
        """``middleware(event_name, data)`` returns the payload passed on to the handler."""
        self._middleware.append(middleware)

    def handle_event(self, event_name: str, data: Any = None) -> Any:
        """
        Dispatch one inbound event.

        Raises:
            EventRouteNotFoundError: Unknown event name
        """
        handler = self._routes.get(event_name)
        if handler is None:
            raise EventRouteNotFoundError(f"No handler registered for event: {event_name}")

        logger.info(f"{event_name} from {request.sid}")
        for middleware in self._middleware:
            data = middleware(event_name, data)

        try:
            return handler(data)
        except Exception:
            logger.exception(f"Unhandled error in {event_name} handler")
            raise

    def get_registered_events(self) -> List[str]:
        return list(self._routes)

    def register_with_socketio(self, socketio_instance) -> None:
        """Install one SocketIO handler per route."""
        for event_name in self._routes:
            socketio_instance.on_event(event_name, self._dispatcher(event_name))

    def _dispatcher(self, event_name: str) -> Callable:
        def dispatch(data=None):
            return self.handle_event(event_name, data)
        dispatch.__name__ = f'on_{event_name}'
        return dispatch


def request_logging_middleware(event_name: str, data: Any) -> Any:
    if data is not None:
        logger.debug(f"{event_name} payload: {data!r}")
    return data


def setup_router() -> SocketEventRouter:
    """A fresh router with request logging installed."""
    router = SocketEventRouter()
    router.add_middleware(request_logging_middleware)
    return router

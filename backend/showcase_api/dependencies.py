"""FastAPI dependency injection for shared application components."""

from starlette.requests import HTTPConnection

from showcase_api.services.connection_registry import ConnectionRegistry


def get_connection_registry(connection: HTTPConnection) -> ConnectionRegistry:
    """Return the registry created for this application."""
    return connection.app.state.connection_registry

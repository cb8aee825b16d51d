from weather_mcp.config.settings import TransportSettings
from weather_mcp.transports.base import BaseTransportHandler, ServerFactory
from weather_mcp.transports.sessions import SessionHandler, SessionStore
from weather_mcp.transports.shared import SharedHandler
from weather_mcp.transports.stateless import StatelessHandler

HANDLERS = {
    StatelessHandler.mode: StatelessHandler,
    SharedHandler.mode: SharedHandler,
    SessionHandler.mode: SessionHandler,
}


def create_transport_handler(
    server_factory: ServerFactory, settings: TransportSettings
) -> BaseTransportHandler:
    """Pick the handler class for `settings.mode`."""
    return HANDLERS[settings.mode](server_factory, settings)


__all__ = [
    "BaseTransportHandler",
    "SessionHandler",
    "SessionStore",
    "SharedHandler",
    "StatelessHandler",
    "create_transport_handler",
]

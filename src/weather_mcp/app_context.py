import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from functools import partial
from typing import Optional

import httpx
from fastmcp.utilities.logging import get_logger
from starlette.applications import Starlette

from weather_mcp.config.settings import ServerSettings
from weather_mcp.mcp_server import create_server
from weather_mcp.services.http_client import NWSClient
from weather_mcp.services.weather_service import WeatherService
from weather_mcp.transports import BaseTransportHandler, create_transport_handler

logger = get_logger(__name__)


@dataclass
class AppContext:
    settings: ServerSettings
    nws_client: NWSClient
    weather: WeatherService
    handler: BaseTransportHandler
    started_at: float = field(default_factory=time.monotonic)

    @property
    def uptime(self) -> float:
        return time.monotonic() - self.started_at


def build_context(
    settings: ServerSettings, nws_transport: Optional[httpx.AsyncBaseTransport] = None
) -> AppContext:
    """Wire the NWS client, weather service and transport handler together."""
    nws_client = NWSClient(settings, transport=nws_transport)
    weather = WeatherService(nws_client)
    handler = create_transport_handler(
        partial(create_server, weather, settings), settings.transport
    )
    return AppContext(
        settings=settings, nws_client=nws_client, weather=weather, handler=handler
    )


@asynccontextmanager
async def app_lifespan(app: Starlette):
    """Start the transport handler and release upstream connections on exit."""
    context: AppContext = app.state.context
    logger.info(
        f"🚀 Starting MCP Server ({context.settings.transport.mode} transport "
        f"at {context.settings.transport.path})"
    )

    try:
        async with context.handler.run():
            yield
    finally:
        await context.nws_client.aclose()
        logger.info("👋 Shutting down MCP Server")

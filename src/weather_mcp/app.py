from typing import Optional

import httpx
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from weather_mcp.app_context import AppContext, app_lifespan, build_context
from weather_mcp.config.constants import MCP_SESSION_ID_HEADER
from weather_mcp.config.settings import ServerSettings, get_settings


async def health(request: Request) -> JSONResponse:
    """Health check endpoint"""
    context: AppContext = request.app.state.context
    return JSONResponse(
        {
            "status": "ok",
            "server": context.settings.server_name,
            "version": context.settings.server_version,
            "mode": context.handler.mode,
            "uptime": round(context.uptime, 3),
            "activeSessions": context.handler.active_sessions,
        }
    )


def create_app(
    settings: Optional[ServerSettings] = None,
    *,
    nws_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Starlette:
    """
    Build the ASGI application.

    Args:
        settings: Server settings, defaults to the global instance
        nws_transport: Replacement network layer for the NWS client

    Returns:
        Starlette: App serving the MCP endpoint and /health
    """
    settings = settings or get_settings()
    context = build_context(settings, nws_transport)

    app = Starlette(
        routes=[
            Route(settings.transport.path, endpoint=context.handler),
            Route("/health", health, methods=["GET"]),
        ],
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=settings.cors_origins,
                allow_methods=["*"],
                allow_headers=["*"],
                expose_headers=[MCP_SESSION_ID_HEADER],
            )
        ],
        lifespan=app_lifespan,
    )
    app.state.context = context
    return app

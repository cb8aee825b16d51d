"""
Shared plumbing for the MCP HTTP transport handlers.

Each handler is an ASGI callable mounted at the MCP endpoint. Framing of
JSON-RPC messages is left to the SDK's `StreamableHTTPServerTransport`;
handlers only decide which transport instance a request is routed to.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

import anyio
from fastmcp import FastMCP
from fastmcp.utilities.logging import get_logger
from mcp.server.streamable_http import StreamableHTTPServerTransport
from starlette.requests import Request
from starlette.responses import JSONResponse, Response, StreamingResponse
from starlette.types import Message, Receive, Scope, Send

from weather_mcp.config.constants import (
    INTERNAL_ERROR,
    JSONRPC_VERSION,
    SERVER_ERROR,
    SSE_HEADERS,
    SSE_KEEPALIVE_COMMENT,
)
from weather_mcp.config.settings import TransportSettings

logger = get_logger(__name__)

ServerFactory = Callable[[], FastMCP]


def jsonrpc_error(
    status_code: int, code: int, message: str, headers: Optional[dict] = None
) -> JSONResponse:
    """Build a JSON-RPC error envelope for failures outside any request id."""
    return JSONResponse(
        {
            "jsonrpc": JSONRPC_VERSION,
            "error": {"code": code, "message": message},
            "id": None,
        },
        status_code=status_code,
        headers=headers,
    )


async def keepalive_events(interval: float) -> AsyncIterator[str]:
    """Yield an SSE comment every `interval` seconds until the client goes away."""
    try:
        while True:
            await anyio.sleep(interval)
            yield SSE_KEEPALIVE_COMMENT
    finally:
        logger.info("SSE keepalive stream closed")


async def serve_transport(
    server: FastMCP,
    transport: StreamableHTTPServerTransport,
    *,
    stateless: bool,
    task_status=anyio.TASK_STATUS_IGNORED,
) -> None:
    """
    Run the MCP server loop over a transport until the transport closes.

    Meant for `TaskGroup.start`: readiness is signalled once the
    transport streams are connected.
    """
    mcp_server = server._mcp_server
    async with transport.connect() as (read_stream, write_stream):
        task_status.started()
        await mcp_server.run(
            read_stream,
            write_stream,
            mcp_server.create_initialization_options(),
            stateless=stateless,
        )


class BaseTransportHandler:
    """
    ASGI endpoint for MCP traffic.

    Subclasses implement `handle`. Any exception escaping it is logged
    and, if nothing has been sent yet, answered with a JSON-RPC internal
    error.
    """

    mode = "base"

    def __init__(self, server_factory: ServerFactory, settings: TransportSettings):
        self.server_factory = server_factory
        self.settings = settings

    @property
    def active_sessions(self) -> int:
        return 0

    @asynccontextmanager
    async def run(self) -> AsyncIterator[None]:
        """Lifespan hook; the default handler has nothing to start."""
        yield

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        response_started = False

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        request = Request(scope, receive)
        logger.info(f"Received MCP request: {request.method} {request.url.path}")
        try:
            await self.handle(request, tracking_send)
        except Exception:
            logger.exception("Error handling MCP request")
            if not response_started:
                await jsonrpc_error(500, INTERNAL_ERROR, "Internal server error")(
                    scope, receive, send
                )

    async def handle(self, request: Request, send: Send) -> None:
        raise NotImplementedError

    def new_transport(self, session_id: Optional[str] = None) -> StreamableHTTPServerTransport:
        return StreamableHTTPServerTransport(
            mcp_session_id=session_id,
            is_json_response_enabled=self.settings.json_response,
        )

    def wants_keepalive(self, request: Request) -> bool:
        return request.method == "GET" and self.settings.sse_keepalive

    def keepalive_response(self) -> StreamingResponse:
        logger.info("GET request - establishing SSE keepalive stream")
        return StreamingResponse(
            keepalive_events(self.settings.keepalive_interval),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    def method_not_allowed(self) -> JSONResponse:
        return jsonrpc_error(
            405, SERVER_ERROR, "Method not allowed.", headers={"Allow": "POST"}
        )

    async def respond(self, response: Response, request: Request, send: Send) -> None:
        await response(request.scope, request.receive, send)

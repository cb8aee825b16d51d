"""Single transport instance shared by every request for the process lifetime."""

from contextlib import asynccontextmanager
from functools import partial
from typing import AsyncIterator, Optional

import anyio
from fastmcp.utilities.logging import get_logger
from mcp.server.streamable_http import StreamableHTTPServerTransport
from starlette.requests import Request
from starlette.types import Send

from weather_mcp.transports.base import BaseTransportHandler, serve_transport

logger = get_logger(__name__)


class SharedHandler(BaseTransportHandler):
    """
    One server loop over one session-less transport, started with the
    application and terminated on shutdown.

    Requests from different clients are told apart only by their
    JSON-RPC ids, so clients must not reuse ids concurrently.
    """

    mode = "shared"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._transport: Optional[StreamableHTTPServerTransport] = None

    @property
    def active_sessions(self) -> int:
        return 1 if self._transport is not None else 0

    @asynccontextmanager
    async def run(self) -> AsyncIterator[None]:
        transport = self.new_transport()
        async with anyio.create_task_group() as tg:
            await tg.start(partial(serve_transport, self.server_factory(), transport, stateless=True))
            self._transport = transport
            logger.info("Shared MCP transport started")
            try:
                yield
            finally:
                self._transport = None
                await transport.terminate()
                tg.cancel_scope.cancel()
                logger.info("Shared MCP transport terminated")

    async def handle(self, request: Request, send: Send) -> None:
        if self.wants_keepalive(request):
            await self.respond(self.keepalive_response(), request, send)
            return
        if request.method != "POST":
            await self.respond(self.method_not_allowed(), request, send)
            return
        if self._transport is None:
            raise RuntimeError("Shared MCP transport is not running")

        await self._transport.handle_request(request.scope, request.receive, send)

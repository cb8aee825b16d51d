"""Per-request transport: nothing survives between HTTP requests."""

from functools import partial

import anyio
from starlette.requests import Request
from starlette.types import Send

from weather_mcp.transports.base import BaseTransportHandler, serve_transport


class StatelessHandler(BaseTransportHandler):
    """
    Builds a fresh server and session-less transport for every POST,
    then tears both down once the response has been written.
    """

    mode = "stateless"

    async def handle(self, request: Request, send: Send) -> None:
        if self.wants_keepalive(request):
            await self.respond(self.keepalive_response(), request, send)
            return
        if request.method != "POST":
            await self.respond(self.method_not_allowed(), request, send)
            return

        transport = self.new_transport()
        async with anyio.create_task_group() as tg:
            await tg.start(partial(serve_transport, self.server_factory(), transport, stateless=True))
            try:
                await transport.handle_request(request.scope, request.receive, send)
            finally:
                await transport.terminate()
                tg.cancel_scope.cancel()

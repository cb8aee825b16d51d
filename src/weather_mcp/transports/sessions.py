"""
Session-bound transports with idle eviction.

A session is created by an `initialize` POST without an
`mcp-session-id` header. Later requests carrying the id are routed to
the same transport until the client deletes the session, it sits idle
longer than `session_timeout`, or the application shuts down.
"""

import json
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from functools import partial
from typing import AsyncIterator, Callable, Dict, Iterator, List, Optional
from uuid import uuid4

import anyio
from anyio.abc import TaskGroup
from fastmcp.utilities.logging import get_logger
from mcp.server.streamable_http import StreamableHTTPServerTransport
from starlette.requests import Request
from starlette.types import Message, Receive, Send

from weather_mcp.config.constants import (
    MCP_SESSION_ID_HEADER,
    SERVER_ERROR,
    SESSION_NOT_FOUND,
)
from weather_mcp.transports.base import (
    BaseTransportHandler,
    jsonrpc_error,
    serve_transport,
)

logger = get_logger(__name__)


@dataclass
class Session:
    id: str
    transport: StreamableHTTPServerTransport
    created_at: float
    last_seen: float


class SessionStore:
    """
    Sessions keyed by id.

    Mutated only from the event loop, so no locking.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._sessions: Dict[str, Session] = {}

    def create(self, session_id: str, transport: StreamableHTTPServerTransport) -> Session:
        now = self._clock()
        session = Session(id=session_id, transport=transport, created_at=now, last_seen=now)
        self._sessions[session_id] = session
        return session

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def touch(self, session_id: str) -> Optional[Session]:
        """Mark a session as used now; None if it does not exist."""
        session = self._sessions.get(session_id)
        if session is not None:
            session.last_seen = self._clock()
        return session

    def remove(self, session_id: str) -> Optional[Session]:
        return self._sessions.pop(session_id, None)

    def idle(self, timeout: float) -> List[Session]:
        now = self._clock()
        return [s for s in self._sessions.values() if now - s.last_seen > timeout]

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __iter__(self) -> Iterator[Session]:
        return iter(list(self._sessions.values()))


def is_initialize_request(body: bytes) -> bool:
    """True if the JSON-RPC payload (single or batch) contains `initialize`."""
    try:
        payload = json.loads(body)
    except ValueError:
        return False
    messages = payload if isinstance(payload, list) else [payload]
    return any(
        isinstance(message, dict) and message.get("method") == "initialize"
        for message in messages
    )


def replay_receive(body: bytes, receive: Receive) -> Receive:
    """Hand an already-read request body back to the next ASGI consumer."""
    replayed = False

    async def _receive() -> Message:
        nonlocal replayed
        if not replayed:
            replayed = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return _receive


class SessionHandler(BaseTransportHandler):
    """Routes requests to per-session transports held in a `SessionStore`."""

    mode = "sessions"

    def __init__(self, *args, store: Optional[SessionStore] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.store = store if store is not None else SessionStore()
        self._task_group: Optional[TaskGroup] = None

    @property
    def active_sessions(self) -> int:
        return len(self.store)

    @asynccontextmanager
    async def run(self) -> AsyncIterator[None]:
        async with anyio.create_task_group() as tg:
            self._task_group = tg
            tg.start_soon(self._sweep_forever)
            logger.info(
                f"Session sweeper started (timeout={self.settings.session_timeout}s, "
                f"interval={self.settings.sweep_interval}s)"
            )
            try:
                yield
            finally:
                await self.close_all()
                self._task_group = None
                tg.cancel_scope.cancel()

    # ============= REQUEST ROUTING =============

    async def handle(self, request: Request, send: Send) -> None:
        session_id = request.headers.get(MCP_SESSION_ID_HEADER)
        if session_id:
            await self._handle_existing(session_id, request, send)
            return

        if self.wants_keepalive(request):
            await self.respond(self.keepalive_response(), request, send)
            return
        if request.method not in ("POST", "GET", "DELETE"):
            await self.respond(self.method_not_allowed(), request, send)
            return

        body = await request.body() if request.method == "POST" else b""
        if not is_initialize_request(body):
            await self.respond(
                jsonrpc_error(400, SERVER_ERROR, "Bad Request: No valid session ID provided"),
                request,
                send,
            )
            return

        await self._open_session(request, body, send)

    async def _handle_existing(self, session_id: str, request: Request, send: Send) -> None:
        session = self.store.touch(session_id)
        if session is None:
            logger.warning(f"Request for unknown session {session_id}")
            await self.respond(
                jsonrpc_error(404, SESSION_NOT_FOUND, "Session not found"), request, send
            )
            return

        await session.transport.handle_request(request.scope, request.receive, send)
        if request.method == "DELETE" and self.store.remove(session_id) is not None:
            logger.info(f"Session {session_id} deleted by client")

    async def _open_session(self, request: Request, body: bytes, send: Send) -> None:
        if self._task_group is None:
            raise RuntimeError("Session handler is not running")

        session_id = uuid4().hex
        transport = self.new_transport(session_id)
        await self._task_group.start(partial(self._serve_session, session_id, transport))
        session = self.store.create(session_id, transport)
        status_code = None

        async def status_send(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        await transport.handle_request(
            request.scope, replay_receive(body, request.receive), status_send
        )
        if status_code is None or status_code >= 400:
            logger.warning(
                f"Initialize rejected with status {status_code}, dropping session {session_id}"
            )
            await self.close_session(session)
            return
        logger.info(f"Session initialized: {session_id}")

    async def _serve_session(
        self,
        session_id: str,
        transport: StreamableHTTPServerTransport,
        *,
        task_status=anyio.TASK_STATUS_IGNORED,
    ) -> None:
        try:
            await serve_transport(
                self.server_factory(), transport, stateless=False, task_status=task_status
            )
        except Exception:
            logger.exception(f"Session {session_id} server loop crashed")
        finally:
            self.store.remove(session_id)

    # ============= LIFECYCLE =============

    async def _sweep_forever(self) -> None:
        while True:
            await anyio.sleep(self.settings.sweep_interval)
            await self.evict_idle()

    async def evict_idle(self) -> int:
        """Terminate sessions idle longer than the timeout; returns how many."""
        expired = self.store.idle(self.settings.session_timeout)
        for session in expired:
            logger.info(f"Evicting idle session {session.id}")
            await self.close_session(session)
        return len(expired)

    async def close_all(self) -> None:
        sessions = list(self.store)
        for session in sessions:
            await self.close_session(session)
        if sessions:
            logger.info(f"Closed {len(sessions)} sessions on shutdown")

    async def close_session(self, session: Session) -> None:
        self.store.remove(session.id)
        try:
            await session.transport.terminate()
        except Exception:
            logger.exception(f"Failed to terminate session {session.id}")

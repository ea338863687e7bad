# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Protocol endpoint bound to one session.

A :class:`SessionEndpoint` couples the reference SDK's streamable HTTP
transport with a per-session :class:`mcp.server.lowlevel.Server`.  It emits a
closed set of lifecycle events to its observers:

``established``
    Fired once, when the transport answers the initialize request with a 2xx
    response carrying the session id, and before that response is sent.
``closed``
    Fired once, when the background server task ends for any reason
    (server-initiated close, client ``DELETE``, crash or cancellation), even
    if ``established`` never fired.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

import anyio
from anyio.abc import TaskStatus
from mcp.server.streamable_http import MCP_SESSION_ID_HEADER

from ..utils import get_logger


if TYPE_CHECKING:
    from mcp.server.lowlevel import Server
    from mcp.server.streamable_http import StreamableHTTPServerTransport
    from starlette.types import Message, Receive, Scope, Send


_CLOSE_WAIT_TIMEOUT = 5.0
_SESSION_HEADER = MCP_SESSION_ID_HEADER.lower().encode("latin-1")


class CloseReason(str, Enum):
    SERVER = "server"
    PEER = "peer"
    ERROR = "error"


class EndpointObserver(Protocol):
    async def on_established(self, endpoint: SessionEndpoint) -> None: ...

    async def on_closed(self, endpoint: SessionEndpoint, reason: CloseReason) -> None: ...


class SessionEndpoint:
    """One MCP conversation: SDK transport plus protocol server."""

    def __init__(
        self,
        session_id: str,
        transport: StreamableHTTPServerTransport,
        server: Server[Any, Any],
    ) -> None:
        self._assigned_id = session_id
        self._transport = transport
        self._server = server
        self._observers: list[EndpointObserver] = []
        self._logger = get_logger("heroui_mcp.session")

        self._session_id: str | None = None
        self._close_requested = False
        self._terminated_by_peer = False
        self._running = False
        self._finishing = False
        self._closed_reason: CloseReason | None = None
        self._finished = anyio.Event()

    @property
    def assigned_id(self) -> str:
        """Id this endpoint will report once its handshake completes."""
        return self._assigned_id

    @property
    def session_id(self) -> str | None:
        """The session id, or ``None`` until the handshake has completed."""
        return self._session_id

    @property
    def is_established(self) -> bool:
        return self._session_id is not None

    @property
    def is_closed(self) -> bool:
        return self._closed_reason is not None

    @property
    def closed_reason(self) -> CloseReason | None:
        return self._closed_reason

    def subscribe(self, observer: EndpointObserver) -> None:
        self._observers.append(observer)

    async def run(self, *, task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED) -> None:
        """Drive the protocol server until the transport closes."""
        reason = CloseReason.PEER
        self._running = True
        try:
            async with self._transport.connect() as (read_stream, write_stream):
                task_status.started()
                await self._server.run(
                    read_stream,
                    write_stream,
                    self._server.create_initialization_options(),
                    stateless=False,
                )
        except anyio.get_cancelled_exc_class():
            reason = CloseReason.SERVER
            raise
        except Exception:
            reason = CloseReason.ERROR
            self._logger.exception("Session crashed", extra={"context": {"session_id": self._assigned_id}})
        finally:
            self._finishing = True
            if self._close_requested and not self._terminated_by_peer and reason is CloseReason.PEER:
                reason = CloseReason.SERVER
            with anyio.CancelScope(shield=True):
                await self._emit_closed(reason)
            self._finished.set()

    async def handle_request(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Forward one HTTP request into the transport."""

        async def send_with_handshake(message: Message) -> None:
            if message["type"] == "http.response.start" and not self.is_established:
                status = int(message.get("status", 500))
                if 200 <= status < 300 and _response_session_id(message) == self._assigned_id:
                    await self._emit_established()
            await send(message)

        await self._transport.handle_request(scope, receive, send_with_handshake)

    async def close(self) -> None:
        """Terminate the transport; later calls are no-ops."""
        if self._close_requested:
            return
        self._close_requested = True
        # A client DELETE terminates the transport before the registry closes us.
        if self._transport.is_terminated:
            self._terminated_by_peer = True
        else:
            await self._transport.terminate()
        if self._running and not self._finishing:
            with anyio.move_on_after(_CLOSE_WAIT_TIMEOUT):
                await self._finished.wait()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _emit_established(self) -> None:
        self._session_id = self._assigned_id
        self._logger.info("Session established", extra={"context": {"session_id": self._session_id}})
        for observer in list(self._observers):
            try:
                await observer.on_established(self)
            except Exception:
                self._logger.exception(
                    "Session observer failed on establish",
                    extra={"context": {"session_id": self._session_id}},
                )

    async def _emit_closed(self, reason: CloseReason) -> None:
        if self._closed_reason is not None:
            return
        self._closed_reason = reason
        self._logger.info(
            "Session closed",
            extra={"context": {"session_id": self._assigned_id, "reason": reason.value}},
        )
        for observer in list(self._observers):
            try:
                await observer.on_closed(self, reason)
            except Exception:
                self._logger.exception(
                    "Session observer failed on close",
                    extra={"context": {"session_id": self._assigned_id}},
                )


def _response_session_id(message: Message) -> str | None:
    for name, value in message.get("headers", ()):
        if name.lower() == _SESSION_HEADER:
            return value.decode("latin-1")
    return None


__all__ = ["CloseReason", "EndpointObserver", "SessionEndpoint"]

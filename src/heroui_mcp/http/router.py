# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Session-addressed request router.

Every physical request on the MCP path is classified on its own:

* a non-empty ``mcp-session-id`` header makes it a **continuation** of that
  session;
* otherwise a ``POST`` whose body is an ``initialize`` request is an
  **initiation**;
* anything else is **malformed**.

``GET`` (notification stream) and ``DELETE`` (terminate) are only valid as
continuations.  Classification is synchronous; the router only suspends once
it dispatches.  Every failure is rendered as a JSON-RPC error body by
:func:`heroui_mcp.errors.error_response`; exceptions never reach the
framework's generic handlers.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
import json
from typing import TYPE_CHECKING, Any, Protocol

import anyio
from mcp.server.streamable_http import MCP_SESSION_ID_HEADER
from starlette.datastructures import Headers
from starlette.requests import ClientDisconnect, Request

from ..errors import (
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    EndpointDispatchError,
    MalformedRequestError,
    McpServerError,
    RequestId,
    ServiceUnavailableError,
    SessionNotFoundError,
    error_response,
)
from ..utils import get_logger


if TYPE_CHECKING:
    from anyio.abc import TaskGroup
    from starlette.types import Message, Receive, Scope, Send

    from ..session import Endpoint, IdleReaper, SessionRegistry


ALLOWED_METHODS = ("GET", "POST", "DELETE")
INITIALIZE_METHOD = "initialize"


class RequestKind(str, Enum):
    INITIATION = "initiation"
    CONTINUATION = "continuation"
    MALFORMED = "malformed"


@dataclass(frozen=True, slots=True)
class Classification:
    kind: RequestKind
    session_id: str | None = None
    reason: str | None = None


class EndpointSource(Protocol):
    """The slice of :class:`~heroui_mcp.session.EndpointFactory` the router uses."""

    def attach(self, task_group: TaskGroup) -> None: ...

    def detach(self) -> None: ...

    async def create_endpoint(self) -> Any: ...


def session_id_from(headers: Headers) -> str | None:
    """Return the trimmed session header, treating blank values as absent."""
    value = headers.get(MCP_SESSION_ID_HEADER)
    if value is None:
        return None
    value = value.strip()
    return value or None


def is_initialize_request(payload: Any) -> bool:
    return (
        isinstance(payload, dict)
        and payload.get("method") == INITIALIZE_METHOD
        and "id" in payload
        and payload.get("jsonrpc", "2.0") == "2.0"
    )


def classify(method: str, session_id: str | None, payload: Any = None) -> Classification:
    if session_id is not None:
        return Classification(RequestKind.CONTINUATION, session_id=session_id)
    if method == "POST" and is_initialize_request(payload):
        return Classification(RequestKind.INITIATION)
    if method == "POST":
        reason = "Bad Request: No valid session ID provided and request is not an initialize request"
    else:
        reason = f"Bad Request: {method} requires an {MCP_SESSION_ID_HEADER} header"
    return Classification(RequestKind.MALFORMED, reason=reason)


def request_id_of(payload: Any) -> RequestId:
    if isinstance(payload, dict):
        candidate = payload.get("id")
        if isinstance(candidate, (str, int)) and not isinstance(candidate, bool):
            return candidate
    return None


class _TrackedSend:
    """Wrap ``send`` to remember whether (and with what status) a response started."""

    __slots__ = ("_send", "status")

    def __init__(self, send: Send) -> None:
        self._send = send
        self.status: int | None = None

    @property
    def started(self) -> bool:
        return self.status is not None

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.status = int(message["status"])
        await self._send(message)


def _replay(body: bytes, receive: Receive) -> Receive:
    """Return a ``receive`` that yields *body* once, then defers to the real channel."""
    delivered = False

    async def replay() -> Message:
        nonlocal delivered
        if not delivered:
            delivered = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


class RequestRouter:
    """ASGI callable mounted on the MCP path."""

    def __init__(
        self,
        registry: SessionRegistry,
        factory: EndpointSource,
        *,
        reaper: IdleReaper | None = None,
    ) -> None:
        self._registry = registry
        self._factory = factory
        self._reaper = reaper
        self._accepting = False
        self._logger = get_logger("heroui_mcp.http")

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    @property
    def accepting(self) -> bool:
        return self._accepting

    def stop_accepting(self) -> None:
        if self._accepting:
            self._logger.info("No longer accepting new sessions")
        self._accepting = False

    @asynccontextmanager
    async def run(self) -> AsyncIterator[None]:
        """Own endpoint tasks and the idle reaper for the lifetime of the context.

        On exit, new sessions are refused before the registry is shut down.
        """
        async with anyio.create_task_group() as tg:
            self._factory.attach(tg)
            if self._reaper is not None:
                tg.start_soon(self._reaper.run)
            self._accepting = True
            try:
                yield
            finally:
                self.stop_accepting()
                with anyio.CancelScope(shield=True):
                    await self._registry.shutdown()
                self._factory.detach()
                tg.cancel_scope.cancel()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            raise TypeError(f"RequestRouter only handles http scopes (got {scope['type']!r})")

        tracked = _TrackedSend(send)
        method = scope["method"]
        headers = Headers(scope=scope)
        session_id = session_id_from(headers)
        request_id: RequestId = None

        self._logger.info(
            "%s %s",
            method,
            scope.get("path", ""),
            extra={"context": {"session_id": session_id or "N/A"}},
        )

        try:
            if method not in ALLOWED_METHODS:
                raise McpServerError(
                    f"Method not allowed: {method}",
                    code=METHOD_NOT_FOUND,
                    status_code=405,
                )

            payload: Any = None
            if method == "POST":
                body = await self._read_body(scope, receive)
                if body is None:
                    return
                receive = _replay(body, receive)
                payload = self._parse_body(headers, body, session_id)
                request_id = request_id_of(payload)

            await self._dispatch(classify(method, session_id, payload), scope, receive, tracked)
        except Exception as exc:
            await self._fail(exc, request_id, scope, receive, tracked)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def _dispatch(self, outcome: Classification, scope: Scope, receive: Receive, send: _TrackedSend) -> None:
        if outcome.kind is RequestKind.MALFORMED:
            raise MalformedRequestError(outcome.reason or "Bad Request")

        if outcome.kind is RequestKind.CONTINUATION:
            session_id = outcome.session_id
            if not session_id:
                raise MalformedRequestError(f"Bad Request: missing {MCP_SESSION_ID_HEADER} header")
            endpoint = self._registry.get(session_id)
            if endpoint is None:
                raise SessionNotFoundError(session_id)
            await self._forward(endpoint, scope, receive, send)
            if scope["method"] == "DELETE" and send.status is not None and 200 <= send.status < 300:
                await self._registry.remove(session_id)
            return

        if not self._accepting:
            raise ServiceUnavailableError("Server is shutting down; not accepting new sessions")

        endpoint = await self._factory.create_endpoint()
        try:
            await self._forward(endpoint, scope, receive, send)
        finally:
            if endpoint.session_id is None:
                self._logger.debug("Initialize handshake did not complete; closing endpoint")
                with anyio.CancelScope(shield=True):
                    await endpoint.close()

    async def _forward(self, endpoint: Endpoint, scope: Scope, receive: Receive, send: _TrackedSend) -> None:
        try:
            await endpoint.handle_request(scope, receive, send)
        except anyio.get_cancelled_exc_class():
            raise
        except Exception as exc:
            raise EndpointDispatchError("Error handling MCP request") from exc

    # ------------------------------------------------------------------
    # Request parsing and error shaping
    # ------------------------------------------------------------------

    async def _read_body(self, scope: Scope, receive: Receive) -> bytes | None:
        try:
            return await Request(scope, receive).body()
        except ClientDisconnect:
            self._logger.debug("Client disconnected before the request body was read")
            return None

    def _parse_body(self, headers: Headers, body: bytes, session_id: str | None) -> Any:
        content_type = headers.get("content-type", "")
        if "application/json" not in content_type.lower():
            raise MalformedRequestError(
                "Unsupported Media Type: Content-Type must be application/json",
                code=PARSE_ERROR,
            )
        try:
            return json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            if session_id is not None:
                # Continuations are forwarded as-is; the endpoint reports its own parse error.
                return None
            raise MalformedRequestError(f"Parse error: {exc}", code=PARSE_ERROR) from None

    async def _fail(
        self,
        exc: Exception,
        request_id: RequestId,
        scope: Scope,
        receive: Receive,
        send: _TrackedSend,
    ) -> None:
        status = exc.status_code if isinstance(exc, McpServerError) else 500
        if not isinstance(exc, McpServerError) or isinstance(exc, EndpointDispatchError):
            self._logger.exception("Error handling MCP request", exc_info=exc)
        else:
            self._logger.debug(
                "Rejected MCP request: %s",
                exc,
                extra={"context": {"status": status, "method": scope["method"]}},
            )

        if send.started:
            self._logger.warning("Response already started; cannot send error body")
            return

        headers = {"Allow": ", ".join(ALLOWED_METHODS)} if status == 405 else None
        response = error_response(exc, request_id, headers=headers)
        with anyio.CancelScope(shield=True):
            await response(scope, receive, send)


__all__ = [
    "ALLOWED_METHODS",
    "Classification",
    "EndpointSource",
    "RequestKind",
    "RequestRouter",
    "classify",
    "is_initialize_request",
    "request_id_of",
    "session_id_from",
]

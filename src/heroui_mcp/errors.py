# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Error taxonomy and JSON-RPC error shaping.

Every failure that crosses the HTTP boundary is rendered as a JSON-RPC error
object (``{"jsonrpc": "2.0", "error": {...}, "id": ...}``).  Exceptions that are
not part of the hierarchy below are reported as ``INTERNAL_ERROR`` with a
generic message so implementation details never reach the client.
"""

from __future__ import annotations

from typing import Any, Final

from starlette.responses import JSONResponse


PARSE_ERROR: Final[int] = -32700
INVALID_REQUEST: Final[int] = -32600
METHOD_NOT_FOUND: Final[int] = -32601
INVALID_PARAMS: Final[int] = -32602
INTERNAL_ERROR: Final[int] = -32603
SERVER_ERROR: Final[int] = -32000
SESSION_ERROR: Final[int] = -32001
VALIDATION_ERROR: Final[int] = -32002
SERVICE_UNAVAILABLE: Final[int] = -32003

GENERIC_INTERNAL_MESSAGE: Final[str] = "Internal server error"

RequestId = str | int | None


class McpServerError(Exception):
    """Base class for errors rendered as structured JSON-RPC error bodies."""

    code: int = SERVER_ERROR
    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        data: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.data = data


class MalformedRequestError(McpServerError):
    """Request is neither a continuation nor a recognizable initiation."""

    code = INVALID_REQUEST
    status_code = 400


class SessionNotFoundError(McpServerError):
    """Continuation request names a session that is not (or no longer) live."""

    code = SESSION_ERROR
    status_code = 404

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}", data={"sessionId": session_id})
        self.session_id = session_id


class ValidationError(McpServerError):
    """Operation arguments failed validation."""

    code = VALIDATION_ERROR
    status_code = 400


class EndpointDispatchError(McpServerError):
    """The bound endpoint raised while processing a forwarded request."""

    code = INTERNAL_ERROR
    status_code = 500


class ServiceUnavailableError(McpServerError):
    """The server is shutting down and no longer creates sessions."""

    code = SERVICE_UNAVAILABLE
    status_code = 503


class ConfigError(ValueError):
    """Raised for invalid configuration values."""


def error_payload(error: BaseException, request_id: RequestId = None) -> dict[str, Any]:
    """Return the JSON-RPC error envelope for *error*."""
    if isinstance(error, McpServerError):
        body: dict[str, Any] = {"code": error.code, "message": error.message}
        if error.data is not None:
            body["data"] = error.data
    else:
        body = {"code": INTERNAL_ERROR, "message": GENERIC_INTERNAL_MESSAGE}
    return {"jsonrpc": "2.0", "error": body, "id": request_id}


def status_for(error: BaseException) -> int:
    if isinstance(error, McpServerError):
        return error.status_code
    return 500


def error_response(
    error: BaseException,
    request_id: RequestId = None,
    *,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render *error* as a Starlette response with the matching HTTP status."""
    return JSONResponse(error_payload(error, request_id), status_code=status_for(error), headers=headers)


__all__ = [
    "ConfigError",
    "EndpointDispatchError",
    "GENERIC_INTERNAL_MESSAGE",
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "MalformedRequestError",
    "McpServerError",
    "PARSE_ERROR",
    "SERVER_ERROR",
    "SERVICE_UNAVAILABLE",
    "SESSION_ERROR",
    "ServiceUnavailableError",
    "SessionNotFoundError",
    "VALIDATION_ERROR",
    "ValidationError",
    "error_payload",
    "error_response",
    "status_for",
]

# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

from __future__ import annotations

import json

import pytest

from heroui_mcp.errors import (
    GENERIC_INTERNAL_MESSAGE,
    INTERNAL_ERROR,
    EndpointDispatchError,
    MalformedRequestError,
    McpServerError,
    ServiceUnavailableError,
    SessionNotFoundError,
    ValidationError,
    error_payload,
    error_response,
    status_for,
)


@pytest.mark.parametrize(
    ("error", "status", "code"),
    [
        (MalformedRequestError("bad"), 400, -32600),
        (SessionNotFoundError("abc"), 404, -32001),
        (ValidationError("bad args"), 400, -32002),
        (ServiceUnavailableError("closing"), 503, -32003),
        (EndpointDispatchError("boom"), 500, -32603),
        (McpServerError("generic"), 500, -32000),
    ],
)
def test_error_classes_map_to_status_and_code(error, status, code):
    assert status_for(error) == status
    assert error_payload(error)["error"]["code"] == code


def test_overrides_take_precedence():
    error = MalformedRequestError("unsupported", code=-32700, status_code=415)
    assert error.code == -32700
    assert status_for(error) == 415
    assert MalformedRequestError.code == -32600


def test_payload_carries_request_id_and_data():
    payload = error_payload(SessionNotFoundError("abc"), 9)
    assert payload == {
        "jsonrpc": "2.0",
        "error": {"code": -32001, "message": "Session not found: abc", "data": {"sessionId": "abc"}},
        "id": 9,
    }


def test_unexpected_exceptions_are_masked():
    payload = error_payload(KeyError("secret detail"))
    assert payload["error"] == {"code": INTERNAL_ERROR, "message": GENERIC_INTERNAL_MESSAGE}
    assert payload["id"] is None
    assert status_for(KeyError()) == 500


def test_error_response_renders_json_with_headers():
    response = error_response(McpServerError("nope", status_code=405), 1, headers={"Allow": "GET"})
    assert response.status_code == 405
    assert response.headers["allow"] == "GET"
    assert json.loads(response.body)["error"]["message"] == "nope"

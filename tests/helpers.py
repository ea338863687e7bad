# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Shared test helpers: fake endpoints, a fake clock and a raw ASGI driver."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any

import anyio
import anyio.lowlevel

from heroui_mcp.config import CacheConfig
from heroui_mcp.session import RegistryBinding, generate_session_id


BUTTON_MDX = """---
title: "Button"
---

import {buttonContent} from "@/content/components/button";

# Button

Buttons allow users to perform actions and choose with a single tap.

<ComponentLinks component="button" storybook="button" />

## Installation

<PackageManagers
  commands={{ npm: "npm install @heroui/button" }}
/>

## Usage

<CodeDemo title="Usage" files={buttonContent.usage} />

### Disabled

<CodeDemo title="Disabled" files={buttonContent.disabledState} />

<Spacer />

## Slots

- **base**: The base slot of the button.

## Data Attributes

`Button` has the following attributes on the `base` element:

- **data-hover**: When the button is being hovered.

## Accessibility

- Button has role of `button`.

## API

### Button Props

| Prop    | Type   |
| ------- | ------ |
| variant | string |
"""

PLAIN_MDX = """# Plain

## Overview

Nothing else to see here.
"""

BUTTON_USAGE_JSX = """import {Button} from "@heroui/react";

export default function App() {
  return <Button><svg viewBox="0 0 24 24"><path d="M0 0h24v24H0z" /></svg>Press</Button>;
}
"""


def write_mirror(config: CacheConfig) -> None:
    docs = config.component_docs_path
    docs.mkdir(parents=True, exist_ok=True)
    (docs / "button.mdx").write_text(BUTTON_MDX, encoding="utf-8")
    (docs / "plain.mdx").write_text(PLAIN_MDX, encoding="utf-8")

    demos = config.code_demos_path / "button"
    demos.mkdir(parents=True, exist_ok=True)
    (demos / "usage.raw.jsx").write_text(BUTTON_USAGE_JSX, encoding="utf-8")


class FakeClock:
    def __init__(self, now: float = 10_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeEndpoint:
    """In-memory endpoint that answers every request with a canned JSON body."""

    def __init__(
        self,
        session_id: str | None = None,
        *,
        status: int = 200,
        establish: bool = True,
        fail_close: bool = False,
        fail_request: bool = False,
    ) -> None:
        self.assigned_id = session_id or generate_session_id()
        self.session_id: str | None = None
        self.status = status
        self.establish = establish
        self.fail_close = fail_close
        self.fail_request = fail_request
        self.observers: list[Any] = []
        self.requests: list[tuple[str, bytes]] = []
        self.close_calls = 0

    def subscribe(self, observer: Any) -> None:
        self.observers.append(observer)

    async def handle_request(self, scope, receive, send) -> None:
        message = await receive()
        self.requests.append((scope["method"], message.get("body", b"")))
        if self.fail_request:
            raise RuntimeError("endpoint exploded")

        if self.establish and self.session_id is None and 200 <= self.status < 300:
            self.session_id = self.assigned_id
            for observer in self.observers:
                await observer.on_established(self)

        await anyio.lowlevel.checkpoint()
        await send(
            {
                "type": "http.response.start",
                "status": self.status,
                "headers": [
                    (b"content-type", b"application/json"),
                    (b"mcp-session-id", self.assigned_id.encode()),
                ],
            }
        )
        await send({"type": "http.response.body", "body": b'{"jsonrpc": "2.0", "id": 1, "result": {}}'})

    async def close(self) -> None:
        self.close_calls += 1
        await anyio.lowlevel.checkpoint()
        if self.fail_close:
            raise RuntimeError("close failure")


class FakeFactory:
    """Endpoint factory producing :class:`FakeEndpoint` instances bound to a registry."""

    def __init__(self, registry, **endpoint_options: Any) -> None:
        self._binding = RegistryBinding(registry)
        self.endpoint_options = endpoint_options
        self.created: list[FakeEndpoint] = []
        self.task_group = None

    def attach(self, task_group) -> None:
        self.task_group = task_group

    def detach(self) -> None:
        self.task_group = None

    async def create_endpoint(self) -> FakeEndpoint:
        await anyio.lowlevel.checkpoint()
        endpoint = FakeEndpoint(**self.endpoint_options)
        endpoint.subscribe(self._binding)
        self.created.append(endpoint)
        return endpoint


@dataclass
class AsgiResponse:
    messages: list[dict[str, Any]] = field(default_factory=list)

    @property
    def starts(self) -> list[dict[str, Any]]:
        return [m for m in self.messages if m["type"] == "http.response.start"]

    @property
    def status(self) -> int:
        return int(self.starts[0]["status"])

    @property
    def headers(self) -> dict[str, str]:
        return {name.decode().lower(): value.decode() for name, value in self.starts[0].get("headers", [])}

    @property
    def body(self) -> bytes:
        return b"".join(m.get("body", b"") for m in self.messages if m["type"] == "http.response.body")

    def json(self) -> Any:
        return json.loads(self.body)


async def asgi_request(
    app,
    method: str,
    path: str = "/mcp",
    *,
    headers: dict[str, str] | None = None,
    body: bytes | dict[str, Any] | None = None,
) -> AsgiResponse:
    """Drive *app* with a single raw ASGI HTTP request."""
    if isinstance(body, dict):
        payload = json.dumps(body).encode()
    else:
        payload = body or b""

    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "query_string": b"",
        "root_path": "",
        "headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()],
        "client": ("127.0.0.1", 50000),
        "server": ("testserver", 80),
    }
    response = AsgiResponse()
    delivered = False

    async def receive() -> dict[str, Any]:
        nonlocal delivered
        if not delivered:
            delivered = True
            return {"type": "http.request", "body": payload, "more_body": False}
        return {"type": "http.disconnect"}

    async def send(message: dict[str, Any]) -> None:
        response.messages.append(message)

    await app(scope, receive, send)
    return response


JSON_HEADERS = {"content-type": "application/json"}


def initialize_body(request_id: int = 1) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "initialize",
        "params": {
            "protocolVersion": "2025-03-26",
            "capabilities": {},
            "clientInfo": {"name": "test-client", "version": "1.0"},
        },
    }

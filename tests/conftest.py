# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Shared fixtures: an on-disk documentation mirror and ASGI clients."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging
from pathlib import Path

import httpx
import pytest

from heroui_mcp.config import CacheConfig, ServerConfig
from tests.helpers import write_mirror


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def cache_config(tmp_path: Path) -> CacheConfig:
    config = CacheConfig(cache_dir=tmp_path / "cache", validate_git_on_startup=False)
    write_mirror(config)
    return config


@pytest.fixture
def server_config(cache_config: CacheConfig) -> ServerConfig:
    config = ServerConfig(cache=cache_config)
    config.session.json_response = True
    return config


@pytest.fixture
def httpx_async_client(anyio_backend):
    """Return a factory that opens an ``httpx.AsyncClient`` bound to an ASGI app."""

    @asynccontextmanager
    async def factory(app) -> AsyncIterator[httpx.AsyncClient]:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client

    return factory


@pytest.fixture
def restore_root_logging():
    """Undo root logger changes made by ``setup_logger``."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.handlers = handlers
    root.setLevel(level)

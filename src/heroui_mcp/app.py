# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Application lifecycle.

:class:`DocsApplication` wires the documentation mirror, the Capability Set,
the session layer and the HTTP surface together, and owns the listening
socket through :class:`uvicorn.Server`.

Startup ensures the mirror before accepting traffic; a mirror failure is
logged and the server starts anyway.  Shutdown runs in a fixed order, each
step awaited before the next:

1. the router stops creating sessions,
2. the session registry closes every endpoint,
3. uvicorn stops and releases the socket.
"""

from __future__ import annotations

from contextlib import AsyncExitStack
import signal
from types import FrameType

import anyio
import uvicorn

from .cache import GitCache
from .capabilities import CapabilitySet, build_capability_set
from .config import ServerConfig
from .http import RequestRouter, create_app
from .session import EndpointFactory, IdleReaper, SessionRegistry
from .utils import get_logger


_POLL_INTERVAL = 0.1


class _Server(uvicorn.Server):
    """uvicorn server whose signal handler only records the request to exit.

    :meth:`DocsApplication.stop` performs the ordered shutdown; a second
    SIGINT forces uvicorn out as usual.
    """

    def __init__(self, config: uvicorn.Config) -> None:
        super().__init__(config)
        self.exit_requested = False

    def handle_exit(self, sig: int, frame: FrameType | None) -> None:
        if self.exit_requested and sig == signal.SIGINT:
            self.force_exit = True
            self.should_exit = True
        self.exit_requested = True


class DocsApplication:
    def __init__(
        self,
        config: ServerConfig | None = None,
        *,
        git_cache: GitCache | None = None,
        registry: SessionRegistry | None = None,
        capabilities: CapabilitySet | None = None,
        skip_cache: bool = False,
    ) -> None:
        self.config = config or ServerConfig()
        self.git_cache = git_cache or GitCache(self.config.cache)
        self.registry = registry or SessionRegistry()
        self.capabilities = capabilities or build_capability_set(self.config.cache)
        self.skip_cache = skip_cache
        self.reaper = IdleReaper(
            self.registry,
            timeout=self.config.session.session_timeout,
            interval=self.config.session.cleanup_interval,
        )
        self.factory = EndpointFactory(self.registry, self.capabilities, self.config)
        self.router = RequestRouter(self.registry, self.factory, reaper=self.reaper)
        self.asgi_app = create_app(self.config, self.router, git_cache=self.git_cache)

        self._logger = get_logger("heroui_mcp.app")
        self._server: _Server | None = None
        self._stack: AsyncExitStack | None = None
        self._serving_done: anyio.Event | None = None
        self._stopped = False

    @property
    def started(self) -> bool:
        return self._server is not None and self._server.started

    async def start(self) -> None:
        if self._server is not None:
            return

        if self.skip_cache:
            self._logger.info("Skipping documentation cache initialization")
        else:
            result = await self.git_cache.ensure_ready()
            if result.success:
                self._logger.info(result.message)
            else:
                self._logger.warning(
                    "Documentation cache unavailable; starting without it",
                    extra={"context": {"error": result.message}},
                )

        self._server = _Server(
            uvicorn.Config(
                self.asgi_app,
                host=self.config.host,
                port=self.config.port,
                log_level=self.config.log_level,
            )
        )
        self._serving_done = anyio.Event()
        self._stack = AsyncExitStack()
        task_group = await self._stack.enter_async_context(anyio.create_task_group())
        task_group.start_soon(self._serve_http)

        while not self._server.started:
            if self._serving_done.is_set():
                await self._stack.aclose()
                raise RuntimeError(f"HTTP server failed to start on {self.config.host}:{self.config.port}")
            await anyio.sleep(_POLL_INTERVAL / 2)

        self._logger.info(
            "Server listening",
            extra={
                "context": {
                    "url": f"http://{self.config.host}:{self.config.port}{self.config.path}",
                    "health": f"http://{self.config.host}:{self.config.port}/health",
                }
            },
        )

    async def stop(self) -> None:
        if self._stopped or self._server is None:
            return
        if self._serving_done is None or self._stack is None:
            raise RuntimeError("DocsApplication.stop() called before start() completed")
        self._stopped = True
        self._logger.info("Shutting down", extra={"context": {"active_sessions": self.registry.count()}})

        with anyio.CancelScope(shield=True):
            self.router.stop_accepting()
            await self.registry.shutdown()

            self._server.should_exit = True
            await self._serving_done.wait()
        # The task group from start() must exit outside the shield scope.
        await self._stack.aclose()

        self._logger.info("Server stopped")

    async def serve(self) -> None:
        """Start, wait for SIGINT/SIGTERM, then stop."""
        await self.start()
        server, serving_done = self._running()
        try:
            while not server.exit_requested and not serving_done.is_set():
                await anyio.sleep(_POLL_INTERVAL)
        finally:
            await self.stop()

    def _running(self) -> tuple[_Server, anyio.Event]:
        if self._server is None or self._serving_done is None:
            raise RuntimeError("DocsApplication has not been started")
        return self._server, self._serving_done

    async def _serve_http(self) -> None:
        server, serving_done = self._running()
        try:
            await server.serve()
        except SystemExit:
            # uvicorn exits the process when it cannot bind.
            self._logger.error("HTTP server exited during startup")
        finally:
            serving_done.set()


__all__ = ["DocsApplication"]

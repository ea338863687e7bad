# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Starlette application: MCP route, health report and CORS."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from mcp.server.streamable_http import MCP_SESSION_ID_HEADER
from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from ..utils import get_logger
from .router import ALLOWED_METHODS, RequestRouter


if TYPE_CHECKING:
    from ..cache import GitCache
    from ..config import ServerConfig


logger = get_logger("heroui_mcp.http")


class HealthEndpoint:
    """``GET /health``: process, session and mirror status."""

    def __init__(self, config: ServerConfig, router: RequestRouter, git_cache: GitCache | None) -> None:
        self._config = config
        self._router = router
        self._git_cache = git_cache

    async def handle(self, request: Request) -> Response:
        try:
            payload = await self.report()
        except Exception as exc:
            logger.exception("Health check failed")
            return JSONResponse(
                {
                    "status": "error",
                    "error": "Health check failed",
                    "message": str(exc),
                    "timestamp": _now(),
                },
                status_code=500,
            )
        return JSONResponse(payload)

    async def report(self) -> dict[str, object]:
        cache: dict[str, object] = {"initialized": False, "valid": False, "lastChecked": None}
        if self._git_cache is not None:
            cache = (await self._git_cache.check_status()).to_json()

        return {
            "status": "ok" if self._router.accepting else "shutting_down",
            "name": self._config.name,
            "version": self._config.version,
            "timestamp": _now(),
            "sessions": self._router.registry.count(),
            "cache": cache,
        }


async def _http_error(request: Request, exc: Exception) -> Response:
    status = exc.status_code if isinstance(exc, HTTPException) else 404
    if status != 404:
        return JSONResponse({"error": getattr(exc, "detail", "Error")}, status_code=status)
    return JSONResponse(
        {"error": "Not Found", "message": f"Route {request.method} {request.url.path} not found"},
        status_code=404,
    )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_app(
    config: ServerConfig,
    router: RequestRouter,
    *,
    git_cache: GitCache | None = None,
    lifespan: Callable[[Starlette], AbstractAsyncContextManager[None]] | None = None,
) -> Starlette:
    """Build the ASGI application.

    By default the application's lifespan enters :meth:`RequestRouter.run`;
    pass ``lifespan`` to own that context elsewhere.
    """
    if lifespan is None:

        @asynccontextmanager
        async def lifespan(_app: Starlette) -> AsyncIterator[None]:
            async with router.run():
                yield

    routes = [
        Route(config.path, endpoint=router),
        Route("/health", endpoint=HealthEndpoint(config, router, git_cache).handle, methods=["GET"]),
    ]
    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=list(config.cors_allow_origins),
            allow_methods=[*ALLOWED_METHODS, "OPTIONS"],
            allow_headers=["Content-Type", "Authorization", MCP_SESSION_ID_HEADER, "mcp-protocol-version", "Last-Event-ID"],
            expose_headers=[MCP_SESSION_ID_HEADER],
        )
    ]
    return Starlette(
        routes=routes,
        middleware=middleware,
        exception_handlers={404: _http_error, 405: _http_error},
        lifespan=lifespan,
    )


__all__ = ["HealthEndpoint", "create_app"]

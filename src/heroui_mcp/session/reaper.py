# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Periodic eviction of idle sessions."""

from __future__ import annotations

import anyio

from ..utils import get_logger
from .registry import Clock, SessionRegistry


DEFAULT_SESSION_TIMEOUT = 30 * 60.0
DEFAULT_CLEANUP_INTERVAL = 5 * 60.0


class IdleReaper:
    """Evict sessions whose last activity is older than ``timeout`` seconds.

    A sweep first collects every stale id and then evicts them one by one
    through :meth:`SessionRegistry.remove`, so the registry is never mutated
    while it is being scanned.  A session that sees activity after it was
    marked is still evicted by that sweep.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        *,
        timeout: float = DEFAULT_SESSION_TIMEOUT,
        interval: float = DEFAULT_CLEANUP_INTERVAL,
        clock: Clock | None = None,
    ) -> None:
        self._registry = registry
        self._timeout = timeout
        self._interval = interval
        self._clock = clock or registry.clock
        self._logger = get_logger("heroui_mcp.session")

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def interval(self) -> float:
        return self._interval

    async def run(self) -> None:
        """Sweep every ``interval`` seconds until cancelled."""
        self._logger.debug(
            "Idle reaper started",
            extra={"context": {"timeout": self._timeout, "interval": self._interval}},
        )
        while True:
            await anyio.sleep(self._interval)
            await self.cleanup()

    def stale_ids(self) -> list[str]:
        now = self._clock()
        return [
            record.session_id
            for record in self._registry.records()
            if not record.closing and now - record.last_activity_at > self._timeout
        ]

    async def cleanup(self) -> list[str]:
        """Run one sweep now and return the evicted session ids."""
        evicted: list[str] = []
        for session_id in self.stale_ids():
            try:
                removed = await self._registry.remove(session_id)
            except Exception:
                self._logger.exception("Failed to evict idle session", extra={"context": {"session_id": session_id}})
                continue
            if removed:
                evicted.append(session_id)
                self._logger.info("Evicted idle session", extra={"context": {"session_id": session_id}})

        if evicted:
            self._logger.info(
                "Idle session sweep complete",
                extra={"context": {"evicted": len(evicted), "active_sessions": self._registry.count()}},
            )
        return evicted


__all__ = ["DEFAULT_CLEANUP_INTERVAL", "DEFAULT_SESSION_TIMEOUT", "IdleReaper"]

# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""In-memory session registry.

The registry is the only shared mutable structure in the session layer.  It
maps a server-issued session id to the endpoint that owns the conversation,
plus creation and last-activity timestamps.

Removal always closes the owned endpoint before the entry disappears.  An
entry being removed is marked ``closing``: lookups treat it as absent and a
second ``remove`` for the same id returns immediately, which keeps removal
idempotent even when the endpoint's own close signal re-enters the registry
while ``close()`` is still being awaited.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import math
import time
from typing import TYPE_CHECKING, Protocol

from ..utils import get_logger


if TYPE_CHECKING:
    from starlette.types import Receive, Scope, Send


Clock = Callable[[], float]


class Endpoint(Protocol):
    """What the registry and router need from a protocol endpoint."""

    @property
    def session_id(self) -> str | None: ...

    async def handle_request(self, scope: Scope, receive: Receive, send: Send) -> None: ...

    async def close(self) -> None: ...


@dataclass(slots=True)
class SessionRecord:
    session_id: str
    endpoint: Endpoint
    created_at: float
    last_activity_at: float
    closing: bool = False


class SessionRegistry:
    """Session id to endpoint map with activity tracking."""

    def __init__(self, *, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._records: dict[str, SessionRecord] = {}
        self._logger = get_logger("heroui_mcp.session")

    @property
    def clock(self) -> Clock:
        return self._clock

    def get(self, session_id: str) -> Endpoint | None:
        """Return the live endpoint for *session_id* and refresh its activity timestamp."""
        record = self._records.get(session_id)
        if record is None or record.closing:
            return None
        record.last_activity_at = self._tick(record.last_activity_at)
        self._logger.debug("Reusing session", extra={"context": {"session_id": session_id}})
        return record.endpoint

    def set(self, session_id: str, endpoint: Endpoint) -> None:
        previous = self._records.get(session_id)
        if previous is not None and previous.endpoint is not endpoint:
            # Ids are generated server-side; reaching this means two endpoints were issued the same id.
            self._logger.error(
                "Session id already bound to a different endpoint",
                extra={"context": {"session_id": session_id}},
            )
        now = self._clock()
        self._records[session_id] = SessionRecord(
            session_id=session_id,
            endpoint=endpoint,
            created_at=now,
            last_activity_at=now,
        )
        self._logger.info(
            "Session registered",
            extra={"context": {"session_id": session_id, "active_sessions": len(self._records)}},
        )

    def record(self, session_id: str) -> SessionRecord | None:
        """Return the raw record without touching its activity timestamp."""
        return self._records.get(session_id)

    def records(self) -> list[SessionRecord]:
        return list(self._records.values())

    def all_ids(self) -> list[str]:
        return list(self._records)

    def count(self) -> int:
        return len(self._records)

    async def remove(self, session_id: str) -> bool:
        """Close the endpoint bound to *session_id* and drop the entry.

        Returns ``False`` when there was nothing to remove (unknown id, or a
        removal already in progress).  Errors raised by ``close()`` propagate
        after the entry has been dropped.
        """
        record = self._records.get(session_id)
        if record is None or record.closing:
            return False

        record.closing = True
        try:
            await record.endpoint.close()
        finally:
            if self._records.get(session_id) is record:
                del self._records[session_id]
            self._logger.info(
                "Session removed",
                extra={"context": {"session_id": session_id, "active_sessions": len(self._records)}},
            )
        return True

    async def shutdown(self) -> None:
        """Close every live endpoint and clear the registry.

        A failing ``close()`` is logged and does not stop the remaining
        endpoints from being closed.
        """
        records = list(self._records.values())
        self._logger.info("Closing all sessions", extra={"context": {"active_sessions": len(records)}})

        failures = 0
        for record in records:
            if record.closing:
                continue
            record.closing = True
            try:
                await record.endpoint.close()
            except Exception:
                failures += 1
                self._logger.exception(
                    "Failed to close session endpoint",
                    extra={"context": {"session_id": record.session_id}},
                )

        self._records.clear()
        self._logger.info(
            "Session registry shut down",
            extra={"context": {"closed": len(records) - failures, "failed": failures}},
        )

    def _tick(self, previous: float) -> float:
        now = self._clock()
        if now <= previous:
            now = math.nextafter(previous, math.inf)
        return now


__all__ = ["Clock", "Endpoint", "SessionRecord", "SessionRegistry"]

# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Session registry, idle reaper and endpoint lifecycle."""

from __future__ import annotations

from .endpoint import CloseReason, EndpointObserver, SessionEndpoint
from .factory import EndpointFactory, RegistryBinding, generate_session_id
from .reaper import IdleReaper
from .registry import Endpoint, SessionRecord, SessionRegistry


__all__ = [
    "CloseReason",
    "Endpoint",
    "EndpointFactory",
    "EndpointObserver",
    "IdleReaper",
    "RegistryBinding",
    "SessionEndpoint",
    "SessionRecord",
    "SessionRegistry",
    "generate_session_id",
]

# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""HTTP surface: the session-addressed router and the Starlette app around it."""

from __future__ import annotations

from .app import HealthEndpoint, create_app
from .router import Classification, RequestKind, RequestRouter, classify, is_initialize_request


__all__ = [
    "Classification",
    "HealthEndpoint",
    "RequestKind",
    "RequestRouter",
    "classify",
    "create_app",
    "is_initialize_request",
]

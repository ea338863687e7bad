# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""MCP server exposing HeroUI component documentation to AI agents.

The public surface mirrors the layers of the service:

* :class:`DocsApplication` owns startup and ordered shutdown.
* :class:`RequestRouter` classifies requests as initiation, continuation or
  malformed and forwards them to per-session endpoints.
* :class:`SessionRegistry`, :class:`IdleReaper` and :class:`EndpointFactory`
  manage session lifetimes.
* :class:`GitCache` keeps the sparse documentation mirror current.
"""

from __future__ import annotations

from .app import DocsApplication
from .cache import GitCache
from .capabilities import CapabilitySet, build_capability_set, build_server
from .config import CacheConfig, ServerConfig, SessionConfig
from .http import RequestRouter, create_app
from .session import EndpointFactory, IdleReaper, SessionEndpoint, SessionRegistry


__version__ = "0.1.0"

__all__ = [
    "CacheConfig",
    "CapabilitySet",
    "DocsApplication",
    "EndpointFactory",
    "GitCache",
    "IdleReaper",
    "RequestRouter",
    "ServerConfig",
    "SessionConfig",
    "SessionEndpoint",
    "SessionRegistry",
    "build_capability_set",
    "build_server",
    "create_app",
]

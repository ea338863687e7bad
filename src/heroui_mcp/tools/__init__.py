# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Query operations exposed as MCP tools."""

from __future__ import annotations

from .base import COMPONENT_NAME_PATTERN, ComponentNameArguments, NoArguments, ToolSpec
from .components import ComponentDocs, component_tools


__all__ = [
    "COMPONENT_NAME_PATTERN",
    "ComponentDocs",
    "ComponentNameArguments",
    "NoArguments",
    "ToolSpec",
    "component_tools",
]

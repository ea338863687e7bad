# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Discovery resources exposed alongside the tools."""

from __future__ import annotations

from .base import ResourceSpec, ResourceTemplateSpec
from .components import COMPONENT_URI_TEMPLATE, COMPONENTS_URI, component_resources


__all__ = [
    "COMPONENTS_URI",
    "COMPONENT_URI_TEMPLATE",
    "ResourceSpec",
    "ResourceTemplateSpec",
    "component_resources",
]

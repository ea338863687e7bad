# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Capability Set and per-endpoint protocol server construction.

The Capability Set is assembled once at startup into an immutable,
name-indexed table.  Each endpoint gets its own
:class:`mcp.server.lowlevel.Server` whose list/call/read handlers are bound to
that table, so every session sees the same operations.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.shared.exceptions import McpError

from .config import CacheConfig, ServerConfig
from .errors import INVALID_PARAMS, ValidationError
from .resources import ResourceSpec, ResourceTemplateSpec, component_resources
from .tools import ComponentDocs, ToolSpec, component_tools
from .utils import get_logger


logger = get_logger("heroui_mcp.capabilities")


class DuplicateCapabilityError(ValueError):
    """Two capabilities of the same kind share a name."""


def _index(kind: str, items: Iterable[Any], key: str) -> Mapping[str, Any]:
    table: dict[str, Any] = {}
    for item in items:
        name = getattr(item, key)
        if name in table:
            raise DuplicateCapabilityError(f"Duplicate {kind} registered: {name!r}")
        table[name] = item
    return MappingProxyType(table)


@dataclass(frozen=True, slots=True)
class CapabilitySet:
    """Immutable table of tools, resources and resource templates."""

    tools: Mapping[str, ToolSpec]
    resources: Mapping[str, ResourceSpec]
    templates: Mapping[str, ResourceTemplateSpec]

    @classmethod
    def from_specs(
        cls,
        tools: Iterable[ToolSpec] = (),
        resources: Iterable[ResourceSpec] = (),
        templates: Iterable[ResourceTemplateSpec] = (),
    ) -> CapabilitySet:
        return cls(
            tools=_index("tool", tools, "name"),
            resources=_index("resource", resources, "uri"),
            templates=_index("resource template", templates, "uri_template"),
        )

    @property
    def tool_names(self) -> list[str]:
        return sorted(self.tools)

    async def call_tool(self, name: str, arguments: Mapping[str, Any] | None) -> list[types.TextContent]:
        spec = self.tools.get(name)
        if spec is None:
            raise ValidationError(f'Tool "{name}" is not available', data={"tool": name})
        text = await spec.invoke(arguments)
        return [types.TextContent(type="text", text=text)]

    async def read_resource(self, uri: str) -> tuple[str, str]:
        """Return ``(text, mime_type)`` for *uri*."""
        resource = self.resources.get(uri)
        if resource is not None:
            return await resource.reader(), resource.mime_type
        for template in self.templates.values():
            params = template.match(uri)
            if params is not None:
                return await template.reader(params), template.mime_type
        raise LookupError(f"Unknown resource: {uri}")


def build_capability_set(cache_config: CacheConfig) -> CapabilitySet:
    docs = ComponentDocs(cache_config)
    resources, templates = component_resources(docs)
    capabilities = CapabilitySet.from_specs(component_tools(docs), resources, templates)
    logger.info(
        "Capability set built",
        extra={
            "context": {
                "tools": capabilities.tool_names,
                "resources": sorted(capabilities.resources),
                "templates": sorted(capabilities.templates),
            }
        },
    )
    return capabilities


def build_server(capabilities: CapabilitySet, config: ServerConfig) -> Server[Any, Any]:
    """Create a protocol server bound to *capabilities*; one per endpoint."""
    server: Server[Any, Any] = Server(config.name, version=config.version, instructions=config.instructions)

    @server.list_tools()
    async def _list_tools() -> list[types.Tool]:
        return [spec.definition() for spec in capabilities.tools.values()]

    @server.call_tool(validate_input=False)
    async def _call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        return await capabilities.call_tool(name, arguments)

    @server.list_resources()
    async def _list_resources() -> list[types.Resource]:
        return [spec.definition() for spec in capabilities.resources.values()]

    @server.list_resource_templates()
    async def _list_resource_templates() -> list[types.ResourceTemplate]:
        return [spec.definition() for spec in capabilities.templates.values()]

    @server.read_resource()
    async def _read_resource(uri: Any) -> list[ReadResourceContents]:
        try:
            text, mime_type = await capabilities.read_resource(str(uri))
        except (LookupError, ValidationError) as exc:
            raise McpError(types.ErrorData(code=INVALID_PARAMS, message=str(exc))) from exc
        return [ReadResourceContents(content=text, mime_type=mime_type)]

    return server


__all__ = ["CapabilitySet", "DuplicateCapabilityError", "build_capability_set", "build_server"]

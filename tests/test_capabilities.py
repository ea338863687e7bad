# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Capability Set construction, dispatch and the protocol server built on it."""

from __future__ import annotations

from mcp import types
from mcp.shared.exceptions import McpError
import pytest

from heroui_mcp.capabilities import (
    CapabilitySet,
    DuplicateCapabilityError,
    build_capability_set,
    build_server,
)
from heroui_mcp.config import ServerConfig
from heroui_mcp.errors import INVALID_PARAMS, ValidationError
from heroui_mcp.resources import COMPONENT_URI_TEMPLATE, COMPONENTS_URI, ResourceSpec, ResourceTemplateSpec
from heroui_mcp.tools import ToolSpec


async def _echo(_args) -> str:
    return "echo"


async def _static() -> str:
    return "static"


async def _templated(params: dict[str, str]) -> str:
    return f"{params['a']}:{params['b']}"


def test_duplicate_tool_names_are_rejected():
    spec = ToolSpec(name="echo", title="Echo", description="", handler=_echo)
    with pytest.raises(DuplicateCapabilityError, match="echo"):
        CapabilitySet.from_specs(tools=[spec, spec])


def test_duplicate_resource_uris_are_rejected():
    resource = ResourceSpec(uri="x://one", name="one", reader=_static)
    with pytest.raises(DuplicateCapabilityError):
        CapabilitySet.from_specs(resources=[resource, resource])


def test_capability_tables_are_read_only(cache_config):
    capabilities = build_capability_set(cache_config)
    with pytest.raises(TypeError):
        capabilities.tools["extra"] = None  # type: ignore[index]


def test_template_matches_single_segments():
    template = ResourceTemplateSpec(uri_template="x://{a}/{b}", name="pair", reader=_templated)
    assert template.match("x://one/two") == {"a": "one", "b": "two"}
    assert template.match("x://one/two/three") is None
    assert template.match("y://one/two") is None


@pytest.mark.anyio
async def test_call_tool_wraps_text(cache_config):
    capabilities = build_capability_set(cache_config)

    content = await capabilities.call_tool("list_components", {})

    assert len(content) == 1
    assert isinstance(content[0], types.TextContent)
    assert "- button" in content[0].text


@pytest.mark.anyio
async def test_unknown_tool_is_validation_error(cache_config):
    capabilities = build_capability_set(cache_config)
    with pytest.raises(ValidationError, match='Tool "nope" is not available'):
        await capabilities.call_tool("nope", {})


@pytest.mark.anyio
async def test_read_static_and_templated_resources(cache_config):
    capabilities = build_capability_set(cache_config)

    assert await capabilities.read_resource(COMPONENTS_URI) == ("button\nplain", "text/plain")

    text, mime_type = await capabilities.read_resource("heroui://components/plain")
    assert text == "# Plain\n\n## Overview\n\nNothing else to see here."
    assert mime_type == "text/markdown"


@pytest.mark.anyio
async def test_resource_errors(cache_config):
    capabilities = build_capability_set(cache_config)

    with pytest.raises(LookupError):
        await capabilities.read_resource("heroui://unknown")
    with pytest.raises(LookupError):
        await capabilities.read_resource("heroui://components/card")
    with pytest.raises(ValidationError):
        await capabilities.read_resource("heroui://components/..")


def test_build_capability_set_registers_everything(cache_config):
    capabilities = build_capability_set(cache_config)

    assert len(capabilities.tool_names) == 7
    assert list(capabilities.resources) == [COMPONENTS_URI]
    assert list(capabilities.templates) == [COMPONENT_URI_TEMPLATE]


@pytest.mark.anyio
async def test_server_handlers_dispatch_into_capabilities(cache_config):
    capabilities = build_capability_set(cache_config)
    server = build_server(capabilities, ServerConfig(cache=cache_config))

    listed = await server.request_handlers[types.ListToolsRequest](types.ListToolsRequest(method="tools/list"))
    assert {tool.name for tool in listed.root.tools} == set(capabilities.tool_names)

    templates = await server.request_handlers[types.ListResourceTemplatesRequest](
        types.ListResourceTemplatesRequest(method="resources/templates/list")
    )
    assert [template.uriTemplate for template in templates.root.resourceTemplates] == [COMPONENT_URI_TEMPLATE]


@pytest.mark.anyio
async def test_server_maps_unknown_resource_to_invalid_params(cache_config):
    capabilities = build_capability_set(cache_config)
    server = build_server(capabilities, ServerConfig(cache=cache_config))
    handler = server.request_handlers[types.ReadResourceRequest]

    with pytest.raises(McpError) as excinfo:
        await handler(
            types.ReadResourceRequest(
                method="resources/read",
                params=types.ReadResourceRequestParams(uri="heroui://components/card"),
            )
        )

    assert excinfo.value.error.code == INVALID_PARAMS

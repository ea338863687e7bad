# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Discovery resources over the component documentation mirror."""

from __future__ import annotations

import re

from ..errors import ValidationError
from ..tools.base import COMPONENT_NAME_PATTERN
from ..tools.components import ComponentDocs
from .base import ResourceSpec, ResourceTemplateSpec


COMPONENTS_URI = "heroui://components"
COMPONENT_URI_TEMPLATE = "heroui://components/{name}"

_COMPONENT_NAME = re.compile(COMPONENT_NAME_PATTERN)


def component_resources(docs: ComponentDocs) -> tuple[list[ResourceSpec], list[ResourceTemplateSpec]]:
    async def read_index() -> str:
        names = await docs.component_names()
        return "\n".join(names)

    async def read_component(params: dict[str, str]) -> str:
        name = params.get("name", "")
        if not _COMPONENT_NAME.match(name):
            raise ValidationError(f"Invalid component name: {name!r}", data={"name": name})
        content = await docs.load(name)
        if content is None:
            raise LookupError(f"Component documentation for '{name}' not found in cache")
        return content

    resources = [
        ResourceSpec(
            uri=COMPONENTS_URI,
            name="components",
            title="HeroUI Components",
            description="Newline-separated list of documented HeroUI components",
            reader=read_index,
        )
    ]
    templates = [
        ResourceTemplateSpec(
            uri_template=COMPONENT_URI_TEMPLATE,
            name="component-docs",
            title="HeroUI Component Documentation",
            description="Filtered MDX documentation for one HeroUI component",
            reader=read_component,
        )
    ]
    return resources, templates


__all__ = ["COMPONENTS_URI", "COMPONENT_URI_TEMPLATE", "component_resources"]

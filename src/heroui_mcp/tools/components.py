# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Component documentation tools.

Every tool resolves ``<component_docs_path>/<componentName>.mdx`` in the
documentation mirror, filters site-only MDX noise, inlines code demos and
(optionally) narrows the result to named sections.  A missing document or
section is reported as plain text naming what exists, so agents can correct
the request instead of receiving a protocol error.
"""

from __future__ import annotations

from collections.abc import Sequence

import anyio

from ..config import CacheConfig
from ..docs import (
    available_sections,
    common_section_variations,
    extract_section_with_subsections,
    filter_mdx_content,
    replace_code_demos,
)
from ..utils import get_logger
from .base import ComponentNameArguments, NoArguments, ToolSpec


SECTION_SEPARATOR = "\n\n---\n\n"

DATA_ATTRIBUTE_VARIATIONS = (
    "Data Attributes",
    "Data Attribute",
    "HTML Attributes",
    "Attributes",
)


class ComponentDocs:
    """Read-only queries over the component documentation mirror."""

    def __init__(self, config: CacheConfig) -> None:
        self._config = config
        self._logger = get_logger("heroui_mcp.tools")

    @property
    def config(self) -> CacheConfig:
        return self._config

    async def component_names(self) -> list[str]:
        root = anyio.Path(self._config.component_docs_path)
        if not await root.is_dir():
            return []
        names = [path.stem async for path in root.glob("*.mdx")]
        return sorted(names)

    async def load(self, component: str) -> str | None:
        """Return the filtered document for *component*, or ``None`` when absent."""
        path = anyio.Path(self._config.component_docs_path) / f"{component}.mdx"
        try:
            raw = await path.read_text(encoding="utf-8")
        except OSError as exc:
            self._logger.warning(
                "Component documentation not found",
                extra={"context": {"componentName": component, "path": str(path), "error": str(exc)}},
            )
            return None
        return await replace_code_demos(filter_mdx_content(raw), self._config.code_demos_path)

    # ------------------------------------------------------------------
    # Tool handlers
    # ------------------------------------------------------------------

    async def list_components(self, _: NoArguments) -> str:
        names = await self.component_names()
        if not names:
            return (
                "No HeroUI components found in the documentation cache. "
                "The repository may not have been cloned yet."
            )
        listing = "\n- ".join(names)
        return f"HeroUI Components found:\n\n- {listing}\n\nTotal: {len(names)} components"

    async def get_component_docs(self, args: ComponentNameArguments) -> str:
        content = await self.load(args.component_name)
        if content is None:
            return _missing_document(args.component_name)
        self._logger.debug(
            "Loaded component documentation",
            extra={"context": {"componentName": args.component_name, "length": len(content)}},
        )
        return content

    async def get_component_api(self, args: ComponentNameArguments) -> str:
        return await self._sections(args.component_name, ("API",), label="API or props", fallbacks=("api", "props"))

    async def get_component_slots(self, args: ComponentNameArguments) -> str:
        return await self._sections(args.component_name, ("Slots", "Custom Styles"), label="slots or custom styles")

    async def get_component_data_attributes(self, args: ComponentNameArguments) -> str:
        return await self._sections(
            args.component_name,
            ("Data Attributes",),
            label="data attributes",
            fallbacks=DATA_ATTRIBUTE_VARIATIONS,
        )

    async def get_component_usage(self, args: ComponentNameArguments) -> str:
        return await self._sections(args.component_name, ("Usage",), label="usage")

    async def get_component_accessibility(self, args: ComponentNameArguments) -> str:
        return await self._sections(args.component_name, ("Accessibility",), label="accessibility")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _sections(
        self,
        component: str,
        names: Sequence[str],
        *,
        label: str,
        fallbacks: Sequence[str] = (),
    ) -> str:
        content = await self.load(component)
        if content is None:
            return _missing_document(component)

        found: list[str] = []
        for name in names:
            section = _first_match(content, [name, *common_section_variations(name)])
            if section is None:
                self._logger.debug(
                    "Section not found",
                    extra={"context": {"componentName": component, "section": name}},
                )
                continue
            found.append(section)

        if not found and fallbacks:
            section = _first_match(content, fallbacks)
            if section is not None:
                found.append(section)

        if not found:
            sections = ", ".join(available_sections(content))
            return f"No {label} section found for component '{component}'. Available sections: {sections}"

        return SECTION_SEPARATOR.join(found)


def _first_match(content: str, candidates: Sequence[str]) -> str | None:
    for candidate in candidates:
        section = extract_section_with_subsections(content, candidate)
        if section:
            return section
    return None


def _missing_document(component: str) -> str:
    return (
        f"Component documentation for '{component}' not found in cache. Please ensure the component "
        "name is correct and the HeroUI repository has been cloned successfully."
    )


def component_tools(docs: ComponentDocs) -> list[ToolSpec]:
    return [
        ToolSpec(
            name="list_components",
            title="List Components",
            description="List all HeroUI components available in the documentation cache",
            handler=docs.list_components,
        ),
        ToolSpec(
            name="get_component_docs",
            title="Get Component Docs",
            description="Retrieve documentation for a specific HeroUI component from cached documentation",
            handler=docs.get_component_docs,
            input_model=ComponentNameArguments,
        ),
        ToolSpec(
            name="get_component_api",
            title="Get Component API",
            description=(
                "Extract API reference sections from HeroUI component documentation including props and events"
            ),
            handler=docs.get_component_api,
            input_model=ComponentNameArguments,
        ),
        ToolSpec(
            name="get_component_slots",
            title="Get Component Slots",
            description="Extract slots and custom styles sections from HeroUI component documentation",
            handler=docs.get_component_slots,
            input_model=ComponentNameArguments,
        ),
        ToolSpec(
            name="get_component_data_attributes",
            title="Get Component Data Attributes",
            description=(
                "Extract data attributes sections from HeroUI component documentation "
                "showing available data-* attributes"
            ),
            handler=docs.get_component_data_attributes,
            input_model=ComponentNameArguments,
        ),
        ToolSpec(
            name="get_component_usage",
            title="Get Component Usage",
            description="Extract usage examples from HeroUI component documentation",
            handler=docs.get_component_usage,
            input_model=ComponentNameArguments,
        ),
        ToolSpec(
            name="get_component_accessibility",
            title="Get Component Accessibility",
            description="Extract accessibility notes from HeroUI component documentation",
            handler=docs.get_component_accessibility,
            input_model=ComponentNameArguments,
        ),
    ]


__all__ = ["ComponentDocs", "DATA_ATTRIBUTE_VARIATIONS", "SECTION_SEPARATOR", "component_tools"]

# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Resource and resource-template descriptors."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
import re

from mcp import types


ResourceReader = Callable[[], Awaitable[str]]
TemplateReader = Callable[[dict[str, str]], Awaitable[str]]

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


@dataclass(frozen=True, slots=True)
class ResourceSpec:
    uri: str
    name: str
    reader: ResourceReader
    title: str | None = None
    description: str | None = None
    mime_type: str = "text/plain"

    def definition(self) -> types.Resource:
        return types.Resource(
            uri=self.uri,
            name=self.name,
            title=self.title,
            description=self.description,
            mimeType=self.mime_type,
        )


@dataclass(frozen=True, slots=True)
class ResourceTemplateSpec:
    """A parameterised resource such as ``heroui://components/{name}``.

    Placeholders match a single path segment.
    """

    uri_template: str
    name: str
    reader: TemplateReader
    title: str | None = None
    description: str | None = None
    mime_type: str = "text/markdown"
    _pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        parts: list[str] = []
        position = 0
        for match in _PLACEHOLDER.finditer(self.uri_template):
            parts.append(re.escape(self.uri_template[position : match.start()]))
            parts.append(f"(?P<{match.group(1)}>[^/]+)")
            position = match.end()
        parts.append(re.escape(self.uri_template[position:]))
        object.__setattr__(self, "_pattern", re.compile("^" + "".join(parts) + "$"))

    def match(self, uri: str) -> dict[str, str] | None:
        found = self._pattern.match(uri)
        return None if found is None else found.groupdict()

    def definition(self) -> types.ResourceTemplate:
        return types.ResourceTemplate(
            uriTemplate=self.uri_template,
            name=self.name,
            title=self.title,
            description=self.description,
            mimeType=self.mime_type,
        )


__all__ = ["ResourceReader", "ResourceSpec", "ResourceTemplateSpec", "TemplateReader"]

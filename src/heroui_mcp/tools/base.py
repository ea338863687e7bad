# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Tool descriptors.

A :class:`ToolSpec` pairs a pydantic input model with an async handler.  The
model is the single source of truth for both the advertised JSON schema and
argument validation.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from mcp import types
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError


COMPONENT_NAME_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_-]*$"


class NoArguments(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ComponentNameArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    component_name: str = Field(
        alias="componentName",
        min_length=1,
        pattern=COMPONENT_NAME_PATTERN,
        description="Name of the HeroUI component (e.g., 'button', 'input')",
    )


ToolHandler = Callable[[Any], Awaitable[str]]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """In-memory representation of a tool definition."""

    name: str
    title: str
    description: str
    handler: ToolHandler
    input_model: type[BaseModel] = NoArguments

    def input_schema(self) -> dict[str, Any]:
        schema = self.input_model.model_json_schema(by_alias=True)
        schema.pop("title", None)
        for prop in schema.get("properties", {}).values():
            prop.pop("title", None)
        schema.setdefault("type", "object")
        schema.setdefault("properties", {})
        return schema

    def definition(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            title=self.title,
            description=self.description,
            inputSchema=self.input_schema(),
        )

    def validate(self, arguments: Mapping[str, Any] | None) -> BaseModel:
        try:
            return self.input_model.model_validate(dict(arguments or {}))
        except PydanticValidationError as exc:
            problems = [f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}" for err in exc.errors()]
            raise ValidationError(
                f"Invalid arguments for tool {self.name!r}: {'; '.join(problems)}",
                data={"tool": self.name, "errors": problems},
            ) from None

    async def invoke(self, arguments: Mapping[str, Any] | None) -> str:
        return await self.handler(self.validate(arguments))


__all__ = ["COMPONENT_NAME_PATTERN", "ComponentNameArguments", "NoArguments", "ToolHandler", "ToolSpec"]

# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Inline ``<CodeDemo files={...} />`` examples as fenced code blocks.

``files={accordionContent.customStyles}`` resolves to
``<components_root>/accordion/custom-styles.raw.jsx``.
"""

from __future__ import annotations

from pathlib import Path
import re

import anyio

from ..utils import get_logger
from .mdx import clean_svg_tags


_CODE_DEMO = re.compile(r"<CodeDemo[^>]*/>")
_FILES_PROP = re.compile(r"files=\{([^}]+)\}")
_CONTENT_REF = re.compile(r"(\w+)Content\.(\w+)")
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")

_logger = get_logger("heroui_mcp.docs")


def to_kebab_case(value: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"\1-\2", value).lower()


def demo_path(tag: str) -> str | None:
    """Return ``component/example`` for a ``<CodeDemo>`` tag, or ``None``."""
    files = _FILES_PROP.search(tag)
    if files is None:
        return None
    ref = _CONTENT_REF.search(files.group(1).strip())
    if ref is None:
        return None
    return f"{ref.group(1)}/{ref.group(2)}"


async def read_demo_code(components_root: Path, relative: str) -> str | None:
    path = anyio.Path(components_root) / f"{to_kebab_case(relative)}.raw.jsx"
    try:
        return await path.read_text(encoding="utf-8")
    except OSError as exc:
        _logger.warning(
            "Failed to read component code",
            extra={"context": {"componentPath": relative, "path": str(path), "error": str(exc)}},
        )
        return None


def code_block(code: str) -> str:
    return f"```tsx\n{clean_svg_tags(code)}\n```"


async def replace_code_demos(content: str, components_root: Path) -> str:
    result = content
    for tag in dict.fromkeys(match.group(0) for match in _CODE_DEMO.finditer(content)):
        relative = demo_path(tag)
        if relative is None:
            replacement = "<!-- CodeDemo component - unable to extract file path -->"
        else:
            code = await read_demo_code(components_root, relative)
            if code is None:
                replacement = f"<!-- CodeDemo component code not found for path: {relative} -->"
            else:
                replacement = code_block(code)
                _logger.debug("Inlined code demo", extra={"context": {"path": relative, "length": len(code)}})
        result = result.replace(tag, replacement)
    return result


__all__ = ["code_block", "demo_path", "read_demo_code", "replace_code_demos", "to_kebab_case"]

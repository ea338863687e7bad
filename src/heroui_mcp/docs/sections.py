# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Markdown section parsing for component documentation.

A *section* starts at an ATX header (``#`` through ``######``) and runs until
the next header of the same or a higher level.  Lookups are case-insensitive
and, by default, accept partial matches in either direction, so ``"api"``
finds ``"API"`` and ``"Slots"`` finds ``"Slots"`` under a longer title.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import re

from ..utils import get_logger


_HEADER = re.compile(r"^(#{1,6})\s+(.+)$")

_logger = get_logger("heroui_mcp.docs")

SECTION_ALIASES: dict[str, tuple[str, ...]] = {
    "api": ("api reference", "props", "properties", "parameters"),
    "usage": ("example", "examples", "basic usage", "getting started"),
    "installation": ("install", "setup"),
    "import": ("imports", "importing"),
    "accessibility": ("a11y", "accessibility features"),
    "customization": ("custom styles", "styling", "theming"),
    "variants": ("variations", "types"),
    "props": ("properties", "api", "parameters"),
    "events": ("event handlers", "callbacks"),
}


@dataclass(frozen=True, slots=True)
class MdxSection:
    title: str
    level: int
    header_line: str
    content: str
    start_line: int
    end_line: int


def _header(line: str) -> tuple[int, str] | None:
    match = _HEADER.match(line)
    if match is None:
        return None
    return len(match.group(1)), match.group(2).strip()


def _section_end(lines: list[str], start: int, level: int) -> int:
    for index in range(start + 1, len(lines)):
        header = _header(lines[index])
        if header is not None and header[0] <= level:
            return index - 1
    return len(lines) - 1


def parse_all_sections(content: str) -> list[MdxSection]:
    lines = content.split("\n")
    sections: list[MdxSection] = []
    for index, line in enumerate(lines):
        header = _header(line)
        if header is None:
            continue
        level, title = header
        end = _section_end(lines, index, level)
        sections.append(
            MdxSection(
                title=title,
                level=level,
                header_line=line,
                content="\n".join(lines[index + 1 : end + 1]).strip(),
                start_line=index,
                end_line=end,
            )
        )
    return sections


def find_section(
    sections: Iterable[MdxSection],
    name: str,
    *,
    case_insensitive: bool = True,
    partial: bool = True,
    exact: bool = False,
) -> MdxSection | None:
    """Return the first section whose title matches *name*.

    With ``partial`` (the default) a title matches when either string contains
    the other; ``exact`` overrides ``partial``.
    """
    target = name.lower() if case_insensitive else name
    for section in sections:
        title = section.title.lower() if case_insensitive else section.title
        if exact or not partial:
            matches = title == target
        else:
            matches = target in title or title in target
        if matches:
            return section
    return None


def extract_sections(content: str, names: Iterable[str], **options: bool) -> list[MdxSection]:
    sections = parse_all_sections(content)
    found: list[MdxSection] = []
    for name in names:
        section = find_section(sections, name, **options)
        if section is None:
            _logger.debug("Section not found", extra={"context": {"section": name}})
            continue
        found.append(section)
    return found


def sections_by_level(content: str, level: int) -> list[MdxSection]:
    return [section for section in parse_all_sections(content) if section.level == level]


def common_section_variations(name: str) -> list[str]:
    """Return *name* plus its known aliases, and the canonical names it is an alias of."""
    normalized = name.strip().lower()
    variations = [normalized]
    for alias in SECTION_ALIASES.get(normalized, ()):
        if alias not in variations:
            variations.append(alias)
    for canonical, aliases in SECTION_ALIASES.items():
        if normalized in aliases and canonical not in variations:
            variations.append(canonical)
    return variations


def extract_section_with_subsections(
    content: str,
    name: str,
    *,
    include_subsections: bool = True,
    **options: bool,
) -> str | None:
    """Return the matched section including its header line, or ``None``."""
    section = find_section(parse_all_sections(content), name, **options)
    if section is None:
        return None
    lines = content.split("\n")
    # Without subsections the body stops at the next header of any level.
    level = section.level if include_subsections else 6
    end = _section_end(lines, section.start_line, level)
    return "\n".join(lines[section.start_line : end + 1]).strip()


def available_sections(content: str) -> list[str]:
    """Titles of the top-level (``#`` and ``##``) sections, in document order."""
    return [section.title for section in parse_all_sections(content) if section.level <= 2]


__all__ = [
    "MdxSection",
    "SECTION_ALIASES",
    "available_sections",
    "common_section_variations",
    "extract_section_with_subsections",
    "extract_sections",
    "find_section",
    "parse_all_sections",
    "sections_by_level",
]

# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Text processing for component documentation."""

from __future__ import annotations

from .codedemo import replace_code_demos
from .mdx import filter_mdx_content
from .sections import (
    MdxSection,
    available_sections,
    common_section_variations,
    extract_section_with_subsections,
    extract_sections,
    find_section,
    parse_all_sections,
    sections_by_level,
)


__all__ = [
    "MdxSection",
    "available_sections",
    "common_section_variations",
    "extract_section_with_subsections",
    "extract_sections",
    "filter_mdx_content",
    "find_section",
    "parse_all_sections",
    "replace_code_demos",
    "sections_by_level",
]

# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Filters that strip site-only MDX noise from component documentation.

The docs site renders helpers such as ``<PackageManagers>`` or ``<CarbonAd/>``
that carry no information for an agent reading the raw text; these filters
remove them and trim the whitespace they leave behind.
"""

from __future__ import annotations

import re


_PACKAGE_MANAGERS = re.compile(r"<PackageManagers[\s\S]*?/>")
_CARBON_AD = re.compile(r"<CarbonAd\s*/>")
_COMPONENT_LINKS = re.compile(r"<ComponentLinks[\s\S]*?/>")
_SPACER = re.compile(r"^\s*<Spacer\s*/>\s*$", re.MULTILINE)
_SVG = re.compile(r"<svg([^>]*)>[\s\S]*?</svg>")
_BLANK_RUNS = re.compile(r"\n\s*\n\s*\n+")
_CONTENT_IMPORT = re.compile(r"""^import\s*\{[^}]*\}\s*from\s*["']@/content/[^"']*["']\s*;\s*\n?""", re.MULTILINE)
_INSTALLATION_HEADER = re.compile(r"^\s*##\s*Installation\s*\n", re.MULTILINE)


def remove_package_managers(content: str) -> str:
    return _PACKAGE_MANAGERS.sub("", content)


def remove_carbon_ads(content: str) -> str:
    return _CARBON_AD.sub("", content)


def remove_component_links(content: str) -> str:
    return _COMPONENT_LINKS.sub("", content)


def remove_spacers(content: str) -> str:
    return _SPACER.sub("", content)


def clean_svg_tags(content: str) -> str:
    """Keep ``<svg>`` attributes but drop the path data inside."""
    return _SVG.sub(r"<svg\1></svg>", content)


def collapse_blank_lines(content: str) -> str:
    return _BLANK_RUNS.sub("\n\n", content)


def remove_content_import(content: str) -> str:
    """Drop the first ``import {...} from "@/content/..."`` line."""
    return _CONTENT_IMPORT.sub("", content, count=1)


def remove_installation_header(content: str) -> str:
    return _INSTALLATION_HEADER.sub("", content, count=1)


def filter_mdx_content(content: str) -> str:
    filtered = remove_content_import(content)
    filtered = remove_installation_header(filtered)
    filtered = remove_package_managers(filtered)
    filtered = remove_carbon_ads(filtered)
    filtered = remove_component_links(filtered)
    filtered = remove_spacers(filtered)
    filtered = clean_svg_tags(filtered)
    filtered = collapse_blank_lines(filtered)
    return filtered.strip()


__all__ = [
    "clean_svg_tags",
    "collapse_blank_lines",
    "filter_mdx_content",
    "remove_carbon_ads",
    "remove_component_links",
    "remove_content_import",
    "remove_installation_header",
    "remove_package_managers",
    "remove_spacers",
]

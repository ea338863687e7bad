# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Server, session and documentation-mirror configuration.

Configuration is plain dataclasses with conservative defaults.  Deployments
override individual values through ``HEROUI_MCP_*`` environment variables (see
:meth:`ServerConfig.from_env`) or command line flags.

Documentation sources are selected through *presets*: named partial
:class:`CacheConfig` overrides.  The ``heroui`` preset is built in; other
component libraries that share the same docs layout can be registered with
:func:`register_preset`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
import os
from pathlib import Path
from typing import Any

from .errors import ConfigError


ENV_PREFIX = "HEROUI_MCP_"

DOCS_SUBPATH = "apps/docs/content/docs"
COMPONENTS_SUBPATH = "apps/docs/content/components"


@dataclass(slots=True)
class CacheConfig:
    """Where and how the documentation mirror is fetched."""

    cache_dir: Path = field(default_factory=lambda: Path.cwd() / ".cache")
    repo_url: str = "https://github.com/heroui-inc/heroui.git"
    repo_branch: str = "canary"
    cache_dir_name: str = "heroui"
    sparse_checkout_paths: tuple[str, ...] = (DOCS_SUBPATH, COMPONENTS_SUBPATH)
    git_timeout: float = 300.0
    git_max_retries: int = 3
    git_retry_interval: float = 2.0
    validate_git_on_startup: bool = True

    @property
    def mirror_path(self) -> Path:
        return Path(self.cache_dir) / self.cache_dir_name

    @property
    def docs_path(self) -> Path:
        return self.mirror_path / DOCS_SUBPATH

    @property
    def component_docs_path(self) -> Path:
        """Directory holding one ``<component>.mdx`` file per component."""
        return self.docs_path / "components"

    @property
    def code_demos_path(self) -> Path:
        """Directory holding the ``*.raw.jsx`` sources referenced by ``<CodeDemo>``."""
        return self.mirror_path / COMPONENTS_SUBPATH


@dataclass(slots=True)
class SessionConfig:
    """Session lifetime settings."""

    session_timeout: float = 30 * 60.0
    cleanup_interval: float = 5 * 60.0
    json_response: bool = False


@dataclass(slots=True)
class ServerConfig:
    """Top-level configuration for :class:`heroui_mcp.app.DocsApplication`."""

    name: str = "heroui-mcp"
    version: str = "0.1.0"
    instructions: str | None = (
        "Use list_components to discover HeroUI components, then the get_component_* "
        "tools to read their documentation, API, slots and data attributes."
    )
    host: str = "127.0.0.1"
    port: int = 3000
    path: str = "/mcp"
    log_level: str = "info"
    enable_dns_rebinding_protection: bool = False
    allowed_hosts: list[str] = field(default_factory=lambda: ["127.0.0.1:*", "localhost:*"])
    allowed_origins: list[str] = field(default_factory=list)
    cors_allow_origins: list[str] = field(default_factory=lambda: ["*"])
    cache: CacheConfig = field(default_factory=CacheConfig)
    session: SessionConfig = field(default_factory=SessionConfig)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ServerConfig:
        """Build a configuration from ``HEROUI_MCP_*`` environment variables."""
        env = os.environ if environ is None else environ
        config = cls()

        def lookup(key: str) -> str | None:
            value = env.get(ENV_PREFIX + key)
            if value is None or not value.strip():
                return None
            return value.strip()

        if (preset := lookup("PRESET")) is not None:
            config.cache = resolve_preset(preset, base=config.cache)

        config.host = lookup("HOST") or config.host
        config.port = _parse_int("PORT", lookup("PORT"), config.port)
        config.path = lookup("PATH") or config.path
        config.log_level = (lookup("LOG_LEVEL") or config.log_level).lower()
        config.enable_dns_rebinding_protection = _parse_bool(
            "DNS_REBINDING_PROTECTION", lookup("DNS_REBINDING_PROTECTION"), config.enable_dns_rebinding_protection
        )
        config.allowed_hosts = _parse_list(lookup("ALLOWED_HOSTS"), config.allowed_hosts)
        config.allowed_origins = _parse_list(lookup("ALLOWED_ORIGINS"), config.allowed_origins)
        config.cors_allow_origins = _parse_list(lookup("CORS_ORIGINS"), config.cors_allow_origins)

        cache = config.cache
        if (cache_dir := lookup("CACHE_DIR")) is not None:
            cache.cache_dir = Path(cache_dir).expanduser()
        cache.repo_url = lookup("REPO_URL") or cache.repo_url
        cache.repo_branch = lookup("REPO_BRANCH") or cache.repo_branch
        cache.git_timeout = _parse_float("GIT_TIMEOUT", lookup("GIT_TIMEOUT"), cache.git_timeout)
        cache.git_max_retries = _parse_int("GIT_MAX_RETRIES", lookup("GIT_MAX_RETRIES"), cache.git_max_retries)
        cache.validate_git_on_startup = _parse_bool(
            "VALIDATE_GIT", lookup("VALIDATE_GIT"), cache.validate_git_on_startup
        )

        session = config.session
        session.session_timeout = _parse_float("SESSION_TIMEOUT", lookup("SESSION_TIMEOUT"), session.session_timeout)
        session.cleanup_interval = _parse_float(
            "CLEANUP_INTERVAL", lookup("CLEANUP_INTERVAL"), session.cleanup_interval
        )
        session.json_response = _parse_bool("JSON_RESPONSE", lookup("JSON_RESPONSE"), session.json_response)

        config.validate()
        return config

    def validate(self) -> None:
        if not 0 < self.port < 65536:
            raise ConfigError(f"port must be between 1 and 65535 (got {self.port})")
        if not self.path.startswith("/"):
            raise ConfigError(f"path must start with '/' (got {self.path!r})")
        if self.session.session_timeout <= 0:
            raise ConfigError("session_timeout must be positive")
        if self.session.cleanup_interval <= 0:
            raise ConfigError("cleanup_interval must be positive")
        if self.cache.git_max_retries < 1:
            raise ConfigError("git_max_retries must be at least 1")


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------


_PRESETS: dict[str, dict[str, Any]] = {
    "heroui": {
        "repo_url": "https://github.com/heroui-inc/heroui.git",
        "repo_branch": "canary",
        "cache_dir_name": "heroui",
        "sparse_checkout_paths": (DOCS_SUBPATH, COMPONENTS_SUBPATH),
    },
}


def register_preset(name: str, overrides: Mapping[str, Any]) -> None:
    """Register (or replace) a named set of :class:`CacheConfig` overrides."""
    unknown = set(overrides) - set(CacheConfig.__dataclass_fields__)
    if unknown:
        raise ConfigError(f"Unknown cache settings in preset {name!r}: {', '.join(sorted(unknown))}")
    _PRESETS[name.lower()] = dict(overrides)


def preset_names() -> list[str]:
    return sorted(_PRESETS)


def resolve_preset(name: str, *, base: CacheConfig | None = None) -> CacheConfig:
    """Return *base* (or the defaults) with the named preset applied."""
    try:
        overrides = _PRESETS[name.lower()]
    except KeyError:
        raise ConfigError(f"Unknown documentation preset {name!r}; choose from {', '.join(preset_names())}") from None
    return replace(base or CacheConfig(), **overrides)


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _parse_int(key: str, raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{key} must be an integer (got {raw!r})") from None


def _parse_float(key: str, raw: str | None, default: float) -> float:
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{key} must be a number (got {raw!r})") from None


def _parse_bool(key: str, raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    lowered = raw.lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise ConfigError(f"{ENV_PREFIX}{key} must be a boolean (got {raw!r})")


def _parse_list(raw: str | None, default: list[str]) -> list[str]:
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


__all__ = [
    "CacheConfig",
    "ServerConfig",
    "SessionConfig",
    "preset_names",
    "register_preset",
    "resolve_preset",
]

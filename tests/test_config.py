# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

from __future__ import annotations

from pathlib import Path

import pytest

from heroui_mcp.config import (
    CacheConfig,
    ServerConfig,
    preset_names,
    register_preset,
    resolve_preset,
)
from heroui_mcp.errors import ConfigError


def test_defaults():
    config = ServerConfig()

    assert config.port == 3000
    assert config.path == "/mcp"
    assert config.session.session_timeout == 1800
    assert config.session.cleanup_interval == 300
    assert config.enable_dns_rebinding_protection is False
    assert config.cache.repo_branch == "canary"


def test_mirror_paths_follow_cache_dir(tmp_path):
    cache = CacheConfig(cache_dir=tmp_path)

    assert cache.mirror_path == tmp_path / "heroui"
    assert cache.component_docs_path == tmp_path / "heroui/apps/docs/content/docs/components"
    assert cache.code_demos_path == tmp_path / "heroui/apps/docs/content/components"


def test_from_env_applies_overrides(tmp_path):
    config = ServerConfig.from_env(
        {
            "HEROUI_MCP_HOST": "0.0.0.0",
            "HEROUI_MCP_PORT": "8080",
            "HEROUI_MCP_PATH": "/rpc",
            "HEROUI_MCP_LOG_LEVEL": "DEBUG",
            "HEROUI_MCP_CACHE_DIR": str(tmp_path),
            "HEROUI_MCP_SESSION_TIMEOUT": "60",
            "HEROUI_MCP_JSON_RESPONSE": "true",
            "HEROUI_MCP_ALLOWED_HOSTS": "a.example, b.example ,",
            "HEROUI_MCP_GIT_MAX_RETRIES": "5",
        }
    )

    assert config.host == "0.0.0.0"
    assert config.port == 8080
    assert config.path == "/rpc"
    assert config.log_level == "debug"
    assert config.cache.cache_dir == Path(tmp_path)
    assert config.session.session_timeout == 60
    assert config.session.json_response is True
    assert config.allowed_hosts == ["a.example", "b.example"]
    assert config.cache.git_max_retries == 5


def test_from_env_ignores_blank_values():
    config = ServerConfig.from_env({"HEROUI_MCP_PORT": "  ", "HEROUI_MCP_HOST": ""})
    assert config.port == 3000
    assert config.host == "127.0.0.1"


@pytest.mark.parametrize(
    ("environ", "message"),
    [
        ({"HEROUI_MCP_PORT": "eighty"}, "must be an integer"),
        ({"HEROUI_MCP_PORT": "70000"}, "port must be between"),
        ({"HEROUI_MCP_SESSION_TIMEOUT": "soon"}, "must be a number"),
        ({"HEROUI_MCP_SESSION_TIMEOUT": "0"}, "session_timeout must be positive"),
        ({"HEROUI_MCP_JSON_RESPONSE": "maybe"}, "must be a boolean"),
        ({"HEROUI_MCP_PATH": "mcp"}, "path must start with"),
        ({"HEROUI_MCP_PRESET": "unknown"}, "Unknown documentation preset"),
    ],
)
def test_from_env_rejects_invalid_values(environ, message):
    with pytest.raises(ConfigError, match=message):
        ServerConfig.from_env(environ)


def test_builtin_preset_resolves():
    assert "heroui" in preset_names()
    cache = resolve_preset("HeroUI", base=CacheConfig(cache_dir=Path("/tmp/x")))
    assert cache.repo_url == "https://github.com/heroui-inc/heroui.git"
    assert cache.cache_dir == Path("/tmp/x")


def test_register_preset(monkeypatch):
    from heroui_mcp import config as config_module

    monkeypatch.setattr(config_module, "_PRESETS", dict(config_module._PRESETS))
    register_preset("nextui", {"repo_url": "https://example.com/nextui.git", "cache_dir_name": "nextui"})

    assert preset_names() == ["heroui", "nextui"]
    cache = resolve_preset("nextui")
    assert cache.cache_dir_name == "nextui"
    assert cache.repo_branch == "canary"


def test_register_preset_rejects_unknown_fields():
    with pytest.raises(ConfigError, match="Unknown cache settings"):
        register_preset("broken", {"colour": "red"})

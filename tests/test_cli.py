# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

from __future__ import annotations

from pathlib import Path
import signal
import socket
import threading

import pytest

from heroui_mcp.__main__ import build_parser, load_config, main
from heroui_mcp.app import DocsApplication


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("HEROUI_MCP_PORT", "HEROUI_MCP_HOST", "HEROUI_MCP_PATH", "HEROUI_MCP_PRESET", "HEROUI_MCP_CACHE_DIR"):
        monkeypatch.delenv(key, raising=False)


def test_command_line_overrides_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("HEROUI_MCP_PORT", "4000")
    args = build_parser().parse_args(
        ["--port", "5000", "--host", "0.0.0.0", "--cache-dir", str(tmp_path), "--log-level", "WARNING"]
    )

    config = load_config(args)

    assert config.port == 5000
    assert config.host == "0.0.0.0"
    assert config.cache.cache_dir == Path(tmp_path)
    assert config.log_level == "warning"


def test_environment_used_when_flag_absent(monkeypatch):
    monkeypatch.setenv("HEROUI_MCP_PORT", "4000")
    config = load_config(build_parser().parse_args([]))
    assert config.port == 4000


def test_flags_default_off():
    args = build_parser().parse_args([])
    assert args.skip_cache is False
    assert args.json_logs is False
    assert args.preset is None


def test_unknown_preset_is_rejected_by_parser():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--preset", "bootstrap"])


def test_invalid_config_exits_with_usage_code(capsys):
    assert main(["--port", "0"]) == 2
    assert "port must be between" in capsys.readouterr().err


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_sigterm_shuts_down_with_exit_code_zero(monkeypatch, tmp_path, restore_root_logging):
    if threading.current_thread() is not threading.main_thread():
        pytest.skip("uvicorn installs signal handlers only on the main thread")
    original_start = DocsApplication.start

    async def start_then_terminate(self):
        await original_start(self)
        signal.raise_signal(signal.SIGTERM)

    monkeypatch.setattr(DocsApplication, "start", start_then_terminate)

    exit_code = main(
        ["--port", str(_free_port()), "--cache-dir", str(tmp_path), "--skip-cache", "--log-level", "warning"]
    )

    assert exit_code == 0

# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Command line entry point: ``python -m heroui_mcp`` / ``heroui-mcp``."""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence
from pathlib import Path
import sys

from .app import DocsApplication
from .config import ServerConfig, preset_names, resolve_preset
from .errors import ConfigError
from .utils import get_logger, setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="heroui-mcp",
        description="Serve HeroUI component documentation over MCP streamable HTTP",
    )
    parser.add_argument("--host", help="Interface to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, help="Port to bind (default: 3000)")
    parser.add_argument("--path", help="MCP endpoint path (default: /mcp)")
    parser.add_argument("--cache-dir", type=Path, help="Directory holding the documentation mirror")
    parser.add_argument("--preset", choices=preset_names(), help="Documentation source preset")
    parser.add_argument(
        "--skip-cache",
        action="store_true",
        help="Start without cloning or updating the documentation mirror",
    )
    parser.add_argument("--log-level", help="Log level (debug, info, warning, error)")
    parser.add_argument("--json-logs", action="store_true", help="Emit structured JSON log lines")
    return parser


def load_config(args: argparse.Namespace) -> ServerConfig:
    """Environment first, then command line overrides."""
    config = ServerConfig.from_env()
    if args.preset:
        config.cache = resolve_preset(args.preset, base=config.cache)
    if args.host:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.path:
        config.path = args.path
    if args.cache_dir is not None:
        config.cache.cache_dir = args.cache_dir.expanduser()
    if args.log_level:
        config.log_level = args.log_level.lower()
    config.validate()
    return config


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args)
    except ConfigError as exc:
        print(f"heroui-mcp: {exc}", file=sys.stderr)
        return 2

    setup_logger(level=config.log_level, use_json=True if args.json_logs else None, force=True)
    logger = get_logger("heroui_mcp")
    logger.info(
        "Starting %s v%s",
        config.name,
        config.version,
        extra={"context": {"host": config.host, "port": config.port, "path": config.path}},
    )

    application = DocsApplication(config, skip_cache=args.skip_cache)
    try:
        asyncio.run(application.serve())
    except RuntimeError as exc:
        logger.error("Server failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

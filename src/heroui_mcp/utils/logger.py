# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Logging setup for the documentation server.

Everything goes through the standard library ``logging`` tree rooted at the
``heroui_mcp`` logger.  Plain colored output is the default; set
``HEROUI_MCP_LOG_JSON=1`` to emit one JSON object per record, which is what
container log collectors expect.  Structured fields are passed with
``extra={"context": {...}}`` and appear under the ``context`` key of the JSON
payload.
"""

from __future__ import annotations

from collections.abc import Callable
import json
import logging
import os
from typing import Any, ClassVar, Final


RESET: Final[str] = "\033[0m"
DEBUG_COLOR: Final[str] = "\033[36m"
INFO_COLOR: Final[str] = "\033[32m"
WARNING_COLOR: Final[str] = "\033[33m"
ERROR_COLOR: Final[str] = "\033[1;31m"
CRITICAL_COLOR: Final[str] = "\033[1;35m"
LOGGER_COLOR: Final[str] = "\033[94m"

DEFAULT_LOGGER_NAME: Final[str] = "heroui_mcp"
ENV_LOG_LEVEL: Final[str] = "HEROUI_MCP_LOG_LEVEL"
ENV_LOG_JSON: Final[str] = "HEROUI_MCP_LOG_JSON"
ENV_NO_COLOR: Final[str] = "NO_COLOR"
DEFAULT_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT: Final[str] = "%Y-%m-%d %H:%M:%S"

JsonSerializer = Callable[[dict[str, Any]], str]

_BUILTIN_RECORD_KEYS: frozenset[str] = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "process",
        "processName",
        "taskName",
        "context",
        "message",
        "asctime",
    }
)


class ColoredFormatter(logging.Formatter):
    """Plain-text formatter that colors the level and logger name."""

    LEVEL_COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": DEBUG_COLOR,
        "INFO": INFO_COLOR,
        "WARNING": WARNING_COLOR,
        "ERROR": ERROR_COLOR,
        "CRITICAL": CRITICAL_COLOR,
    }

    def format(self, record: logging.LogRecord) -> str:
        levelname, name = record.levelname, record.name
        record.levelname = f"{self.LEVEL_COLORS.get(levelname, '')}{levelname}{RESET}"
        record.name = f"{LOGGER_COLOR}{name}{RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname, record.name = levelname, name


class ServerLogHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Stream handler installed by :func:`setup_logger`.

    The dedicated subclass lets :func:`setup_logger` find and replace its own
    handler without touching handlers installed by the host (uvicorn, pytest).
    """


class StructuredJSONFormatter(logging.Formatter):
    """Serialize log records, including ``context`` extras, as JSON."""

    def __init__(self, serializer: JsonSerializer | None = None, *, datefmt: str | None = None) -> None:
        super().__init__(datefmt=datefmt)
        self._serializer = serializer or _default_json_serializer

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        extra: dict[str, Any] = {}
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            extra.update(context)
        for key, value in record.__dict__.items():
            if key in _BUILTIN_RECORD_KEYS or key.startswith("_") or key in extra:
                continue
            extra[key] = value
        if extra:
            payload["context"] = extra

        return self._serializer(payload)


def _default_json_serializer(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, default=str)


def _has_server_handler(root: logging.Logger) -> bool:
    return any(isinstance(handler, ServerLogHandler) for handler in root.handlers)


def read_bool_env(key: str) -> bool:
    value = os.getenv(key)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv(ENV_LOG_LEVEL) or logging.INFO
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    *,
    level: int | str | None = None,
    use_json: bool | None = None,
    use_color: bool | None = None,
    json_serializer: JsonSerializer | None = None,
    fmt: str | None = None,
    datefmt: str | None = DEFAULT_DATEFMT,
    force: bool = False,
) -> None:
    """Configure the root logger for the server process.

    Args:
        level: Log level; falls back to ``HEROUI_MCP_LOG_LEVEL`` then ``INFO``.
        use_json: Emit JSON lines; defaults to ``HEROUI_MCP_LOG_JSON``.
        use_color: Colorize plain output; disabled by ``NO_COLOR`` or JSON mode.
        json_serializer: Replacement for :func:`json.dumps` in JSON mode.
        fmt: Format string for plain-text output.
        datefmt: Timestamp format.
        force: Replace a handler installed by an earlier call.
    """
    root = logging.getLogger()
    if _has_server_handler(root) and not force:
        return

    for handler in list(root.handlers):
        if isinstance(handler, ServerLogHandler):
            root.removeHandler(handler)
            handler.close()

    resolved_level = _resolve_level(level)
    root.setLevel(resolved_level)

    resolved_json = use_json if use_json is not None else read_bool_env(ENV_LOG_JSON)
    if use_color is not None:
        resolved_color = use_color
    else:
        resolved_color = not resolved_json and not os.getenv(ENV_NO_COLOR)

    formatter: logging.Formatter
    if resolved_json:
        formatter = StructuredJSONFormatter(json_serializer, datefmt=datefmt)
    elif resolved_color:
        formatter = ColoredFormatter(fmt or DEFAULT_FORMAT, datefmt=datefmt)
    else:
        formatter = logging.Formatter(fmt or DEFAULT_FORMAT, datefmt=datefmt)

    handler = ServerLogHandler()
    handler.setLevel(resolved_level)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``heroui_mcp`` tree, configuring logging on first use."""
    if not _has_server_handler(logging.getLogger()):
        setup_logger()
    return logging.getLogger(name or DEFAULT_LOGGER_NAME)


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "ColoredFormatter",
    "ServerLogHandler",
    "StructuredJSONFormatter",
    "get_logger",
    "read_bool_env",
    "setup_logger",
]

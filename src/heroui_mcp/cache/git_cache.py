# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Local mirror of the component library's documentation repository.

The mirror is a shallow, blob-filtered clone with a cone-mode sparse checkout
of the docs directories only.  :meth:`GitCache.ensure_ready` is idempotent:
it clones when no valid mirror exists and fast-forwards (fetch + hard reset)
otherwise.  Every git invocation runs with a timeout and is retried a bounded
number of times, so startup never blocks indefinitely.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
import re
import shutil
import subprocess

import anyio
import anyio.to_thread

from ..config import CacheConfig
from ..utils import get_logger


_VALIDATE_TIMEOUT = 10.0
_STATUS_TIMEOUT = 30.0

_IGNORABLE_STDERR = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"warning:",
        r"note:",
        r"hint:",
        r"remote: Enumerating objects",
        r"remote: Counting objects",
        r"remote: Compressing objects",
        r"remote: Total",
        r"Receiving objects",
        r"Resolving deltas",
        r"Cloning into",
    )
)


class GitCacheError(RuntimeError):
    """A git operation failed after exhausting its retries."""

    def __init__(
        self,
        message: str,
        operation: str,
        *,
        exit_code: int | None = None,
        stderr: str | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.exit_code = exit_code
        self.stderr = stderr


@dataclass(slots=True)
class GitCacheStatus:
    exists: bool = False
    is_git_repository: bool = False
    is_valid: bool = False
    last_checked: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    error: str | None = None

    def to_json(self) -> dict[str, object]:
        """Health-report shape; ``initialized`` means the mirror directory exists."""
        payload: dict[str, object] = {
            "initialized": self.exists,
            "valid": self.is_valid,
            "lastChecked": self.last_checked.isoformat(),
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass(slots=True)
class GitCacheOperationResult:
    success: bool
    message: str
    error: BaseException | None = None


class GitCache:
    """Clone, refresh and inspect the documentation mirror."""

    def __init__(self, config: CacheConfig) -> None:
        self._config = config
        self._logger = get_logger("heroui_mcp.cache")

    @property
    def config(self) -> CacheConfig:
        return self._config

    async def validate_git_availability(self) -> str:
        try:
            with anyio.fail_after(_VALIDATE_TIMEOUT):
                result = await anyio.run_process(["git", "--version"])
        except (OSError, subprocess.CalledProcessError, TimeoutError) as exc:
            message = "Git is not available in the system PATH"
            self._logger.error(message, exc_info=exc)
            raise GitCacheError(message, "validate_git", stderr=str(exc)) from exc

        version = result.stdout.decode(errors="replace").strip()
        self._logger.info("Git validation successful: %s", version)
        return version

    async def check_status(self) -> GitCacheStatus:
        """Report whether the mirror exists and is a healthy git checkout.  Never raises."""
        mirror = anyio.Path(self._config.mirror_path)
        status = GitCacheStatus()

        try:
            status.exists = await mirror.is_dir()
        except OSError as exc:
            status.error = f"Cache check failed: {exc}"
            return status

        if not status.exists:
            self._logger.debug("Cache directory does not exist", extra={"context": {"path": str(mirror)}})
            status.error = "Cache directory does not exist"
            return status

        status.is_git_repository = await (mirror / ".git").is_dir()
        if not status.is_git_repository:
            status.error = "Cache directory is not a git repository"
            return status

        try:
            with anyio.fail_after(_STATUS_TIMEOUT):
                await anyio.run_process(["git", "status", "--porcelain"], cwd=str(mirror))
        except (OSError, subprocess.CalledProcessError, TimeoutError) as exc:
            self._logger.warning(
                "Cache directory exists but is not a valid git repository",
                extra={"context": {"path": str(mirror), "error": str(exc)}},
            )
            status.error = f"Invalid git repository: {exc}"
            return status

        status.is_valid = True
        return status

    async def clone_repository(self) -> GitCacheOperationResult:
        mirror = self._config.mirror_path
        parent = mirror.parent
        try:
            await anyio.Path(parent).mkdir(parents=True, exist_ok=True)

            status = await self.check_status()
            if status.exists and not status.is_valid:
                self._logger.warning("Removing invalid cache directory", extra={"context": {"path": str(mirror)}})
                await anyio.to_thread.run_sync(shutil.rmtree, mirror)

            self._logger.info(
                "Cloning documentation repository",
                extra={
                    "context": {
                        "url": self._config.repo_url,
                        "branch": self._config.repo_branch,
                        "target": str(mirror),
                    }
                },
            )
            await self._git(
                [
                    "clone",
                    "--no-checkout",
                    "--filter=blob:none",
                    "--depth",
                    "1",
                    "--branch",
                    self._config.repo_branch,
                    self._config.repo_url,
                    str(mirror),
                ],
                cwd=str(parent),
            )
            await self._git(["sparse-checkout", "init", "--cone"], cwd=str(mirror))
            await self._git(["sparse-checkout", "set", *self._config.sparse_checkout_paths], cwd=str(mirror))
            await self._git(["checkout"], cwd=str(mirror))
        except (GitCacheError, OSError) as exc:
            return self._failure("Failed to clone repository", exc)

        self._logger.info("Documentation repository cloned", extra={"context": {"path": str(mirror)}})
        return GitCacheOperationResult(success=True, message="Repository cloned successfully")

    async def update_repository(self) -> GitCacheOperationResult:
        status = await self.check_status()
        if not status.is_valid:
            self._logger.info("Cache is invalid, performing fresh clone instead of update")
            return await self.clone_repository()

        mirror = str(self._config.mirror_path)
        branch = self._config.repo_branch
        try:
            await self._git(["fetch", "--depth", "1", "origin", branch], cwd=mirror)
            await self._git(["reset", "--hard", f"origin/{branch}"], cwd=mirror)
            await self._git(["sparse-checkout", "set", *self._config.sparse_checkout_paths], cwd=mirror)
        except GitCacheError as exc:
            return self._failure("Failed to update repository", exc)

        self._logger.info("Documentation repository updated", extra={"context": {"path": mirror}})
        return GitCacheOperationResult(success=True, message="Repository updated successfully")

    async def ensure_ready(self) -> GitCacheOperationResult:
        """Clone or refresh the mirror.  Failures are returned, not raised."""
        try:
            if self._config.validate_git_on_startup:
                await self.validate_git_availability()
        except GitCacheError as exc:
            return self._failure("Cache initialization failed", exc)

        status = await self.check_status()
        if status.is_valid:
            self._logger.info("Valid cache found, checking for updates")
            return await self.update_repository()
        self._logger.info("No valid cache found, cloning repository")
        return await self.clone_repository()

    async def clear_cache(self) -> GitCacheOperationResult:
        mirror = self._config.mirror_path
        try:
            await anyio.to_thread.run_sync(shutil.rmtree, mirror)
        except FileNotFoundError:
            pass
        except OSError as exc:
            return self._failure("Failed to clear cache", exc)
        self._logger.info("Cache cleared", extra={"context": {"path": str(mirror)}})
        return GitCacheOperationResult(success=True, message="Cache cleared successfully")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _git(self, args: Sequence[str], *, cwd: str) -> None:
        command = ["git", *args]
        operation = " ".join(args)
        attempts = self._config.git_max_retries

        for attempt in range(1, attempts + 1):
            self._logger.debug("Executing git command", extra={"context": {"args": list(args), "attempt": attempt}})
            try:
                with anyio.fail_after(self._config.git_timeout):
                    result = await anyio.run_process(command, cwd=cwd)
            except (OSError, subprocess.CalledProcessError, TimeoutError) as exc:
                stderr = _stderr_of(exc)
                exit_code = exc.returncode if isinstance(exc, subprocess.CalledProcessError) else None
                self._logger.warning(
                    "Git command failed",
                    extra={
                        "context": {
                            "args": list(args),
                            "attempt": attempt,
                            "max_retries": attempts,
                            "exit_code": exit_code,
                            "stderr": stderr,
                        }
                    },
                )
                if attempt >= attempts:
                    raise GitCacheError(
                        f"Git command failed after {attempt} attempts: {operation}",
                        operation,
                        exit_code=exit_code,
                        stderr=stderr,
                    ) from exc
                await anyio.sleep(self._config.git_retry_interval)
                continue

            stderr = result.stderr.decode(errors="replace").strip()
            if stderr and not is_ignorable_stderr(stderr):
                self._logger.warning("Git command produced stderr", extra={"context": {"args": list(args), "stderr": stderr}})
            return

    def _failure(self, prefix: str, exc: BaseException) -> GitCacheOperationResult:
        message = f"{prefix}: {exc}"
        self._logger.error(message, extra={"context": {"path": str(self._config.mirror_path)}})
        return GitCacheOperationResult(success=False, message=message, error=exc)


def is_ignorable_stderr(stderr: str) -> bool:
    return any(pattern.search(stderr) for pattern in _IGNORABLE_STDERR)


def _stderr_of(exc: BaseException) -> str | None:
    stderr = getattr(exc, "stderr", None)
    if isinstance(stderr, bytes):
        return stderr.decode(errors="replace").strip()
    if isinstance(stderr, str):
        return stderr.strip()
    return str(exc) or None


__all__ = [
    "GitCache",
    "GitCacheError",
    "GitCacheOperationResult",
    "GitCacheStatus",
    "is_ignorable_stderr",
]

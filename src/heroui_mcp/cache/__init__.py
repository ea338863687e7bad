# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Documentation mirror management."""

from __future__ import annotations

from .git_cache import GitCache, GitCacheError, GitCacheOperationResult, GitCacheStatus


__all__ = ["GitCache", "GitCacheError", "GitCacheOperationResult", "GitCacheStatus"]

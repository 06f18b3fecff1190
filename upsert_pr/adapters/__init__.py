"""Git platform adapters."""

from upsert_pr.adapters.base import GitPlatformAdapter, GitPlatformError
from upsert_pr.adapters.github import GitHubAdapter

__all__ = ["GitPlatformAdapter", "GitPlatformError", "GitHubAdapter"]

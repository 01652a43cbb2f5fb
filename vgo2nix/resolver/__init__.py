# File: vgo2nix/resolver/__init__.py
"""vgo2nix.resolver: Определение репозитория, вычисление sha256 и пул параллельных загрузок."""

from .coordinator import ContentFetcher, FetchCoordinator, RepoRootLookup
from .prefetch import Prefetcher
from .repo_root import RepoRootResolver

__all__ = ["ContentFetcher", "FetchCoordinator", "Prefetcher", "RepoRootLookup", "RepoRootResolver"]

# vgo2nix/resolver/coordinator.py
"""
Fetch coordinator: a fixed pool of asyncio workers turning resolved modules into fetch outcomes.

All modules are queued upfront. Each worker takes one module at a time and
pushes exactly one outcome; a worker exits once the work queue is empty. If
the consumer stops early, modules that were not started are dropped and the
in-flight ones are awaited, so no module is ever fetched twice or abandoned
mid-fetch.
"""
from __future__ import annotations

import asyncio
from typing import AsyncIterator, List, Optional, Protocol, Sequence

from vgo2nix.cache import FetchCache
from vgo2nix.errors import FetchError, Vgo2NixError
from vgo2nix.logger import logger
from vgo2nix.models import FetchDescriptor, FetchOutcome, ResolvedModule

__all__ = ["RepoRootLookup", "ContentFetcher", "FetchCoordinator"]


class RepoRootLookup(Protocol):
    async def repo_root(self, import_path: str) -> str: ...


class ContentFetcher(Protocol):
    async def prefetch(self, url: str, rev: str) -> str: ...


class FetchCoordinator:
    """Resolves modules with bounded concurrency, reusing cached descriptors when valid."""

    def __init__(
        self,
        resolver: RepoRootLookup,
        prefetcher: ContentFetcher,
        cache: Optional[FetchCache] = None,
        jobs: int = 20,
    ) -> None:
        if jobs < 1:
            raise ValueError("jobs must be >= 1")
        self.resolver = resolver
        self.prefetcher = prefetcher
        self.cache = cache if cache is not None else FetchCache()
        self.jobs = jobs

    async def resolve_one(self, module: ResolvedModule) -> FetchOutcome:
        """Pending → CacheHit | Fetching → Resolved | Failed, for a single module."""
        cached = self.cache.lookup(module)
        if cached is not None:
            logger.debug("Reusing cached hash for %s@%s", module.import_path, module.rev)
            return FetchOutcome.success(cached)

        try:
            url = await self.resolver.repo_root(module.import_path)
            logger.info("Fetching %s@%s", module.import_path, module.rev)
            sha256 = await self.prefetcher.prefetch(url, module.rev)
        except Vgo2NixError as exc:
            if exc.import_path is None:
                exc.import_path = module.import_path
            return FetchOutcome.failure(module.import_path, exc)
        except Exception as exc:
            # Unexpected failures stay scoped to this module.
            error = FetchError(f"{type(exc).__name__}: {exc}", import_path=module.import_path)
            error.__cause__ = exc
            return FetchOutcome.failure(module.import_path, error)

        logger.info("Finished fetching %s@%s", module.import_path, module.rev)
        return FetchOutcome.success(
            FetchDescriptor(
                import_path=module.import_path,
                url=url,
                rev=module.rev,
                sha256=sha256,
            )
        )

    async def _worker(
        self,
        work: asyncio.Queue[ResolvedModule],
        results: asyncio.Queue[FetchOutcome],
    ) -> None:
        while True:
            try:
                module = work.get_nowait()
            except asyncio.QueueEmpty:
                return
            outcome = await self.resolve_one(module)
            await results.put(outcome)
            work.task_done()

    async def resolve_all(self, modules: Sequence[ResolvedModule]) -> AsyncIterator[FetchOutcome]:
        """Yields exactly one outcome per module, in completion order."""
        if not modules:
            return
        work: asyncio.Queue[ResolvedModule] = asyncio.Queue()
        results: asyncio.Queue[FetchOutcome] = asyncio.Queue()
        for module in modules:
            work.put_nowait(module)

        size = min(len(modules), self.jobs)
        workers: List[asyncio.Task[None]] = [
            asyncio.create_task(self._worker(work, results)) for _ in range(size)
        ]
        try:
            for _ in range(len(modules)):
                yield await results.get()
        finally:
            _discard_pending(work)
            await asyncio.gather(*workers, return_exceptions=True)


def _discard_pending(work: asyncio.Queue[ResolvedModule]) -> None:
    while True:
        try:
            work.get_nowait()
        except asyncio.QueueEmpty:
            return
        work.task_done()

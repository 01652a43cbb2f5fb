# File: vgo2nix/cache.py
"""vgo2nix.cache: Read-only cache of fetch descriptors loaded from the previous manifest."""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Union

from vgo2nix.logger import logger
from vgo2nix.manifest.nix_reader import read_manifest
from vgo2nix.models import FetchDescriptor, ResolvedModule

__all__ = ["FetchCache"]


class FetchCache(Mapping[str, FetchDescriptor]):
    """Import path → descriptor of the prior run. Never mutated during a run."""

    def __init__(self, descriptors: Iterable[FetchDescriptor] = ()) -> None:
        entries = {d.import_path: d for d in descriptors}
        self._entries: Mapping[str, FetchDescriptor] = MappingProxyType(entries)

    @classmethod
    def from_manifest(cls, path: Union[str, Path]) -> FetchCache:
        """Loads the cache from a deps.nix file; a missing file yields an empty cache."""
        p = Path(path)
        if not p.is_file():
            logger.debug("No previous manifest at %s, starting with an empty cache", p)
            return cls()
        cache = cls(read_manifest(p))
        logger.debug("Loaded %d cached descriptors from %s", len(cache), p)
        return cache

    def lookup(self, module: ResolvedModule) -> Optional[FetchDescriptor]:
        """Returns the cached descriptor if it is still valid for *module*'s revision."""
        cached = self._entries.get(module.import_path)
        if cached is None or cached.rev != module.rev:
            return None
        return cached

    def __getitem__(self, import_path: str) -> FetchDescriptor:
        return self._entries[import_path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

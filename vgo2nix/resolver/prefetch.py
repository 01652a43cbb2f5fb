# vgo2nix/resolver/prefetch.py
"""
Prefetch module: runs nix-prefetch-git for one repository revision and returns its sha256.
"""
from __future__ import annotations

import asyncio
import shlex
from typing import List, Sequence

from pydantic import ValidationError

from vgo2nix.config import SENTINEL_HASH
from vgo2nix.errors import FetchError
from vgo2nix.models import PrefetchResult


class Prefetcher:
    """Invokes the content-hashing fetcher once per (url, rev)."""

    def __init__(self, command: Sequence[str], sentinel_hash: str = SENTINEL_HASH) -> None:
        self.command: List[str] = list(command)
        self.sentinel_hash = sentinel_hash

    @classmethod
    def from_config(cls, config) -> Prefetcher:
        return cls(config.prefetch_command, config.sentinel_hash)

    def argv(self, url: str, rev: str) -> List[str]:
        # Options must match how buildGoPackage calls fetchgit (submodules included).
        return [*self.command, "--url", url, "--rev", rev]

    async def prefetch(self, url: str, rev: str) -> str:
        """
        Fetch *url* at *rev* and return the sha256 reported by the fetcher.

        Raises FetchError on non-zero exit, unparsable output or the sentinel hash.
        """
        argv = self.argv(url, rev)
        cmd = shlex.join(argv)
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise FetchError(f"Error executing cmd [{cmd}]: {exc}") from exc

        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise FetchError(
                f"Error executing cmd [{cmd}]: exit status {proc.returncode}",
                stderr=stderr.decode("utf-8", errors="replace"),
            )

        try:
            result = PrefetchResult.model_validate_json(stdout)
        except ValidationError as exc:
            raise FetchError(
                f"Unexpected output from [{cmd}]: {exc}",
                stderr=stderr.decode("utf-8", errors="replace"),
            ) from exc

        if result.sha256 == self.sentinel_hash:
            raise FetchError(f"Bad SHA256 for repo {url} with rev {rev}")
        return result.sha256

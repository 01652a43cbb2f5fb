# === FILE: vgo2nix/resolver/repo_root.py ===
from __future__ import annotations

import asyncio
import logging
import random
import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Sequence, Tuple

from aiohttp import ClientError, ClientSession, ClientTimeout
from bs4 import BeautifulSoup

from vgo2nix.errors import RepositoryResolutionError

__all__ = ("GoImport", "RepoRootResolver", "match_static_root", "parse_go_imports")


@dataclass(frozen=True, slots=True)
class GoImport:
    """Содержимое <meta name="go-import" content="prefix vcs repo">."""
    prefix: str
    vcs: str
    repo: str


_SEGMENT = r"[A-Za-z0-9_.\-]+"

# Hosts whose repository root can be derived from the import path alone.
_STATIC_ROOTS: Sequence[Tuple[str, Pattern[str]]] = (
    ("github.com", re.compile(rf"^(?P<root>github\.com/{_SEGMENT}/{_SEGMENT})(/{_SEGMENT})*$")),
    ("bitbucket.org", re.compile(rf"^(?P<root>bitbucket\.org/{_SEGMENT}/{_SEGMENT})(/{_SEGMENT})*$")),
    ("hub.jazz.net", re.compile(rf"^(?P<root>hub\.jazz\.net/git/[a-z0-9]+/{_SEGMENT})(/{_SEGMENT})*$")),
    ("git.apache.org", re.compile(r"^(?P<root>git\.apache\.org/[a-z0-9_.\-]+\.git)(/[A-Za-z0-9_.\-]+)*$")),
    (
        "git.openstack.org",
        re.compile(rf"^(?P<root>git\.openstack\.org/{_SEGMENT}/{_SEGMENT})(\.git)?(/{_SEGMENT})*$"),
    ),
    (
        "",
        re.compile(
            r"^(?P<root>(?P<repo>([a-z0-9.\-]+\.)+[a-z0-9.\-]+(:[0-9]+)?/[A-Za-z0-9_.\-/]*?)\.git)"
            r"(/[A-Za-z0-9_.\-]+)*$"
        ),
    ),
)


def match_static_root(import_path: str) -> Optional[str]:
    """URL репозитория для известных хостов и явных `.git`-путей, иначе None."""
    for prefix, pattern in _STATIC_ROOTS:
        if prefix and not import_path.startswith(prefix + "/"):
            continue
        match = pattern.match(import_path)
        if match:
            return "https://" + match.group("root")
    return None


def parse_go_imports(html: str) -> List[GoImport]:
    """Извлекает все go-import meta-теги из HTML-ответа на ?go-get=1."""
    soup = BeautifulSoup(html, "html.parser")
    imports: List[GoImport] = []
    for tag in soup.find_all("meta", attrs={"name": "go-import"}):
        content = tag.get("content")
        if not isinstance(content, str):
            continue
        fields = content.split()
        if len(fields) != 3:
            continue
        imports.append(GoImport(prefix=fields[0], vcs=fields[1], repo=fields[2]))
    return imports


def _select_import(import_path: str, imports: Sequence[GoImport]) -> Optional[GoImport]:
    best: Optional[GoImport] = None
    for item in imports:
        if item.vcs != "git":
            continue
        if import_path != item.prefix and not import_path.startswith(item.prefix + "/"):
            continue
        if best is None or len(item.prefix) > len(best.prefix):
            best = item
    return best


class RepoRootResolver:
    """Определяет URL git-репозитория для import path (статические правила, затем ?go-get=1)."""
    _RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)

    def __init__(self, config, *, scheme: str = "https") -> None:
        self.config = config
        self.scheme = scheme
        self.retry_times: int = getattr(config, "resolve_retries", 2)
        self.session: Optional[ClientSession] = None
        self.logger = logging.getLogger("vgo2nix")

    async def __aenter__(self) -> RepoRootResolver:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.resolve_timeout),
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def repo_root(self, import_path: str) -> str:
        static = match_static_root(import_path)
        if static is not None:
            return static
        imports = parse_go_imports(await self._fetch_go_get(import_path))
        selected = _select_import(import_path, imports)
        if selected is None:
            raise RepositoryResolutionError(
                "no git go-import meta tag found", import_path=import_path
            )
        self.logger.debug("%s resolved to %s via go-import %s", import_path, selected.repo, selected.prefix)
        return selected.repo

    async def _fetch_go_get(self, import_path: str) -> str:
        if not self.session:
            raise RuntimeError("Session not initialized")
        url = f"{self.scheme}://{import_path}?go-get=1"
        attempts = 0
        while True:
            try:
                async with self.session.get(url) as resp:
                    if resp.status in self._RETRY_STATUS:
                        raise ClientError(f"retryable status {resp.status}")
                    return await resp.text(errors="replace")
            except (ClientError, asyncio.TimeoutError) as e:
                attempts += 1
                if attempts > self.retry_times:
                    raise RepositoryResolutionError(
                        f"unable to query {url}: {e or type(e).__name__}", import_path=import_path
                    ) from e
                backoff = min(10, 2**attempts * 0.1 + random.random() * 0.1)
                self.logger.debug("Retry %d/%d for %s after %.2f s", attempts, self.retry_times, url, backoff)
                await asyncio.sleep(backoff)

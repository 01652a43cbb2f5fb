# File: tests/test_prefetch.py
import pytest

from vgo2nix.config import SENTINEL_HASH
from vgo2nix.errors import FetchError
from vgo2nix.resolver.prefetch import Prefetcher

URL = "https://github.com/pkg/errors"


def test_argv_appends_url_and_rev():
    prefetcher = Prefetcher(["nix-prefetch-git", "--quiet", "--fetch-submodules"])
    assert prefetcher.argv(URL, "v0.9.1") == [
        "nix-prefetch-git", "--quiet", "--fetch-submodules", "--url", URL, "--rev", "v0.9.1",
    ]


def test_from_config(base_config):
    prefetcher = Prefetcher.from_config(base_config)
    assert prefetcher.command == base_config.prefetch_command
    assert prefetcher.sentinel_hash == SENTINEL_HASH


@pytest.mark.asyncio()
async def test_prefetch_returns_hash(prefetch_command, good_hash):
    prefetcher = Prefetcher(prefetch_command({"v0.9.1": "0abc"}))
    assert await prefetcher.prefetch(URL, "v0.9.1") == "0abc"
    assert await prefetcher.prefetch(URL, "v0.8.0") == good_hash


@pytest.mark.asyncio()
async def test_prefetch_rejects_sentinel(prefetch_command):
    prefetcher = Prefetcher(prefetch_command({"deadbeef": SENTINEL_HASH}))
    with pytest.raises(FetchError) as excinfo:
        await prefetcher.prefetch(URL, "deadbeef")
    assert str(excinfo.value) == f"Bad SHA256 for repo {URL} with rev deadbeef"


@pytest.mark.asyncio()
async def test_prefetch_custom_sentinel(prefetch_command, good_hash):
    prefetcher = Prefetcher(prefetch_command(), sentinel_hash=good_hash)
    with pytest.raises(FetchError, match="Bad SHA256"):
        await prefetcher.prefetch(URL, "v1.0.0")


@pytest.mark.asyncio()
async def test_prefetch_failure_carries_stderr(prefetch_command):
    prefetcher = Prefetcher(prefetch_command(failing=("v9.9.9",)))
    with pytest.raises(FetchError) as excinfo:
        await prefetcher.prefetch(URL, "v9.9.9")
    err = excinfo.value
    assert "exit status 1" in err.message
    assert "couldn't find remote ref v9.9.9" in err.stderr
    assert "Stderr:" in str(err)


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "raw",
    [
        "not json at all",
        '{"url": "x", "rev": "y"}',
        '{"sha256": 42}',
        '{"sha256": ""}',
    ],
)
async def test_prefetch_unexpected_output(prefetch_command, raw):
    prefetcher = Prefetcher(prefetch_command(raw=raw))
    with pytest.raises(FetchError, match="Unexpected output"):
        await prefetcher.prefetch(URL, "v1.0.0")


@pytest.mark.asyncio()
async def test_prefetch_missing_binary(tmp_path):
    prefetcher = Prefetcher([str(tmp_path / "no-such-prefetcher")])
    with pytest.raises(FetchError, match="Error executing cmd"):
        await prefetcher.prefetch(URL, "v1.0.0")

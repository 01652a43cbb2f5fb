# File: tests/conftest.py
import json
import sys
import textwrap
from typing import Callable, Dict, List, Optional

import pytest

from vgo2nix.config import GeneratorConfig
from vgo2nix.logger import configure
from vgo2nix.models import FetchDescriptor, ResolvedModule

GOOD_HASH = "1jgbpcsh2mc3yjfhs74bah5m4f35kk30r6qsd2a4y0j3rwd0yb2v"


@pytest.fixture()
def good_hash() -> str:
    return GOOD_HASH


@pytest.fixture(autouse=True)
def fresh_logger():
    """
    Re-create logger handlers for every test so none of them point to a closed stream.
    """
    return configure(level="DEBUG")


@pytest.fixture()
def log_records(fresh_logger, caplog):
    """
    Attach caplog to the project logger (it does not propagate to root).
    """
    fresh_logger.addHandler(caplog.handler)
    yield caplog
    fresh_logger.removeHandler(caplog.handler)


@pytest.fixture()
def make_script(tmp_path) -> Callable[[str, str], List[str]]:
    """
    Write a small Python program standing in for an external tool.
    Returns the argv prefix to run it.
    """
    def _make(name: str, body: str) -> List[str]:
        script = tmp_path / f"{name}.py"
        script.write_text(textwrap.dedent(body), encoding="utf-8")
        return [sys.executable, str(script)]

    return _make


@pytest.fixture()
def lister_command(make_script) -> Callable[..., List[str]]:
    """
    Build a fake `go list -json -m all` that prints *records* (dicts or raw text).
    """
    def _make(records, exit_code: int = 0, stderr: str = "") -> List[str]:
        if isinstance(records, str):
            payload = records
        else:
            payload = "\n".join(json.dumps(r, indent=1) for r in records) + "\n"
        return _make_script(make_script, "go_list", payload, exit_code, stderr)

    return _make


def _make_script(make_script, name: str, stdout: str, exit_code: int, stderr: str) -> List[str]:
    return make_script(
        name,
        f"""
        import sys
        sys.stdout.write({stdout!r})
        sys.stdout.flush()
        sys.stderr.write({stderr!r})
        sys.exit({exit_code})
        """,
    )


@pytest.fixture()
def prefetch_command(make_script) -> Callable[..., List[str]]:
    """
    Build a fake nix-prefetch-git; *hashes* maps rev → sha256, *failing* revs exit 1.
    """
    def _make(hashes: Optional[Dict[str, str]] = None, failing: tuple = (), raw: Optional[str] = None) -> List[str]:
        return make_script(
            "prefetch",
            f"""
            import json
            import sys

            args = sys.argv[1:]
            url = args[args.index("--url") + 1]
            rev = args[args.index("--rev") + 1]
            if rev in {list(failing)!r}:
                sys.stderr.write("fatal: couldn't find remote ref " + rev + "\\n")
                sys.exit(1)
            raw = {raw!r}
            if raw is not None:
                sys.stdout.write(raw)
                sys.exit(0)
            hashes = {dict(hashes or {})!r}
            print(json.dumps({{"url": url, "rev": rev, "sha256": hashes.get(rev, {GOOD_HASH!r}), "fetchSubmodules": True}}))
            """,
        )

    return _make


@pytest.fixture()
def base_config(tmp_path) -> GeneratorConfig:
    """
    Return a config rooted in a temporary project directory.
    """
    return GeneratorConfig(project_dir=tmp_path, jobs=4, resolve_timeout=2.0, resolve_retries=0)


@pytest.fixture()
def descriptor() -> Callable[..., FetchDescriptor]:
    def _make(path: str, rev: str = "v1.0.0", sha256: str = GOOD_HASH, url: Optional[str] = None) -> FetchDescriptor:
        return FetchDescriptor(import_path=path, url=url or f"https://{path}", rev=rev, sha256=sha256)

    return _make


@pytest.fixture()
def module() -> Callable[[str, str], ResolvedModule]:
    def _make(path: str, rev: str = "v1.0.0") -> ResolvedModule:
        return ResolvedModule(import_path=path, rev=rev)

    return _make

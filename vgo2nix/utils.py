# File: vgo2nix/utils.py
"""vgo2nix.utils: Small helpers for import paths, Nix string literals and path resolution."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Sequence, Union

__all__: Sequence[str] = (
    "split_import_path",
    "escape_nix_string",
    "unescape_nix_string",
    "resolve_against",
)

_NIX_ESCAPES = {'"': '\\"', "\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_NIX_UNESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)
_NIX_UNESCAPES = {"n": "\n", "r": "\r", "t": "\t"}


def split_import_path(import_path: str) -> List[str]:
    """Splits an import path into its `/`-separated segments."""
    return import_path.split("/")


def escape_nix_string(value: str) -> str:
    """Escapes *value* for use inside a double-quoted Nix string."""
    escaped = "".join(_NIX_ESCAPES.get(ch, ch) for ch in value)
    return escaped.replace("${", "\\${")


def unescape_nix_string(value: str) -> str:
    """Reverses :func:`escape_nix_string`."""
    return _NIX_UNESCAPE_RE.sub(lambda m: _NIX_UNESCAPES.get(m.group(1), m.group(1)), value)


def resolve_against(base: Union[str, Path], path: Union[str, Path]) -> Path:
    """Returns *path* unchanged when absolute, otherwise relative to *base*."""
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return Path(base).expanduser() / p

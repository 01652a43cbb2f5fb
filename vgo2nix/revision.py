# File: vgo2nix/revision.py
"""vgo2nix.revision: Derives canonical git revisions from Go module version strings.

Go reports three kinds of versions that do not map one-to-one onto a git ref:

* pseudo-versions (``v0.0.0-20181204163529-d75b2dcb6bc8``) encode a commit,
  the revision is the trailing commit token;
* ``+incompatible`` releases of v2+ modules that predate go.mod, the revision
  is the plain tag or the abbreviated commit in front of the marker;
* releases of modules living in a repository subdirectory, tagged in git as
  ``<subdir>/vX.Y.Z``.

Anything else (tags, branch names, short hashes) is used verbatim.
"""
from __future__ import annotations

import re
from typing import Callable, Final, List, Optional, Pattern, Tuple

from vgo2nix.utils import split_import_path

__all__ = ["normalize", "RevisionNormalizer", "INCOMPATIBLE_SUFFIX"]

RevisionNormalizer = Callable[[str, str], str]

INCOMPATIBLE_SUFFIX: Final[str] = "+incompatible"

_MAJOR_VERSION_SEGMENT: Final[Pattern[str]] = re.compile(r"^v\d+$")
_SEMVER_TAG: Final[Pattern[str]] = re.compile(r"^v\d+\.\d+\.\d+$")

# Order matters: the incompatible rules overlap with the pseudo-version rule.
_RULES: Final[List[Tuple[str, Pattern[str]]]] = [
    ("pseudo-version", re.compile(r"^v\d+\.\d+\.\d+-(?:\d+\.)?[0-9]{14}-(.*?)$")),
    ("short-incompatible", re.compile(r"^v.*-(.{12})\+incompatible$")),
    ("plain-incompatible", re.compile(r"^(v\d+\.\d+\.\d+)\+incompatible$")),
]


def _match_rules(version: str) -> Optional[str]:
    for _name, pattern in _RULES:
        match = pattern.match(version)
        if match:
            return match.group(1)
    return None


def _tag_for_nested_module(import_path: str, rev: str) -> str:
    # pseudo-versions of incompatible modules still carry the marker
    rev = rev.removesuffix(INCOMPATIBLE_SUFFIX)
    parts = split_import_path(import_path)
    if len(parts) <= 3:
        return rev
    last = parts[-1]
    if _MAJOR_VERSION_SEGMENT.match(last):
        return rev
    # only release tags are prefixed, commits are repository-wide
    if not _SEMVER_TAG.match(rev):
        return rev
    return f"{last}/{rev}"


def normalize(import_path: str, version: str) -> str:
    """Return the canonical git revision for *version* of module *import_path*.

    Examples
    --------
    >>> normalize("example.com/pkg/v2", "v2.1.1-0.20190517191504-25dcb96d9e51+incompatible")
    '25dcb96d9e51'
    >>> normalize("example.com/org/repo/subpkg", "v1.2.3+incompatible")
    'subpkg/v1.2.3'
    >>> normalize("example.com/org/repo/subpkg", "v0.0.0-20181204163529-d75b2dcb6bc8")
    'd75b2dcb6bc8'
    """
    matched = _match_rules(version)
    rev = version if matched is None else matched
    return _tag_for_nested_module(import_path, rev)


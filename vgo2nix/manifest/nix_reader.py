# File: vgo2nix/manifest/nix_reader.py
"""vgo2nix.manifest.nix_reader: Parses a previously generated deps.nix into fetch descriptors."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Union

from vgo2nix.errors import ManifestError
from vgo2nix.logger import logger
from vgo2nix.models import FetchDescriptor
from vgo2nix.utils import unescape_nix_string

_STRING = r'"((?:[^"\\]|\\.)*)"'
_ENTRY_RE = re.compile(
    r"goPackagePath\s*=\s*" + _STRING + r"\s*;(.*?)(?=goPackagePath\s*=|\Z)",
    re.DOTALL,
)
_ATTR_RE = re.compile(r"\b(url|rev|sha256)\s*=\s*" + _STRING + r"\s*;")
_COMMENT_RE = re.compile(r"^\s*#.*$", re.MULTILINE)


def parse_manifest(text: str) -> List[FetchDescriptor]:
    """Разбирает текст deps.nix и возвращает список FetchDescriptor.

    Записи без url, rev или sha256 пропускаются с предупреждением: такой
    записи нельзя доверить повторное использование хеша.
    """
    descriptors: List[FetchDescriptor] = []
    for match in _ENTRY_RE.finditer(_COMMENT_RE.sub("", text)):
        import_path = unescape_nix_string(match.group(1))
        attrs: Dict[str, str] = {}
        for attr in _ATTR_RE.finditer(match.group(2)):
            attrs.setdefault(attr.group(1), unescape_nix_string(attr.group(2)))
        missing = [key for key in ("url", "rev", "sha256") if not attrs.get(key)]
        if missing:
            logger.warning(
                "Ignoring cached entry %s: missing %s", import_path, ", ".join(missing)
            )
            continue
        descriptors.append(
            FetchDescriptor(
                import_path=import_path,
                url=attrs["url"],
                rev=attrs["rev"],
                sha256=attrs["sha256"],
            )
        )
    return descriptors


def read_manifest(path: Union[str, Path]) -> List[FetchDescriptor]:
    """Читает deps.nix с диска. Если файла нет, возвращает пустой список."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"cannot read previous manifest {p}: {exc}") from exc
    return parse_manifest(text)

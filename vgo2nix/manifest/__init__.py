# File: vgo2nix/manifest/__init__.py
"""vgo2nix.manifest: Чтение предыдущего и запись нового deps.nix."""

from .nix_reader import parse_manifest, read_manifest
from .nix_writer import HEADER, render_manifest, write_manifest

__all__ = ["HEADER", "parse_manifest", "read_manifest", "render_manifest", "write_manifest"]

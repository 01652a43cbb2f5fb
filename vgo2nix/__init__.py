# vgo2nix/__init__.py
"""
vgo2nix package initializer.
Defines package version and exposes the generation API.
"""
__version__ = "0.1.0"

from vgo2nix.engine import Engine, generate  # noqa: E402
from vgo2nix.revision import normalize  # noqa: E402

__all__ = ["Engine", "generate", "normalize", "__version__"]

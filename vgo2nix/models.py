# File: vgo2nix/models.py
"""
Data models for vgo2nix: lister records, resolved modules, fetch descriptors and outcomes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from vgo2nix.errors import Vgo2NixError

__all__ = [
    "ModuleReplacement",
    "ModuleRecord",
    "ResolvedModule",
    "FetchDescriptor",
    "FetchOutcome",
    "PrefetchResult",
]


class ModuleReplacement(BaseModel):
    """`Replace` block of a `go list -json -m` record."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    path: str = Field("", alias="Path")
    version: str = Field("", alias="Version")


class ModuleRecord(BaseModel):
    """One record streamed by the module lister."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    path: str = Field(..., alias="Path", min_length=1)
    version: str = Field("", alias="Version")
    main: bool = Field(False, alias="Main")
    replace: Optional[ModuleReplacement] = Field(None, alias="Replace")

    @property
    def effective_version(self) -> str:
        """Version to normalize: the replacement's version wins when one is declared."""
        if self.replace is not None:
            return self.replace.version
        return self.version


class PrefetchResult(BaseModel):
    """Typed view of the fetcher's JSON output; only the hash is consumed."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    sha256: StrictStr = Field(..., min_length=1)


@dataclass(frozen=True, slots=True)
class ResolvedModule:
    """Import path and its canonical source-control revision."""

    import_path: str
    rev: str


@dataclass(frozen=True, slots=True)
class FetchDescriptor:
    """Immutable fetch descriptor persisted in the manifest and reused as cache entry."""

    import_path: str
    url: str
    rev: str
    sha256: str


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    """Terminal result for one module: a descriptor or an error, never both."""

    import_path: str
    descriptor: Optional[FetchDescriptor] = None
    error: Optional[Vgo2NixError] = None

    @classmethod
    def success(cls, descriptor: FetchDescriptor) -> FetchOutcome:
        return cls(import_path=descriptor.import_path, descriptor=descriptor)

    @classmethod
    def failure(cls, import_path: str, error: Vgo2NixError) -> FetchOutcome:
        return cls(import_path=import_path, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

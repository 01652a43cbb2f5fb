# File: vgo2nix/errors.py
"""vgo2nix.errors: Error taxonomy for enumeration, resolution, fetching and aggregation."""

from __future__ import annotations

from typing import Optional

__all__ = [
    "Vgo2NixError",
    "EnumerationError",
    "RepositoryResolutionError",
    "FetchError",
    "AggregationError",
    "ManifestError",
]


class Vgo2NixError(Exception):
    """Base error; carries the offending import path and captured stderr when known."""

    def __init__(
        self,
        message: str,
        *,
        import_path: Optional[str] = None,
        stderr: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.import_path = import_path
        self.stderr = stderr

    def __str__(self) -> str:
        text = self.message
        if self.import_path:
            text = f'Error processing import path "{self.import_path}": {text}'
        if self.stderr:
            text = f"{text}\nStderr:\n{self.stderr.rstrip()}"
        return text


class EnumerationError(Vgo2NixError):
    """The module lister failed or produced output that could not be decoded."""


class RepositoryResolutionError(Vgo2NixError):
    """The source repository of an import path could not be determined."""


class FetchError(Vgo2NixError):
    """The content-hashing fetcher failed or returned the reserved sentinel hash."""


class AggregationError(Vgo2NixError):
    """A per-module error became fatal because keep_going is disabled."""

    def __init__(self, error: Vgo2NixError) -> None:
        super().__init__(
            error.message,
            import_path=error.import_path,
            stderr=error.stderr,
        )
        self.error = error


class ManifestError(Vgo2NixError):
    """The prior manifest exists but could not be read."""

"""Exception types raised by the system scaffolder."""

from __future__ import annotations

from pathlib import Path

__all__ = ["ScaffoldError", "ValidationError", "FileSystemError", "ManifestParseError"]


class ScaffoldError(RuntimeError):
    """Base class for every error that aborts a scaffolding run."""


class ValidationError(ScaffoldError):
    """Raised when a required naming answer is missing or blank."""

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"{field} cannot be empty.")


class FileSystemError(ScaffoldError):
    """Raised when copying, deleting, renaming, or rewriting a path fails."""

    def __init__(self, operation: str, path: str | Path, reason: str = "") -> None:
        self.operation = operation
        self.path = Path(path)
        detail = f": {reason}" if reason else ""
        super().__init__(f"{operation} failed for {self.path}{detail}")


class ManifestParseError(ScaffoldError):
    """Raised when a manifest in the build output is not a JSON object."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"cannot parse manifest {self.path}: {reason}")

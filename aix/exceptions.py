"""Shared exception classes for aix.

Every error raised by the core derives from AixError and carries a
machine-stable ``kind`` tag so that ``--json`` callers can branch on it.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from aix.validators.result import Result


class AixError(Exception):
    """Base exception for aix errors."""

    kind = "error"
    exit_code = 1

    def details(self) -> dict[str, Any]:
        """Extra fields included in the JSON projection."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON projection of this error."""
        data: dict[str, Any] = {"kind": self.kind, "message": str(self)}
        data.update(self.details())
        return data


class ValidationFailedError(AixError):
    """Raised when an artifact fails validation."""

    kind = "validation"

    def __init__(self, message: str, result: "Result | None" = None):
        super().__init__(message)
        self.result = result

    def details(self) -> dict[str, Any]:
        if self.result is None:
            return {}
        return self.result.to_dict()


class UnknownPlatformError(AixError):
    """Raised when a platform name is not one of the supported platforms."""

    kind = "validation"


class InvalidPathError(AixError):
    """Raised when a user-supplied path tries to escape the home directory."""

    kind = "validation"


class ParseError(AixError):
    """Raised when a file cannot be parsed.

    The message always names the file. Line and column are 1-based and
    only present when the underlying parser reports them.
    """

    kind = "parse"

    def __init__(
        self,
        path: Path | str | None,
        reason: str,
        line: int | None = None,
        column: int | None = None,
    ):
        self.path = str(path) if path is not None else None
        self.reason = reason
        self.line = line
        self.column = column
        location = self.path or "<input>"
        if line is not None:
            location = f"{location}:{line}"
            if column is not None:
                location = f"{location}:{column}"
        super().__init__(f"parsing {location}: {reason}")

    def details(self) -> dict[str, Any]:
        data: dict[str, Any] = {"path": self.path}
        if self.line is not None:
            data["line"] = self.line
        if self.column is not None:
            data["column"] = self.column
        return data


class NotFoundError(AixError):
    """Raised when a named artifact does not exist in the searched scope."""

    kind = "not_found"


class NoBackupsFoundError(NotFoundError):
    """Raised when a platform has no backups."""


class NothingToBackUpError(AixError):
    """Raised when none of the paths given to a backup exist."""

    kind = "empty"


class ConflictError(AixError):
    """Raised when an artifact already exists and force was not given."""

    kind = "conflict"


class BackupCorruptedError(AixError):
    """Raised when a stored backup file no longer matches its recorded hash."""

    kind = "integrity"


class FileOperationError(AixError):
    """Raised when a filesystem operation fails.

    The message is ``<operation>: <path>: <reason>``.
    """

    kind = "io"

    def __init__(self, operation: str, path: Path | str, reason: str):
        self.operation = operation
        self.path = str(path)
        super().__init__(f"{operation}: {path}: {reason}")

    @classmethod
    def from_os_error(cls, operation: str, path: Path | str, err: OSError) -> "FileOperationError":
        """Build the error from an OSError, using its lowercased strerror."""
        reason = (err.strerror or str(err)).lower()
        return cls(operation, path, reason)

    def details(self) -> dict[str, Any]:
        return {"operation": self.operation, "path": self.path}


class SerializationError(AixError):
    """Raised when data cannot be encoded as JSON, YAML or TOML."""

    kind = "serialization"


class UnsupportedError(AixError):
    """Raised when a platform does not support an operation."""

    kind = "unsupported"


class ConfigError(AixError):
    """Raised when config.yaml contains invalid configuration."""

    kind = "config"


class SourceError(AixError):
    """Raised when a remote source cannot be fetched."""

    kind = "source"


class PlatformErrors(AixError):
    """Raised when an operation failed on every targeted platform."""

    kind = "composite"

    def __init__(self, operation: str, failures: dict[str, Exception]):
        self.failures = failures
        parts = "; ".join(f"{name}: {err}" for name, err in failures.items())
        super().__init__(f"{operation} failed on all platforms: {parts}")

    def details(self) -> dict[str, Any]:
        return {"failures": {name: str(err) for name, err in self.failures.items()}}

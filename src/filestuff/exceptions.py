"""Error taxonomy for filestuff.

Only failures that affect the root of a load are surfaced to the caller.
Failures on individual children are recovered by the tree builder, which
drops the offending entry and keeps going.
"""

from __future__ import annotations

from pathlib import Path


class FilestuffError(Exception):
    """Base exception for all filestuff errors."""

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        context: dict[str, object] | None = None,
    ) -> None:
        """Initialize FilestuffError.

        Args:
            message: Error message
            path: Filesystem location the error refers to
            context: Additional context information for debugging
        """
        full_context = context or {}
        if path is not None:
            full_context["path"] = str(path)

        super().__init__(message)
        self.path: Path | None = path
        self.context: dict[str, object] = full_context


class NotFoundError(FilestuffError):
    """No entry exists at the requested location."""


class NotDirectoryError(FilestuffError):
    """An entry exists at the requested location but it is not a directory."""


class EnumerationFailedError(FilestuffError):
    """The content of a directory could not be enumerated."""


class MetadataFetchError(FilestuffError):
    """Metadata for an entry could not be read from the filesystem."""


class ConfigurationError(FilestuffError):
    """Configuration loading or validation failed.

    The message carries actionable, field-level diagnostics.
    """


class EnvironmentVariableError(FilestuffError):
    """A ``${VARIABLE}`` reference in a configuration file is not set."""


__all__ = [
    "ConfigurationError",
    "EnumerationFailedError",
    "EnvironmentVariableError",
    "FilestuffError",
    "MetadataFetchError",
    "NotDirectoryError",
    "NotFoundError",
]

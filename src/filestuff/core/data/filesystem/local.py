"""Local filesystem collaborator backed by ``os.scandir`` and ``os.lstat``."""

from __future__ import annotations

import logging
import mimetypes
import os
import stat
from collections.abc import Iterable, Iterator, Set
from datetime import UTC, datetime
from pathlib import Path
from typing import Final

from filestuff.exceptions import EnumerationFailedError, MetadataFetchError
from filestuff.types.models import (
    ContentType,
    EntryProbe,
    EnumerationOptions,
    FileResourceType,
    ResourceKey,
    ResourceValues,
)

logger = logging.getLogger(__name__)

# Directory suffixes treated as opaque packages (bundles)
DEFAULT_PACKAGE_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {
        ".app",
        ".appex",
        ".bundle",
        ".framework",
        ".kext",
        ".mpkg",
        ".pkg",
        ".playground",
        ".plugin",
        ".rtfd",
        ".xcodeproj",
        ".xcworkspace",
    }
)

# Fallback content types for entries mimetypes cannot name
DIRECTORY_CONTENT_TYPE: Final[str] = "inode/directory"
PACKAGE_CONTENT_TYPE: Final[str] = "inode/x-package"
SYMLINK_CONTENT_TYPE: Final[str] = "inode/symlink"
DEFAULT_CONTENT_TYPE: Final[str] = "application/octet-stream"

_SPECIAL_CONTENT_TYPES: Final[dict[FileResourceType, str]] = {
    FileResourceType.NAMED_PIPE: "inode/fifo",
    FileResourceType.CHARACTER_SPECIAL: "inode/chardevice",
    FileResourceType.BLOCK_SPECIAL: "inode/blockdevice",
    FileResourceType.SOCKET: "inode/socket",
}

# Windows hidden attribute; absent from stat results elsewhere
_FILE_ATTRIBUTE_HIDDEN: Final[int] = 0x2

_BLOCK_SIZE: Final[int] = 512


def normalize_package_extensions(extensions: Iterable[str]) -> frozenset[str]:
    """Normalize suffixes to lowercase with a single leading dot.

    Args:
        extensions: Suffixes such as ``"app"``, ``".APP"`` or ``".bundle"``

    Returns:
        Normalized suffixes, empty strings dropped
    """
    normalized: set[str] = set()
    for extension in extensions:
        stripped = extension.strip().lstrip(".").lower()
        if stripped:
            normalized.add(f".{stripped}")
    return frozenset(normalized)


def resource_type_from_mode(mode: int) -> FileResourceType:
    """Map an ``st_mode`` value to a ``FileResourceType``."""
    if stat.S_ISREG(mode):
        return FileResourceType.REGULAR
    if stat.S_ISDIR(mode):
        return FileResourceType.DIRECTORY
    if stat.S_ISLNK(mode):
        return FileResourceType.SYMBOLIC_LINK
    if stat.S_ISFIFO(mode):
        return FileResourceType.NAMED_PIPE
    if stat.S_ISCHR(mode):
        return FileResourceType.CHARACTER_SPECIAL
    if stat.S_ISBLK(mode):
        return FileResourceType.BLOCK_SPECIAL
    if stat.S_ISSOCK(mode):
        return FileResourceType.SOCKET
    return FileResourceType.UNKNOWN


def _timestamp(seconds: float | None) -> datetime | None:
    if seconds is None:
        return None
    return datetime.fromtimestamp(seconds, tz=UTC)


class LocalFileSystem:
    """Read-only access to the local filesystem.

    Implements the ``FileSystem`` protocol:
    - Existence probe following symbolic links, like ``os.stat``
    - One-level, lazy enumeration through ``os.scandir``
    - Metadata through ``os.lstat``, so links are reported, never followed
    - Package detection by directory suffix
    """

    def __init__(
        self,
        package_extensions: Iterable[str] = DEFAULT_PACKAGE_EXTENSIONS,
    ) -> None:
        """Initialize the local filesystem collaborator.

        Args:
            package_extensions: Directory suffixes treated as packages
        """
        self.package_extensions: frozenset[str] = normalize_package_extensions(package_extensions)

    def is_package_name(self, location: Path) -> bool:
        """Check whether ``location`` has a package suffix."""
        return location.suffix.lower() in self.package_extensions

    def probe(self, location: Path) -> EntryProbe:
        """Report existence and directory flag of ``location``.

        Any OS error is reported as a missing entry.
        """
        try:
            st = os.stat(location)
        except OSError:
            return EntryProbe(exists=False, is_directory=False)
        return EntryProbe(exists=True, is_directory=stat.S_ISDIR(st.st_mode))

    def enumerate_children(
        self,
        location: Path,
        keys: Set[ResourceKey],
        options: EnumerationOptions,
    ) -> Iterator[Path]:
        """Start a one-level enumeration of ``location``.

        The directory is opened immediately so that a failure to start is
        raised here rather than on first iteration. ``os.scandir`` never
        descends, so subdirectory and package descendants are always
        skipped. ``keys`` is accepted for protocol compatibility; metadata
        is read per entry by ``resource_values``.

        Args:
            location: Directory to enumerate
            keys: Metadata keys the caller will request
            options: Enumeration options; ``SKIPS_HIDDEN_FILES`` is honoured

        Returns:
            Lazy, single-pass iterator over child locations

        Raises:
            EnumerationFailedError: If the directory cannot be opened
        """
        try:
            handle = os.scandir(location)
        except OSError as exc:
            msg = f"Failed to read directory content: {location}"
            raise EnumerationFailedError(
                msg,
                path=location,
                context={"error": str(exc), "requested_keys": len(keys)},
            ) from exc

        skip_hidden = EnumerationOptions.SKIPS_HIDDEN_FILES in options
        return self._iter_children(location, handle, skip_hidden=skip_hidden)

    def _iter_children(
        self,
        location: Path,
        handle: Iterator[os.DirEntry[str]],
        *,
        skip_hidden: bool,
    ) -> Iterator[Path]:
        with handle:  # pyright: ignore[reportGeneralTypeIssues]  # ScandirIterator is a context manager
            while True:
                try:
                    entry = next(handle)
                except StopIteration:
                    return
                except OSError as exc:
                    logger.warning(
                        "Directory enumeration interrupted: %s",
                        location,
                        extra={"error": str(exc)},
                    )
                    return

                if skip_hidden and entry.name.startswith("."):
                    continue
                yield Path(entry.path)

    def resource_values(
        self,
        location: Path,
        keys: Set[ResourceKey],
    ) -> ResourceValues:
        """Read the requested metadata of ``location`` without following links.

        Args:
            location: Entry to query
            keys: Metadata keys to populate

        Returns:
            Snapshot with only the requested keys populated

        Raises:
            MetadataFetchError: If the entry cannot be stat'ed or reports
                a value outside the supported range
        """
        try:
            st = os.lstat(location)
        except OSError as exc:
            msg = f"Failed to read metadata: {location}"
            raise MetadataFetchError(msg, path=location, context={"error": str(exc)}) from exc

        values: dict[str, object] = {}
        try:
            for key in keys:
                values[key.value] = self._read_value(key, location, st)
        except (ValueError, OverflowError, OSError) as exc:
            # Timestamps outside the datetime range (corrupt inodes, odd mounts)
            msg = f"Failed to read metadata: {location}"
            raise MetadataFetchError(
                msg,
                path=location,
                context={"error": str(exc)},
            ) from exc
        return ResourceValues(**values)  # pyright: ignore[reportArgumentType]  # keys mirror field names

    def _read_value(self, key: ResourceKey, location: Path, st: os.stat_result) -> object:
        resource_type = resource_type_from_mode(st.st_mode)
        is_directory = resource_type is FileResourceType.DIRECTORY

        if key in (ResourceKey.FILE_SIZE, ResourceKey.TOTAL_FILE_SIZE):
            return None if is_directory else int(st.st_size)
        if key is ResourceKey.FILE_ALLOCATED_SIZE:
            blocks: int | None = getattr(st, "st_blocks", None)
            return None if blocks is None else blocks * _BLOCK_SIZE
        if key is ResourceKey.FILE_RESOURCE_TYPE:
            return resource_type
        if key is ResourceKey.CREATION_DATE:
            return _timestamp(getattr(st, "st_birthtime", None))
        if key is ResourceKey.CONTENT_MODIFICATION_DATE:
            return _timestamp(st.st_mtime)
        if key is ResourceKey.CONTENT_ACCESS_DATE:
            return _timestamp(st.st_atime)
        if key is ResourceKey.IS_REGULAR_FILE:
            return resource_type is FileResourceType.REGULAR
        if key is ResourceKey.IS_DIRECTORY:
            return is_directory
        if key is ResourceKey.IS_SYMBOLIC_LINK:
            return resource_type is FileResourceType.SYMBOLIC_LINK
        if key is ResourceKey.IS_PACKAGE:
            return is_directory and self.is_package_name(location)
        if key is ResourceKey.IS_HIDDEN:
            attributes: int = getattr(st, "st_file_attributes", 0)
            return location.name.startswith(".") or bool(attributes & _FILE_ATTRIBUTE_HIDDEN)
        if key is ResourceKey.IS_READABLE:
            return os.access(location, os.R_OK)
        if key is ResourceKey.IS_WRITABLE:
            return os.access(location, os.W_OK)
        if key is ResourceKey.IS_EXECUTABLE:
            return os.access(location, os.X_OK)
        if key is ResourceKey.LINK_COUNT:
            return int(st.st_nlink)
        if key is ResourceKey.CONTENT_TYPE:
            return self._content_type(location, resource_type)
        return None

    def _content_type(self, location: Path, resource_type: FileResourceType) -> ContentType:
        if resource_type is FileResourceType.SYMBOLIC_LINK:
            return ContentType(SYMLINK_CONTENT_TYPE)
        if resource_type is FileResourceType.DIRECTORY:
            if self.is_package_name(location):
                return ContentType(PACKAGE_CONTENT_TYPE)
            return ContentType(DIRECTORY_CONTENT_TYPE)
        if resource_type in _SPECIAL_CONTENT_TYPES:
            return ContentType(_SPECIAL_CONTENT_TYPES[resource_type])

        guessed, _ = mimetypes.guess_type(location.name)
        return ContentType(guessed or DEFAULT_CONTENT_TYPE)

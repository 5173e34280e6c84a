"""Protocol definitions for component interfaces.

This module defines structural subtyping protocols for the two seams of
filestuff: the read contract every container satisfies, and the host
filesystem primitives the tree builder consumes.
"""

from collections.abc import Iterator, Set
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from filestuff.types.models import (
    ContentType,
    EntryProbe,
    EnumerationOptions,
    FileResourceType,
    ResourceKey,
    ResourceValues,
)


@runtime_checkable
class FilestuffContainer(Protocol):
    """Read contract shared by ``File`` and ``Directory`` containers.

    Every derived accessor is a pure function of ``location`` and
    ``attributes``; none of them touch the filesystem.
    """

    @property
    def location(self) -> Path:
        """Location of the entry this container represents."""
        ...

    @property
    def attributes(self) -> ResourceValues:
        """Metadata snapshot captured when the container was built."""
        ...

    @property
    def name(self) -> str:
        """Final path component."""
        ...

    @property
    def ext(self) -> str:
        """Extension without the leading dot, empty when there is none."""
        ...

    @property
    def display_name(self) -> str:
        """Name without its extension."""
        ...

    @property
    def path(self) -> str:
        """Full path as a string."""
        ...

    @property
    def size(self) -> int | None:
        """Total size in bytes."""
        ...

    @property
    def resource_type(self) -> FileResourceType | None:
        """Filesystem object type."""
        ...

    @property
    def created(self) -> datetime | None:
        """Creation timestamp."""
        ...

    @property
    def modified(self) -> datetime | None:
        """Last content modification timestamp."""
        ...

    @property
    def is_regular_file(self) -> bool | None:
        """Whether the entry is a regular file."""
        ...

    @property
    def is_directory(self) -> bool | None:
        """Whether the entry is a directory."""
        ...

    @property
    def is_symbolic_link(self) -> bool | None:
        """Whether the entry is a symbolic link."""
        ...

    @property
    def content_type(self) -> ContentType | None:
        """Content type inferred for the entry."""
        ...

    @property
    def content_type_identifier(self) -> str | None:
        """String form of the content type."""
        ...


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for the host filesystem primitives used by the tree builder.

    Implementations are read-only. They are consumed, never reimplemented,
    by the builder: it only decides what to do with what they report.
    """

    def probe(self, location: Path) -> EntryProbe:
        """Report whether ``location`` exists and whether it is a directory.

        Args:
            location: Location to probe

        Returns:
            Existence and directory flags
        """
        ...

    def enumerate_children(
        self,
        location: Path,
        keys: Set[ResourceKey],
        options: EnumerationOptions,
    ) -> Iterator[Path]:
        """Start a one-level enumeration of ``location``.

        The returned iterator is lazy, finite and single-pass.

        Args:
            location: Directory to enumerate
            keys: Metadata keys the caller will request for each child
            options: Enumeration options

        Returns:
            Iterator over the direct children of ``location``

        Raises:
            EnumerationFailedError: If the enumeration cannot be started
        """
        ...

    def resource_values(
        self,
        location: Path,
        keys: Set[ResourceKey],
    ) -> ResourceValues:
        """Read the requested metadata for ``location``.

        Args:
            location: Entry to query
            keys: Metadata keys to populate

        Returns:
            Metadata snapshot with the requested keys populated

        Raises:
            MetadataFetchError: If the metadata cannot be read
        """
        ...

"""Data models for filestuff.

This module defines the immutable value types captured while reading a
directory: the metadata keys that can be requested, the metadata snapshot
itself, and the small enums that steer a traversal.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, Flag, auto
from typing import Final


class ResourceKey(str, Enum):
    """Metadata field that can be requested for every entry.

    Each value is also the name of the matching ``ResourceValues`` field.
    """

    FILE_SIZE = "file_size"
    TOTAL_FILE_SIZE = "total_file_size"
    FILE_ALLOCATED_SIZE = "file_allocated_size"
    FILE_RESOURCE_TYPE = "file_resource_type"
    CREATION_DATE = "creation_date"
    CONTENT_MODIFICATION_DATE = "content_modification_date"
    CONTENT_ACCESS_DATE = "content_access_date"
    IS_REGULAR_FILE = "is_regular_file"
    IS_DIRECTORY = "is_directory"
    IS_SYMBOLIC_LINK = "is_symbolic_link"
    IS_PACKAGE = "is_package"
    IS_HIDDEN = "is_hidden"
    IS_READABLE = "is_readable"
    IS_WRITABLE = "is_writable"
    IS_EXECUTABLE = "is_executable"
    LINK_COUNT = "link_count"
    CONTENT_TYPE = "content_type"


# Keys the entry classifier depends on; every registry carries them
REQUIRED_RESOURCE_KEYS: Final[frozenset[ResourceKey]] = frozenset(
    {
        ResourceKey.IS_DIRECTORY,
        ResourceKey.IS_SYMBOLIC_LINK,
        ResourceKey.IS_PACKAGE,
    }
)

DEFAULT_RESOURCE_KEYS: Final[frozenset[ResourceKey]] = REQUIRED_RESOURCE_KEYS | {
    ResourceKey.FILE_SIZE,
    ResourceKey.TOTAL_FILE_SIZE,
    ResourceKey.FILE_RESOURCE_TYPE,
    ResourceKey.CREATION_DATE,
    ResourceKey.CONTENT_MODIFICATION_DATE,
    ResourceKey.IS_REGULAR_FILE,
    ResourceKey.CONTENT_TYPE,
}


class FileResourceType(str, Enum):
    """Filesystem object type of an entry, as reported by ``lstat``."""

    REGULAR = "regular"
    DIRECTORY = "directory"
    SYMBOLIC_LINK = "symbolic_link"
    NAMED_PIPE = "named_pipe"
    CHARACTER_SPECIAL = "character_special"
    BLOCK_SPECIAL = "block_special"
    SOCKET = "socket"
    UNKNOWN = "unknown"


class TraversalMode(str, Enum):
    """How far a load descends below its root."""

    SHALLOW = "shallow"  # Direct children only, all captured as File
    DEEP = "deep"  # Expand every ordinary subdirectory into a Directory


class EntryKind(str, Enum):
    """Classification of one discovered entry."""

    LEAF = "leaf"
    BRANCH_CANDIDATE = "branch_candidate"


class EnumerationOptions(Flag):
    """Options passed to the one-level directory enumerator."""

    NONE = 0
    SKIPS_SUBDIRECTORY_DESCENDANTS = auto()
    SKIPS_PACKAGE_DESCENDANTS = auto()
    SKIPS_HIDDEN_FILES = auto()


DEFAULT_ENUMERATION_OPTIONS: Final[EnumerationOptions] = (
    EnumerationOptions.SKIPS_SUBDIRECTORY_DESCENDANTS
    | EnumerationOptions.SKIPS_PACKAGE_DESCENDANTS
)


@dataclass(slots=True, frozen=True)
class ContentType:
    """MIME-style content type identifier such as ``text/plain``.

    Directories, links and packages use the ``inode/*`` family.
    """

    identifier: str

    @property
    def media_type(self) -> str:
        """Top-level media type (``text`` for ``text/plain``)."""
        return self.identifier.partition("/")[0]

    @property
    def subtype(self) -> str:
        """Subtype (``plain`` for ``text/plain``), empty when absent."""
        return self.identifier.partition("/")[2]

    def conforms_to(self, other: "ContentType | str") -> bool:
        """Check whether this type equals ``other`` or belongs to its media type.

        Args:
            other: Full identifier (``text/plain``) or bare media type (``text``)

        Returns:
            True if this content type conforms to ``other``
        """
        target = other.identifier if isinstance(other, ContentType) else other
        if "/" in target:
            return self.identifier == target
        return self.media_type == target

    def __str__(self) -> str:
        return self.identifier


@dataclass(slots=True, frozen=True)
class ResourceValues:
    """Immutable metadata snapshot captured for one entry at read time.

    Every field is optional: it is ``None`` when the key was not requested or
    when the filesystem does not report it for this kind of entry. The
    snapshot is never refreshed and goes stale if the entry changes.
    """

    file_size: int | None = None
    total_file_size: int | None = None
    file_allocated_size: int | None = None
    file_resource_type: FileResourceType | None = None
    creation_date: datetime | None = None
    content_modification_date: datetime | None = None
    content_access_date: datetime | None = None
    is_regular_file: bool | None = None
    is_directory: bool | None = None
    is_symbolic_link: bool | None = None
    is_package: bool | None = None
    is_hidden: bool | None = None
    is_readable: bool | None = None
    is_writable: bool | None = None
    is_executable: bool | None = None
    link_count: int | None = None
    content_type: ContentType | None = None

    def get(self, key: ResourceKey) -> object:
        """Return the value captured for ``key`` (``None`` when missing)."""
        return getattr(self, key.value)


@dataclass(slots=True, frozen=True)
class EntryProbe:
    """Result of the existence/type probe on a location."""

    exists: bool
    is_directory: bool

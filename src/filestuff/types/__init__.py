"""Type definitions and protocols for filestuff.

This package provides:
- Data models (immutable dataclasses and enums)
- Protocol definitions (structural subtyping interfaces)
- Type aliases (PEP 695 modern syntax)
"""

from filestuff.types.aliases import (
    ResourceKeyInput,
    ResourceKeyLike,
    TraversalModeLike,
)
from filestuff.types.models import (
    DEFAULT_ENUMERATION_OPTIONS,
    DEFAULT_RESOURCE_KEYS,
    REQUIRED_RESOURCE_KEYS,
    ContentType,
    EntryKind,
    EntryProbe,
    EnumerationOptions,
    FileResourceType,
    ResourceKey,
    ResourceValues,
    TraversalMode,
)
from filestuff.types.protocols import (
    FileSystem,
    FilestuffContainer,
)

__all__ = [
    # Type aliases
    "ResourceKeyInput",
    "ResourceKeyLike",
    "TraversalModeLike",
    # Data models
    "DEFAULT_ENUMERATION_OPTIONS",
    "DEFAULT_RESOURCE_KEYS",
    "REQUIRED_RESOURCE_KEYS",
    "ContentType",
    "EntryKind",
    "EntryProbe",
    "EnumerationOptions",
    "FileResourceType",
    "ResourceKey",
    "ResourceValues",
    "TraversalMode",
    # Protocols
    "FileSystem",
    "FilestuffContainer",
]

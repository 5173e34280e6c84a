"""Filestuff - read-only snapshots of directory trees with cached metadata.

This package loads a directory into immutable ``File`` and ``Directory``
containers for file-browser style user interfaces. A shallow load captures
the direct children of a directory; a deep load expands every ordinary
subdirectory. Metadata is read once, at load time, for the keys held by the
resource key registry.
"""

import logging

from filestuff.core.builder import TreeBuilder, load
from filestuff.core.config import FilestuffConfig, load_config
from filestuff.core.containers import Container, Directory, File, walk
from filestuff.core.registry import (
    ResourceKeyRegistry,
    current_resource_keys,
    extend_resource_keys,
    get_default_registry,
)
from filestuff.exceptions import (
    ConfigurationError,
    EnumerationFailedError,
    FilestuffError,
    MetadataFetchError,
    NotDirectoryError,
    NotFoundError,
)
from filestuff.types.models import (
    ContentType,
    FileResourceType,
    ResourceKey,
    ResourceValues,
    TraversalMode,
)
from filestuff.types.protocols import FileSystem, FilestuffContainer

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ConfigurationError",
    "Container",
    "ContentType",
    "Directory",
    "EnumerationFailedError",
    "File",
    "FileResourceType",
    "FileSystem",
    "FilestuffConfig",
    "FilestuffContainer",
    "FilestuffError",
    "MetadataFetchError",
    "NotDirectoryError",
    "NotFoundError",
    "ResourceKey",
    "ResourceKeyRegistry",
    "ResourceValues",
    "TraversalMode",
    "TreeBuilder",
    "current_resource_keys",
    "extend_resource_keys",
    "get_default_registry",
    "load",
    "load_config",
    "walk",
]

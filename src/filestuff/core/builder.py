"""Tree builder: turns a directory on disk into a Directory container.

The builder walks one directory level at a time through a ``FileSystem``
collaborator, classifies every child, and descends into ordinary
subdirectories in deep mode. Only failures on the root are raised; every
child is turned into an explicit outcome (``Loaded`` or ``Skipped``) and
skipped children are left out of the tree.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Set
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from filestuff.core.classifier import classify
from filestuff.core.containers import Container, Directory, File
from filestuff.core.data.filesystem.local import LocalFileSystem
from filestuff.core.registry import (
    ResourceKeyRegistry,
    coerce_resource_keys,
    get_default_registry,
)
from filestuff.exceptions import (
    FilestuffError,
    MetadataFetchError,
    NotDirectoryError,
    NotFoundError,
)
from filestuff.types.aliases import ResourceKeyInput, TraversalModeLike
from filestuff.types.models import (
    DEFAULT_ENUMERATION_OPTIONS,
    DEFAULT_RESOURCE_KEYS,
    EntryKind,
    EnumerationOptions,
    ResourceKey,
    ResourceValues,
    TraversalMode,
)
from filestuff.types.protocols import FileSystem
from filestuff.utils.logging import load_context

if TYPE_CHECKING:
    from filestuff.core.config import FilestuffConfig

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Loaded:
    """A child that was read successfully."""

    container: Container


@dataclass(slots=True, frozen=True)
class Skipped:
    """A child left out of the tree, with the reason it was dropped."""

    location: Path
    reason: str
    error: FilestuffError | None = None


type ChildOutcome = Loaded | Skipped


@dataclass(slots=True)
class _PendingDirectory:
    """A directory whose children are still being read."""

    location: Path
    attributes: ResourceValues | None
    children: Iterator[Path]
    content: list[Container] = field(default_factory=list)


class TreeBuilder:
    """Builds Directory containers from the filesystem.

    Provides:
    - Shallow loads (direct children only, all captured as File)
    - Deep loads (ordinary subdirectories expanded at any depth)
    - Packages and symbolic links kept as File in every mode
    - Per-child failure tolerance: unreadable children are skipped
    - No caching: every build reads the filesystem again
    """

    def __init__(
        self,
        filesystem: FileSystem | None = None,
        registry: ResourceKeyRegistry | None = None,
        *,
        options: EnumerationOptions = DEFAULT_ENUMERATION_OPTIONS,
        default_mode: TraversalMode = TraversalMode.SHALLOW,
    ) -> None:
        """Initialize the tree builder.

        Args:
            filesystem: Filesystem collaborator (local filesystem by default)
            registry: Resource key registry (process-wide registry by default)
            options: Extra enumeration options; subdirectory and package
                descendants are always skipped
            default_mode: Mode used when ``build`` is called without one
        """
        self.filesystem: FileSystem = filesystem if filesystem is not None else LocalFileSystem()
        self.registry: ResourceKeyRegistry = registry if registry is not None else get_default_registry()
        self.options: EnumerationOptions = options | DEFAULT_ENUMERATION_OPTIONS
        self.default_mode: TraversalMode = default_mode

    @classmethod
    def from_config(cls, config: FilestuffConfig) -> TreeBuilder:
        """Create a builder wired to the local filesystem from configuration.

        The builder gets its own registry seeded with the default keys plus
        the configured extra keys; the process-wide registry is untouched.

        Args:
            config: Validated filestuff configuration

        Returns:
            Configured tree builder
        """
        registry = ResourceKeyRegistry(DEFAULT_RESOURCE_KEYS | coerce_resource_keys(config.metadata.extra_keys))
        filesystem = LocalFileSystem(package_extensions=config.traversal.package_extensions)

        options = DEFAULT_ENUMERATION_OPTIONS
        if config.traversal.skip_hidden:
            options |= EnumerationOptions.SKIPS_HIDDEN_FILES

        return cls(
            filesystem=filesystem,
            registry=registry,
            options=options,
            default_mode=config.traversal.default_mode,
        )

    def requested_keys(self, extra_keys: ResourceKeyInput | None = None) -> frozenset[ResourceKey]:
        """Return the registry keys merged with call-scoped extra keys.

        Args:
            extra_keys: Keys requested for one call only

        Returns:
            Keys to request for every entry of the call

        Raises:
            ValueError: If an extra key does not name a known resource key
        """
        keys = self.registry.current_keys()
        if extra_keys is None:
            return keys
        return keys | coerce_resource_keys(extra_keys)

    def build(
        self,
        location: str | os.PathLike[str],
        mode: TraversalModeLike | None = None,
        attributes: ResourceValues | None = None,
        *,
        extra_keys: ResourceKeyInput | None = None,
    ) -> Directory:
        """Load the directory at ``location`` into a Directory container.

        Args:
            location: Directory to load; a symbolic link given here is not
                resolved by the builder
            mode: Traversal mode (builder default when omitted)
            attributes: Already known metadata of ``location``; fetched from
                the filesystem when omitted and not validated when given
            extra_keys: Metadata keys to request for this call only

        Returns:
            Directory holding the children of ``location``

        Raises:
            NotFoundError: If nothing exists at ``location``
            NotDirectoryError: If ``location`` is not a directory
            EnumerationFailedError: If the directory content cannot be read
            MetadataFetchError: If the metadata of ``location`` cannot be read
            ValueError: If ``mode`` or an extra key is not recognised
        """
        root = Path(location)
        traversal_mode = TraversalMode(mode) if mode is not None else self.default_mode
        keys = self.requested_keys(extra_keys)

        with load_context(root):
            directory = self._build(root, traversal_mode, attributes, keys)
            logger.info(
                "Loaded directory %s",
                root,
                extra={
                    "mode": traversal_mode.value,
                    "content_count": directory.content_count,
                },
            )
        return directory

    def load_child(
        self,
        location: Path,
        mode: TraversalMode,
        keys: Set[ResourceKey],
    ) -> ChildOutcome:
        """Read one discovered child into a container.

        Args:
            location: Child location reported by the enumerator
            mode: Traversal mode of the load
            keys: Metadata keys to request

        Returns:
            ``Loaded`` with a File or Directory, or ``Skipped`` when the
            metadata or the subdirectory could not be read
        """
        inspected = self._inspect(location, mode, keys)
        if not isinstance(inspected, ResourceValues):
            return inspected

        # Reuse the snapshot fetched above for the subdirectory itself
        try:
            directory = self._build(location, mode, inspected, keys)
        except FilestuffError as exc:
            return self._skip(location, "subdirectory could not be loaded", exc)
        return Loaded(directory)

    def _inspect(
        self,
        location: Path,
        mode: TraversalMode,
        keys: Set[ResourceKey],
    ) -> ChildOutcome | ResourceValues:
        """Fetch a child's snapshot and settle it unless it must be expanded.

        Returns the snapshot itself for branch candidates.
        """
        try:
            attributes = self.filesystem.resource_values(location, keys)
        except MetadataFetchError as exc:
            return self._skip(location, "metadata unavailable", exc)

        if classify(mode, attributes) is EntryKind.LEAF:
            return Loaded(File(location=location, attributes=attributes))
        return attributes

    def _build(
        self,
        location: Path,
        mode: TraversalMode,
        attributes: ResourceValues | None,
        keys: Set[ResourceKey],
    ) -> Directory:
        # Depth-first with an explicit stack; each directory is assembled
        # once its last child has been read.
        stack = [self._open(location, mode, attributes, keys)]
        while True:
            pending = stack[-1]
            child = next(pending.children, None)
            if child is not None:
                inspected = self._inspect(child, mode, keys)
                if isinstance(inspected, Loaded):
                    pending.content.append(inspected.container)
                elif isinstance(inspected, ResourceValues):
                    try:
                        stack.append(self._open(child, mode, inspected, keys))
                    except FilestuffError as exc:
                        _ = self._skip(child, "subdirectory could not be loaded", exc)
                continue

            _ = stack.pop()
            directory = self._finish(pending, keys)
            if not stack:
                return directory
            stack[-1].content.append(directory)

    def _open(
        self,
        location: Path,
        mode: TraversalMode,
        attributes: ResourceValues | None,
        keys: Set[ResourceKey],
    ) -> _PendingDirectory:
        try:
            probe = self.filesystem.probe(location)
        except OSError as exc:
            msg = f"No file found at: {location}"
            raise NotFoundError(msg, path=location) from exc

        if not probe.exists:
            msg = f"No file found at: {location}"
            raise NotFoundError(msg, path=location)
        if not probe.is_directory:
            msg = f"Not a directory: {location}"
            raise NotDirectoryError(msg, path=location)

        logger.debug("Enumerating directory %s", location, extra={"mode": mode.value})
        # Read the listing up front so only one directory handle is open at a time
        children = tuple(self.filesystem.enumerate_children(location, keys, self.options))
        return _PendingDirectory(location=location, attributes=attributes, children=iter(children))

    def _finish(self, pending: _PendingDirectory, keys: Set[ResourceKey]) -> Directory:
        attributes = pending.attributes
        if attributes is None:
            attributes = self.filesystem.resource_values(pending.location, keys)
        return Directory(location=pending.location, attributes=attributes, content=tuple(pending.content))

    def _skip(self, location: Path, reason: str, error: FilestuffError) -> Skipped:
        logger.debug(
            "Skipping %s: %s",
            location,
            reason,
            extra={"error": str(error)},
        )
        return Skipped(location=location, reason=reason, error=error)


def load(
    location: str | os.PathLike[str],
    mode: TraversalModeLike = TraversalMode.SHALLOW,
    *,
    extra_keys: ResourceKeyInput | None = None,
    registry: ResourceKeyRegistry | None = None,
    filesystem: FileSystem | None = None,
) -> Directory:
    """Load the directory at ``location``.

    When loading shallowly every entry is captured as a File, directories
    included; use ``is_directory`` or ``content_type`` to tell them apart.
    When loading deeply, ordinary subdirectories become Directory containers
    holding their own children. Packages and symbolic links are never
    expanded. Entries whose metadata or content cannot be read are skipped.

    Args:
        location: Directory to load; must not be a symbolic link to it
        mode: ``TraversalMode.SHALLOW`` (default) or ``TraversalMode.DEEP``,
            or their string values
        extra_keys: Metadata keys to request for this call only, on top of
            the registry keys
        registry: Registry to read keys from (process-wide by default)
        filesystem: Filesystem collaborator (local filesystem by default)

    Returns:
        Directory container for ``location``

    Raises:
        NotFoundError: If nothing exists at ``location``
        NotDirectoryError: If ``location`` is not a directory
        EnumerationFailedError: If the directory content cannot be read
        MetadataFetchError: If the metadata of ``location`` cannot be read

    Example:
        Loading a home directory with one subdirectory ``docs``::

            home = load("/home", "deep")
            names = [child.name for child in home.directories()]  # ["docs"]
    """
    builder = TreeBuilder(filesystem=filesystem, registry=registry)
    return builder.build(location, mode, extra_keys=extra_keys)

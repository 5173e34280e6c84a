"""Container model: immutable File and Directory values.

``File`` is the leaf variant and ``Directory`` the branch variant. Both
satisfy the ``FilestuffContainer`` read contract; only ``Directory`` owns
children, so consumers recover child access with ``isinstance``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import overload

from filestuff.types.models import ContentType, FileResourceType, ResourceValues
from filestuff.utils.formatting import format_size


class _ContainerAccessors:
    """Derived accessors shared by every container variant."""

    __slots__ = ()

    location: Path
    attributes: ResourceValues

    @property
    def name(self) -> str:
        return self.location.name

    @property
    def ext(self) -> str:
        return self.location.suffix.removeprefix(".")

    @property
    def display_name(self) -> str:
        return self.location.stem

    @property
    def path(self) -> str:
        return str(self.location)

    @property
    def size(self) -> int | None:
        return self.attributes.total_file_size

    @property
    def formatted_size(self) -> str | None:
        """Human-readable size, ``None`` when the size is unknown."""
        size = self.size
        return format_size(size) if size is not None else None

    @property
    def resource_type(self) -> FileResourceType | None:
        return self.attributes.file_resource_type

    @property
    def created(self) -> datetime | None:
        return self.attributes.creation_date

    @property
    def modified(self) -> datetime | None:
        return self.attributes.content_modification_date

    @property
    def is_regular_file(self) -> bool | None:
        return self.attributes.is_regular_file

    @property
    def is_directory(self) -> bool | None:
        return self.attributes.is_directory

    @property
    def is_symbolic_link(self) -> bool | None:
        return self.attributes.is_symbolic_link

    @property
    def is_package(self) -> bool | None:
        return self.attributes.is_package

    @property
    def content_type(self) -> ContentType | None:
        return self.attributes.content_type

    @property
    def content_type_identifier(self) -> str | None:
        content_type = self.attributes.content_type
        if content_type is None:
            return None
        return content_type.identifier


@dataclass(frozen=True, slots=True, repr=False)
class File(_ContainerAccessors):
    """Metadata of one entry that is not expanded.

    Holds files, and in shallow mode every entry, directories included.
    Packages and symbolic links are always captured as ``File``.
    """

    location: Path
    attributes: ResourceValues

    def __repr__(self) -> str:
        return f"File(location={self.location!r})"


@dataclass(frozen=True, slots=True, repr=False)
class Directory(_ContainerAccessors, Sequence["Container"]):
    """A directory, its metadata and the containers of its direct children.

    Children were enumerated once, when the directory was loaded, and keep
    the filesystem enumeration order (which is not sorted).
    """

    location: Path
    attributes: ResourceValues
    content: tuple[Container, ...] = ()

    def __repr__(self) -> str:
        return f"Directory(location={self.location!r}, content_count={len(self.content)})"

    @overload
    def __getitem__(self, index: int) -> Container: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Container, ...]: ...

    def __getitem__(self, index: int | slice) -> Container | tuple[Container, ...]:
        return self.content[index]

    def __len__(self) -> int:
        return len(self.content)

    def __iter__(self) -> Iterator[Container]:
        return iter(self.content)

    @property
    def content_count(self) -> int:
        """Number of direct children."""
        return len(self.content)

    @property
    def is_empty(self) -> bool:
        """Whether the directory has no (readable) children."""
        return not self.content

    def get(self, index: int) -> Container | None:
        """Return the child at ``index``, or ``None`` when out of range.

        Negative indices are treated as out of range.
        """
        if 0 <= index < len(self.content):
            return self.content[index]
        return None

    def files(self) -> list[File]:
        """Return the children captured as ``File``."""
        return [child for child in self.content if isinstance(child, File)]

    def directories(self) -> list[Directory]:
        """Return the children expanded into ``Directory``."""
        return [child for child in self.content if isinstance(child, Directory)]

    def filter(self, predicate: Callable[[Container], bool]) -> list[Container]:
        """Return the direct children for which ``predicate`` is true."""
        return [child for child in self.content if predicate(child)]

    def map[T](self, transform: Callable[[Container], T]) -> list[T]:
        """Apply ``transform`` to every direct child, in order."""
        return [transform(child) for child in self.content]

    def sorted(
        self,
        key: Callable[[Container], object] | None = None,
        *,
        reverse: bool = False,
    ) -> list[Container]:
        """Return the direct children sorted by ``key`` (name by default).

        Args:
            key: Sort key; defaults to the case-insensitive name
            reverse: Sort descending

        Returns:
            New list of children; the directory itself is unchanged
        """
        sort_key = key if key is not None else _name_key
        return sorted(self.content, key=sort_key, reverse=reverse)  # pyright: ignore[reportArgumentType, reportCallIssue]


type Container = File | Directory


def _name_key(container: Container) -> str:
    return container.name.casefold()


def walk(container: Container) -> Iterator[Container]:
    """Yield ``container`` and all of its descendants, depth-first pre-order.

    Parents are yielded before their children and children keep their
    enumeration order. A ``File`` yields only itself. The walk keeps its own
    stack, so tree depth is not limited by the interpreter recursion limit.

    Args:
        container: Root of the walk

    Yields:
        Every container in the tree
    """
    stack: list[Container] = [container]
    while stack:
        current = stack.pop()
        yield current
        if isinstance(current, Directory):
            stack.extend(reversed(current.content))

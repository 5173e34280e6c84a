"""Type aliases using modern PEP 695 syntax.

This module defines the union types shared across filestuff, using
Python 3.13+ type statement syntax.
"""

from collections.abc import Iterable

from filestuff.types.models import ResourceKey, TraversalMode

# Resource keys as accepted at the public boundary
# Members of ResourceKey or their string values ("file_size", ...)
type ResourceKeyLike = ResourceKey | str

# Any iterable of resource keys, validated when it reaches the registry
type ResourceKeyInput = Iterable[ResourceKeyLike]

# Traversal mode as accepted at the public boundary
type TraversalModeLike = TraversalMode | str

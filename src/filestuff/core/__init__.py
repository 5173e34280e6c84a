"""Core tree construction: registry, classifier, builder and containers."""

from __future__ import annotations

from .builder import ChildOutcome, Loaded, Skipped, TreeBuilder, load
from .classifier import classify, is_expandable
from .containers import Container, Directory, File, walk
from .registry import (
    ResourceKeyRegistry,
    current_resource_keys,
    extend_resource_keys,
    get_default_registry,
)

__all__ = [
    "ChildOutcome",
    "Container",
    "Directory",
    "File",
    "Loaded",
    "ResourceKeyRegistry",
    "Skipped",
    "TreeBuilder",
    "classify",
    "current_resource_keys",
    "extend_resource_keys",
    "get_default_registry",
    "is_expandable",
    "load",
    "walk",
]

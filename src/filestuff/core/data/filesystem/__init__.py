"""Filesystem collaborators used by the tree builder."""

from __future__ import annotations

from .local import DEFAULT_PACKAGE_EXTENSIONS, LocalFileSystem, normalize_package_extensions

__all__ = [
    "DEFAULT_PACKAGE_EXTENSIONS",
    "LocalFileSystem",
    "normalize_package_extensions",
]

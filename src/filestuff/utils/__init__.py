"""Shared utilities: logging setup and formatting helpers."""

from __future__ import annotations

from .formatting import format_size
from .logging import (
    LoadContextFilter,
    configure_logging,
    get_load_root,
    get_logger,
    load_context,
)

__all__ = [
    "LoadContextFilter",
    "configure_logging",
    "format_size",
    "get_load_root",
    "get_logger",
    "load_context",
]

"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from hypothesis import HealthCheck, settings

from filestuff.core.registry import ResourceKeyRegistry
from filestuff.utils.logging import PACKAGE_LOGGER_NAME
from tests.fixtures.fake_filesystem import FakeFileSystem

settings.register_profile(
    "filestuff",
    max_examples=25,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile("filestuff")


@pytest.fixture
def registry() -> ResourceKeyRegistry:
    """Provide a fresh registry holding the default keys."""
    return ResourceKeyRegistry()


@pytest.fixture
def fake_fs() -> FakeFileSystem:
    """Provide an empty in-memory filesystem rooted at /fake."""
    return FakeFileSystem()


@pytest.fixture
def home_tree(tmp_path: Path) -> Path:
    """Create the reference tree: a.txt (2 B), b.txt (5 B), docs/c.pdf (10 B)."""
    home = tmp_path / "home"
    home.mkdir()
    _ = (home / "a.txt").write_bytes(b"ab")
    _ = (home / "b.txt").write_bytes(b"abcde")
    (home / "docs").mkdir()
    _ = (home / "docs" / "c.pdf").write_bytes(b"0123456789")
    return home


@pytest.fixture
def restore_package_logger() -> Generator[logging.Logger, None, None]:
    """Restore the filestuff logger handlers and level after a test."""
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    handlers = list(package_logger.handlers)
    level = package_logger.level
    try:
        yield package_logger
    finally:
        for handler in list(package_logger.handlers):
            if handler not in handlers:
                package_logger.removeHandler(handler)
                handler.close()
        for handler in handlers:
            if handler not in package_logger.handlers:
                package_logger.addHandler(handler)
        package_logger.setLevel(level)


# Seconds since the epoch that land past year 9999
FAR_FUTURE_SECONDS = 10**12


@pytest.fixture
def far_future_lstat(monkeypatch: pytest.MonkeyPatch) -> Callable[[Path], None]:
    """Make ``os.lstat`` report timestamps past year 9999 for chosen paths.

    Returns a function registering a path; other paths use the real call.
    """
    real_lstat = os.lstat
    targets: set[Path] = set()

    def fake_lstat(path: str | os.PathLike[str], *, dir_fd: int | None = None) -> os.stat_result:
        if Path(path) in targets:
            mode = stat.S_IFREG | 0o644
            seconds = FAR_FUTURE_SECONDS
            return os.stat_result((mode, 0, 0, 1, 0, 0, 5, seconds, seconds, seconds))
        return real_lstat(path, dir_fd=dir_fd)

    monkeypatch.setattr(os, "lstat", fake_lstat)
    return targets.add

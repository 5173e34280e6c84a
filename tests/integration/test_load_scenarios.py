"""Integration tests loading real directory trees from disk.

Scenarios:
- Shallow and deep loads of a small home folder
- Root errors (missing, regular file)
- Packages and symbolic links inside a deep load
- Unreadable subdirectories and entries with unrepresentable dates
- Chains of nested directories deeper than the recursion limit
- Configuration-driven loads
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from filestuff import (
    Directory,
    File,
    NotDirectoryError,
    NotFoundError,
    ResourceKey,
    ResourceKeyRegistry,
    TraversalMode,
    TreeBuilder,
    load,
    load_config,
    walk,
)

requires_symlinks = pytest.mark.skipif(os.name == "nt", reason="Symlinks required")
requires_permissions = pytest.mark.skipif(
    os.name == "nt" or (hasattr(os, "geteuid") and os.geteuid() == 0),
    reason="Permission bits are not enforced for this user",
)


def names(directory: Directory) -> list[str]:
    return sorted(child.name for child in directory)


@pytest.mark.integration
class TestHomeScenario:
    """Load the reference tree: a.txt (2 B), b.txt (5 B), docs/c.pdf (10 B)."""

    def test_shallow(self, home_tree: Path) -> None:
        """Test that a shallow load captures three File children."""
        home = load(home_tree)

        assert home.content_count == 3
        assert names(home) == ["a.txt", "b.txt", "docs"]
        assert all(isinstance(child, File) for child in home)

        by_name = {child.name: child for child in home}
        assert by_name["a.txt"].size == 2
        assert by_name["b.txt"].size == 5
        assert by_name["docs"].is_directory is True
        assert by_name["docs"].size is None

    def test_deep(self, home_tree: Path) -> None:
        """Test that a deep load expands docs into a Directory."""
        home = load(home_tree, TraversalMode.DEEP)

        docs = next(child for child in home if child.name == "docs")
        assert isinstance(docs, Directory)
        assert docs.content_count == 1
        pdf = docs[0]
        assert pdf.name == "c.pdf"
        assert pdf.size == 10
        assert pdf.ext == "pdf"
        assert pdf.content_type is not None
        assert pdf.content_type.conforms_to("application/pdf")

    def test_deep_walk_visits_every_entry(self, home_tree: Path) -> None:
        """Test the full set of paths of a deep load."""
        home = load(home_tree, "deep")

        paths = {Path(container.path) for container in walk(home)}

        assert paths == {
            home_tree,
            home_tree / "a.txt",
            home_tree / "b.txt",
            home_tree / "docs",
            home_tree / "docs" / "c.pdf",
        }

    def test_root_attributes(self, home_tree: Path) -> None:
        """Test that the root carries its own metadata."""
        home = load(home_tree)

        assert home.is_directory is True
        assert home.name == "home"
        assert home.modified is not None

    def test_empty_directory(self, tmp_path: Path) -> None:
        """Test loading an empty directory."""
        empty = tmp_path / "empty"
        empty.mkdir()

        directory = load(empty, TraversalMode.DEEP)

        assert directory.is_empty is True
        assert directory.get(0) is None

    def test_extra_keys(self, home_tree: Path) -> None:
        """Test requesting extra metadata for one load."""
        home = load(home_tree, extra_keys=[ResourceKey.LINK_COUNT], registry=ResourceKeyRegistry())

        assert all(child.attributes.link_count is not None for child in home)


@pytest.mark.integration
class TestRootErrors:
    """Test errors raised for an invalid root."""

    def test_missing(self, tmp_path: Path) -> None:
        """Test NotFoundError for a missing root."""
        with pytest.raises(NotFoundError):
            _ = load(tmp_path / "nonexistent", TraversalMode.SHALLOW)

    def test_regular_file(self, home_tree: Path) -> None:
        """Test NotDirectoryError for a file root."""
        with pytest.raises(NotDirectoryError):
            _ = load(home_tree / "a.txt", TraversalMode.DEEP)


@pytest.mark.integration
class TestSpecialEntries:
    """Test packages and links inside deep loads."""

    def test_package_stays_file(self, tmp_path: Path) -> None:
        """Test that a package directory is never expanded."""
        bundle = tmp_path / "Tool.app"
        (bundle / "Contents").mkdir(parents=True)
        _ = (bundle / "Contents" / "Info.plist").write_text("<plist/>")

        root = load(tmp_path, TraversalMode.DEEP)

        assert len(root) == 1
        entry = root[0]
        assert isinstance(entry, File)
        assert entry.is_package is True
        assert entry.display_name == "Tool"

    @requires_symlinks
    def test_symlink_to_ancestor_does_not_loop(self, tmp_path: Path) -> None:
        """Test that a link pointing back up the tree stays a File."""
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "up").symlink_to(tmp_path, target_is_directory=True)

        root = load(tmp_path, TraversalMode.DEEP)

        sub = root[0]
        assert isinstance(sub, Directory)
        link = sub[0]
        assert isinstance(link, File)
        assert link.is_symbolic_link is True

    @requires_symlinks
    def test_dangling_symlink_is_listed(self, tmp_path: Path) -> None:
        """Test that a broken link is still captured from its own metadata."""
        (tmp_path / "broken").symlink_to(tmp_path / "nowhere")

        root = load(tmp_path, TraversalMode.DEEP)

        assert [child.name for child in root] == ["broken"]
        assert root[0].is_symbolic_link is True

    @requires_permissions
    def test_unreadable_subdirectory_is_dropped(self, home_tree: Path) -> None:
        """Test that a subdirectory without read permission is left out."""
        locked = home_tree / "locked"
        locked.mkdir()
        _ = (locked / "secret.txt").write_text("s")
        locked.chmod(0o000)
        try:
            home = load(home_tree, TraversalMode.DEEP)
        finally:
            locked.chmod(0o755)

        assert names(home) == ["a.txt", "b.txt", "docs"]

    def test_out_of_range_timestamp_skips_only_that_entry(
        self,
        home_tree: Path,
        far_future_lstat: Callable[[Path], None],
    ) -> None:
        """Test that an entry with an unrepresentable date is dropped, its siblings kept."""
        far_future_lstat(home_tree / "b.txt")

        home = load(home_tree, TraversalMode.DEEP)

        assert names(home) == ["a.txt", "docs"]
        assert names(home.directories()[0]) == ["c.pdf"]


@pytest.mark.integration
class TestDeepNesting:
    """Load chains of nested directories deeper than the recursion limit."""

    DEPTH = 600

    def test_deep_chain_loads_every_level(self, tmp_path: Path) -> None:
        """Test that a long chain of single subdirectories is expanded to the bottom."""
        current = tmp_path
        for _ in range(self.DEPTH):
            current = current / "d"
            current.mkdir()
        _ = (current / "leaf.txt").write_bytes(b"leaf")

        root = load(tmp_path, TraversalMode.DEEP)

        level = root
        for _ in range(self.DEPTH):
            assert names(level) == ["d"]
            level = level.directories()[0]
        assert names(level) == ["leaf.txt"]
        assert level.files()[0].size == 4
        assert sum(1 for _ in walk(root)) == self.DEPTH + 2


@pytest.mark.integration
class TestConfiguredLoad:
    """Test loads driven by a configuration file."""

    def test_config_file_drives_builder(self, home_tree: Path, tmp_path: Path) -> None:
        """Test default mode, hidden entries and extra keys from YAML."""
        _ = (home_tree / ".cache").write_text("c")
        config_file = tmp_path / "filestuff.yaml"
        _ = config_file.write_text(
            "traversal:\n"
            "  default_mode: deep\n"
            "  skip_hidden: true\n"
            "metadata:\n"
            "  extra_keys: [is_hidden]\n"
            "logging:\n"
            "  enable_console: false\n"
        )

        builder = TreeBuilder.from_config(load_config(config_file))
        home = builder.build(home_tree)

        assert names(home) == ["a.txt", "b.txt", "docs"]
        assert [child.name for child in home.directories()] == ["docs"]
        assert all(child.attributes.is_hidden is False for child in home)

    def test_custom_package_extension(self, tmp_path: Path) -> None:
        """Test that configured suffixes mark directories as packages."""
        library = tmp_path / "Photos.library"
        library.mkdir()
        _ = (library / "db").write_text("x")
        config_file = tmp_path / "filestuff.yaml"
        _ = config_file.write_text("traversal:\n  package_extensions: [library]\n")

        builder = TreeBuilder.from_config(load_config(config_file))
        root = builder.build(tmp_path, TraversalMode.DEEP)

        entry = next(child for child in root if child.name == "Photos.library")
        assert isinstance(entry, File)
        assert entry.is_package is True

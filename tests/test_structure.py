"""Test project structure and directory layout."""

from __future__ import annotations

from pathlib import Path

# Get the project root directory
PROJECT_ROOT = Path(__file__).parent.parent


class TestProjectStructure:
    """Test that the project layout is in place."""

    def test_src_directory_structure(self) -> None:
        """Test that source packages exist with their __init__ modules."""
        expected_packages = [
            "src/filestuff",
            "src/filestuff/core",
            "src/filestuff/core/data",
            "src/filestuff/core/data/filesystem",
            "src/filestuff/types",
            "src/filestuff/utils",
        ]

        for package in expected_packages:
            full_path = PROJECT_ROOT / package
            assert full_path.is_dir(), f"{package} should be a directory"
            assert (full_path / "__init__.py").is_file(), f"{package} should be a package"

    def test_tests_directory_structure(self) -> None:
        """Test that test directories mirror the source layout."""
        expected_dirs = [
            "tests/fixtures",
            "tests/integration",
            "tests/property",
            "tests/unit/core",
            "tests/unit/core/data/filesystem",
            "tests/unit/types",
            "tests/unit/utils",
        ]

        for dir_path in expected_dirs:
            assert (PROJECT_ROOT / dir_path).is_dir(), f"Directory {dir_path} should exist"

    def test_configuration_files_exist(self) -> None:
        """Test that project configuration files exist."""
        for name in ("pyproject.toml", "noxfile.py", "DESIGN.md"):
            assert (PROJECT_ROOT / name).is_file(), f"{name} should exist"

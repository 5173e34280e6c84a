#!/usr/bin/env python3
"""Filesystem isolation validation script.

Enforces the architectural rule that the tree builder, classifier, registry,
containers, types and utils never touch the host filesystem directly. All
filesystem access goes through the ``FileSystem`` protocol, implemented
under core/data/filesystem/.

This script scans for:
- Calls to OS directory/metadata primitives (os.scandir, os.stat, ...)
- Path methods that hit the disk (iterdir, stat, exists, is_dir, ...)
- Imports of filestuff.core from types/ and utils/ (layering)

Exit codes:
    0: No violations found (clean)
    1: Violations detected (architectural rule broken)
"""

from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Final

# ANSI color codes for terminal output
RED: Final[str] = "\033[91m"
GREEN: Final[str] = "\033[92m"
YELLOW: Final[str] = "\033[93m"
RESET: Final[str] = "\033[0m"

# Directories that must not access the filesystem directly
PROTECTED_DIRS: Final[tuple[str, ...]] = ("core", "types", "utils")

# Paths (relative to the package) allowed to access the filesystem
ALLOWED_PATHS: Final[tuple[str, ...]] = (
    "core/data/filesystem",
    "core/config.py",
)

# Directories that must not depend on filestuff.core
LOWER_LAYERS: Final[tuple[str, ...]] = ("types", "utils")

OS_PRIMITIVE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\bos\.(?:scandir|stat|lstat|listdir|walk|access)\s*\("
)

PATH_IO_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\.(?:iterdir|exists|is_dir|is_file|is_symlink|lstat|rglob|glob)\s*\("
)

CORE_IMPORT_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\s*(?:from|import)\s+filestuff\.core\b")


def is_allowed(relative_path: Path) -> bool:
    """Check whether a package-relative path may access the filesystem.

    Args:
        relative_path: Path relative to src/filestuff

    Returns:
        True if the file is exempt from the filesystem access checks.
    """
    posix = relative_path.as_posix()
    return any(posix == allowed or posix.startswith(f"{allowed}/") for allowed in ALLOWED_PATHS)


def check_file(file_path: Path, relative_path: Path) -> list[tuple[int, str]]:
    """Check a single Python file for isolation violations.

    Args:
        file_path: Path to the Python file to check.
        relative_path: Same path relative to src/filestuff.

    Returns:
        List of (line_number, violation_description) tuples.
        Empty list if no violations found.
    """
    violations: list[tuple[int, str]] = []

    try:
        content = file_path.read_text(encoding="utf-8")
        lines = content.splitlines()
    except OSError as e:
        print(f"{YELLOW}Warning: Could not read {file_path}: {e}{RESET}", file=sys.stderr)
        return violations

    check_io = not is_allowed(relative_path)
    check_layering = relative_path.parts[0] in LOWER_LAYERS

    for line_num, line in enumerate(lines, start=1):
        if line.strip().startswith("#"):
            continue

        if check_io and OS_PRIMITIVE_PATTERN.search(line):
            violations.append((line_num, f"Direct OS filesystem call: {line.strip()}"))

        if check_io and PATH_IO_PATTERN.search(line):
            violations.append((line_num, f"Path method touching the disk: {line.strip()}"))

        if check_layering and CORE_IMPORT_PATTERN.search(line):
            violations.append((line_num, f"Lower layer imports filestuff.core: {line.strip()}"))

    return violations


def scan_directory(base_path: Path, protected_dir: str) -> dict[Path, list[tuple[int, str]]]:
    """Scan a protected directory for violations.

    Args:
        base_path: Root path of the filestuff package.
        protected_dir: Name of protected directory (core, types, or utils).

    Returns:
        Dictionary mapping file paths to their violations.
        Empty dict if no violations found.
    """
    dir_path = base_path / protected_dir
    if not dir_path.exists():
        print(
            f"{YELLOW}Warning: Protected directory {dir_path} does not exist{RESET}",
            file=sys.stderr,
        )
        return {}

    violations_by_file: dict[Path, list[tuple[int, str]]] = {}

    for py_file in dir_path.rglob("*.py"):
        if "__pycache__" in py_file.parts:
            continue

        file_violations = check_file(py_file, py_file.relative_to(base_path))
        if file_violations:
            violations_by_file[py_file] = file_violations

    return violations_by_file


def main() -> int:
    """Main entry point for the filesystem isolation check.

    Returns:
        Exit code: 0 if no violations, 1 if violations found.
    """
    script_dir = Path(__file__).parent
    project_root = script_dir.parent
    src_path = project_root / "src" / "filestuff"

    if not src_path.exists():
        print(f"{RED}Error: Could not find src/filestuff directory{RESET}", file=sys.stderr)
        return 1

    print("Checking filesystem isolation in core, types, and utils modules...")
    print(f"Scanning: {src_path}\n")

    all_violations: dict[Path, list[tuple[int, str]]] = {}

    for protected_dir in PROTECTED_DIRS:
        violations = scan_directory(src_path, protected_dir)
        all_violations.update(violations)

    if not all_violations:
        print(f"{GREEN}✓ No filesystem isolation violations found!{RESET}")
        print(f"{GREEN}✓ Filesystem access stays behind the FileSystem protocol{RESET}")
        return 0

    total_violations = sum(len(v) for v in all_violations.values())
    print(f"{RED}✗ Found {total_violations} filesystem isolation violations:{RESET}\n")

    for file_path, violations in sorted(all_violations.items()):
        try:
            rel_path = file_path.relative_to(project_root)
        except ValueError:
            rel_path = file_path

        print(f"{RED}{rel_path}{RESET}")
        for line_num, description in violations:
            print(f"  {line_num}: {description}")
        print()

    print(f"{RED}Filesystem isolation check failed!{RESET}")
    print(
        "\nThe builder, classifier, registry, containers, types and utils must not touch the disk."
        "\nMove filesystem access into core/data/filesystem/ behind the FileSystem protocol."
    )
    return 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Script to format all Python files in the project using black.

Pass --check to only report files black would change.
"""

import subprocess
import sys
from pathlib import Path

SKIP_DIRS = {"venv", ".venv", "build", "dist", ".git"}


def find_python_files(root_dir: Path) -> list[Path]:
    """Find all Python files under root_dir, skipping virtualenvs and build output."""
    python_files = []
    for file_path in root_dir.rglob("*.py"):
        if SKIP_DIRS.intersection(file_path.parts):
            continue
        python_files.append(file_path)
    return sorted(python_files)


def format_with_black(file_paths: list[Path], check: bool = False) -> bool:
    """Run black on the given files, returns True on success."""
    if not file_paths:
        print("No Python files found to format.")
        return True

    # black reads line-length and target version from pyproject.toml
    cmd = ["black"] + (["--check"] if check else []) + [str(f) for f in file_paths]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError:
        print("Error: black not found. Please install it using 'pip install -e .[dev]'.")
        return False

    if result.returncode == 0:
        print(f"Successfully {'checked' if check else 'formatted'} {len(file_paths)} file(s).")
        return True

    print("Check failed:" if check else "Formatting failed:")
    print(result.stderr)
    return False


def main() -> int:
    """Main function to run the formatting script."""
    # Start from project root (one level up from scripts directory)
    project_root = Path(__file__).parent.parent
    check = "--check" in sys.argv[1:]

    print(f"Searching for Python files in {project_root}...")
    python_files = find_python_files(project_root)
    print(f"Found {len(python_files)} Python file(s).")

    return 0 if format_with_black(python_files, check=check) else 1


if __name__ == "__main__":
    sys.exit(main())

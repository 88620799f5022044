"""Enumeration of candidate Go source files."""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path
from typing import List, Sequence

GO_SUFFIX = ".go"


def discover_go_files(
    target: Path,
    *,
    skip_marker: str = "fluent",
    exclude_paths: Sequence[str] = (),
    include_tests: bool = True,
) -> List[Path]:
    """Return the Go files to scan for ``target`` in file-name order.

    ``target`` may be a single file, which is returned as-is. For a directory,
    only direct children are considered; names containing ``skip_marker`` are
    treated as previously generated output and skipped.
    """
    target = target.expanduser()
    if not target.exists():
        raise FileNotFoundError(f"Input path not found: {target}")
    if target.is_file():
        return [target]

    files: List[Path] = []
    for entry in sorted(target.iterdir(), key=lambda path: path.name):
        if entry.is_dir() or entry.suffix != GO_SUFFIX:
            continue
        if skip_marker and skip_marker in entry.name:
            continue
        if not include_tests and entry.name.endswith("_test.go"):
            continue
        if any(fnmatchcase(entry.name, pattern) for pattern in exclude_paths):
            continue
        files.append(entry)
    return files


def package_name_from_path(path: Path) -> str:
    """Derive a package name from a directory path (``widgets.v2`` -> ``widgets``)."""
    path = path.expanduser().resolve()
    if path.is_file() or path.suffix == GO_SUFFIX:
        path = path.parent
    return path.name.split(".")[0] or "main"


__all__ = ["GO_SUFFIX", "discover_go_files", "package_name_from_path"]

"""Helper utilities for constructing temporary Go packages in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping


class GoPackageBuilder:
    """Utility for writing Go files into a throwaway package directory."""

    def __init__(self, tmp_path: Path, name: str = "widgets") -> None:
        self.root = tmp_path / name
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `name -> contents` entries into the package directory."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def path(self, name: str | None = None) -> Path:
        """Return the package directory, or one file inside it."""
        return self.root / name if name else self.root


__all__ = ["GoPackageBuilder"]

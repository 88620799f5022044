from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pytest

from fluentgen import resolver
from tests._fixtures.package_builder import GoPackageBuilder


@pytest.fixture
def go_package(tmp_path: Path) -> GoPackageBuilder:
    """Provide a reusable Go package builder rooted at the pytest tmp_path."""
    return GoPackageBuilder(tmp_path)


@pytest.fixture(autouse=True)
def no_go_toolchain(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the resolver's built-in checks instead of whatever ``go`` is installed."""

    def _missing_go(args: Sequence[str], *, cwd: Path | None = None) -> str:
        raise FileNotFoundError(2, "No such file or directory", "go")

    monkeypatch.setattr(resolver, "_run_go", _missing_go)

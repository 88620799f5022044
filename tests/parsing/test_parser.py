"""Tests for the tree-sitter Go parser wrapper."""

from __future__ import annotations

from pathlib import Path

import pytest

from fluentgen.errors import SourceSyntaxError
from fluentgen.parsing import GoSourceParser


def test_parse_reads_package_clause_and_imports() -> None:
    parsed = GoSourceParser().parse(
        'package widgets\n\nimport (\n\t"image/color"\n\ttm "time"\n\t_ "embed"\n)\n',
        "widgets.go",
    )

    assert parsed.package_name == "widgets"
    assert parsed.path == Path("widgets.go")
    assert parsed.imports() == [(None, "image/color"), ("tm", "time"), ("_", "embed")]


def test_parse_accepts_bytes_without_package_clause() -> None:
    parsed = GoSourceParser().parse(b"type ButtonStyle struct {\n\tColor string\n}\n")

    assert parsed.package_name is None
    assert parsed.path == Path("<source>")


def test_parse_rejects_malformed_source_with_location() -> None:
    source = "package widgets\n\ntype ButtonStyle struct {\n\tColor string\n"

    with pytest.raises(SourceSyntaxError) as excinfo:
        GoSourceParser().parse(source, "broken.go")

    error = excinfo.value
    assert error.path == "broken.go"
    assert error.line >= 1
    assert str(error).startswith(f"broken.go:{error.line}:{error.column}: ")


def test_parse_file_reads_from_disk(tmp_path: Path) -> None:
    path = tmp_path / "styles.go"
    path.write_text("package styles\n", encoding="utf-8")

    parsed = GoSourceParser().parse_file(path)

    assert parsed.path == path
    assert parsed.package_name == "styles"

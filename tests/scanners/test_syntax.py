"""Tests for the syntactic declaration scanner."""

from __future__ import annotations

from pathlib import Path

import pytest

from fluentgen.errors import SourceSyntaxError
from fluentgen.scanners import SyntaxScanner
from tests._fixtures.package_builder import GoPackageBuilder

_SOURCE = """
package styles

import "example.com/bar"

type Button struct {
	Color string
}

// ButtonStyle styles buttons.
type ButtonStyle struct {
	// Color of the button.
	Color string
	Icon  *bar.Baz
	Tags  []string
	hidden int
	bar.Embedded
}

type (
	LabelStyle struct {
		Text string
	}
	ThemeStyle interface {
		Apply()
	}
	SizeStyle int
	AliasStyle = ButtonStyle
)

type ListStyle[T any] struct {
	Items T
}
"""


def test_scan_source_yields_matching_structs_in_declaration_order() -> None:
    scanned = SyntaxScanner().scan_source(_SOURCE, "styles.go")

    assert scanned.package_name == "styles"
    assert [candidate.name for candidate in scanned.candidates] == ["ButtonStyle", "LabelStyle"]


def test_scan_source_describes_every_declared_field() -> None:
    scanned = SyntaxScanner().scan_source(_SOURCE, "styles.go")
    fields = {field.identifier: field for field in scanned.candidates[0].fields}

    assert fields["Color"].type_signature == "string"
    assert fields["Color"].doc_comment == "Color of the button."
    assert fields["Color"].is_exported
    assert fields["Icon"].type_signature == "*bar.Baz"
    assert fields["Tags"].type_signature is None
    assert fields["Tags"].type_text == "[]string"
    assert not fields["hidden"].is_exported
    assert fields["Embedded"].is_embedded
    assert scanned.candidates[0].line == 11


def test_scan_source_reports_skipped_generic_structs() -> None:
    scanned = SyntaxScanner().scan_source(_SOURCE, "styles.go")

    assert [diagnostic.type_name for diagnostic in scanned.diagnostics] == ["ListStyle"]


def test_suffix_is_configurable_and_case_sensitive() -> None:
    source = "package p\n\ntype ButtonTheme struct {\n\tColor string\n}\n\ntype Buttontheme struct {\n\tColor string\n}\n"

    scanned = SyntaxScanner("Theme").scan_source(source)

    assert [candidate.name for candidate in scanned.candidates] == ["ButtonTheme"]


def test_scan_source_raises_on_malformed_input() -> None:
    with pytest.raises(SourceSyntaxError):
        SyntaxScanner().scan_source("package p\n\ntype ButtonStyle struct {\n")


def test_scan_directory_isolates_failing_files(go_package: GoPackageBuilder) -> None:
    go_package.write(
        {
            "a.go": "package widgets\n\ntype AStyle struct {\n\tColor string\n}\n",
            "b.go": "package widgets\n\ntype BStyle struct {\n",
            "c.go": "package widgets\n\ntype CStyle struct {\n\tColor string\n}\n",
            "a_fluent.go": "package widgets\n",
        }
    )

    scanned = SyntaxScanner(workers=2).scan(go_package.path())

    assert [item.path.name for item in scanned] == ["a.go", "b.go", "c.go"]
    assert isinstance(scanned[1].error, SourceSyntaxError)
    assert scanned[1].candidates == []
    assert [item.candidates[0].name for item in (scanned[0], scanned[2])] == ["AStyle", "CStyle"]


def test_scan_single_file(tmp_path: Path) -> None:
    path = tmp_path / "one.go"
    path.write_text("package one\n\ntype OneStyle struct {\n\tColor string\n}\n", encoding="utf-8")

    scanned = SyntaxScanner().scan(path)

    assert len(scanned) == 1
    assert scanned[0].candidates[0].source_file == path

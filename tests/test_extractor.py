from __future__ import annotations

from pathlib import Path

import pytest

from fluentgen.errors import UnsupportedFieldTypeError
from fluentgen.extractor import FieldExtractor, argument_name
from fluentgen.models import CandidateType, Diagnostic, FieldSpec


def _candidate(*fields: FieldSpec) -> CandidateType:
    return CandidateType(name="ButtonStyle", fields=tuple(fields), source_file=Path("button.go"))


def _field(name: str, signature: str | None, **kwargs: object) -> FieldSpec:
    return FieldSpec(
        identifier=name,
        type_signature=signature,
        is_exported=name[:1].isupper(),
        type_text=kwargs.pop("type_text", signature or ""),  # type: ignore[arg-type]
        **kwargs,  # type: ignore[arg-type]
    )


def test_extract_keeps_exported_direct_fields_in_order() -> None:
    candidate = _candidate(
        _field("Color", "string"),
        _field("hidden", "int"),
        FieldSpec("Base", None, is_embedded=True, is_exported=True, type_text="Base"),
        _field("Icon", "*bar.Baz"),
    )

    bound = FieldExtractor().extract(candidate)

    assert [(field.spec.identifier, field.type_signature, field.argument) for field in bound] == [
        ("Color", "string", "s"),
        ("Icon", "*bar.Baz", "b"),
    ]


def test_unsupported_fields_are_skipped_with_a_diagnostic() -> None:
    candidate = _candidate(_field("Tags", None, type_text="[]string"), _field("Color", "string"))
    diagnostics: list[Diagnostic] = []

    bound = FieldExtractor().extract(candidate, diagnostics)

    assert [field.spec.identifier for field in bound] == ["Color"]
    assert len(diagnostics) == 1
    assert diagnostics[0].field_name == "Tags"
    assert str(diagnostics[0]) == "button.go: ButtonStyle.Tags: unsupported field type '[]string'; field skipped"


def test_unsupported_fields_fail_under_the_error_policy() -> None:
    candidate = _candidate(_field("Tags", None, type_text="[]string"))

    with pytest.raises(UnsupportedFieldTypeError) as excinfo:
        FieldExtractor(unsupported_types="error").extract(candidate)

    assert excinfo.value.type_name == "ButtonStyle"
    assert excinfo.value.field_name == "Tags"


def test_unknown_policy_is_rejected() -> None:
    with pytest.raises(ValueError):
        FieldExtractor(unsupported_types="ignore")


@pytest.mark.parametrize(
    ("signature", "receiver", "expected"),
    [
        ("string", "style", "s"),
        ("*bar.Baz", "style", "b"),
        ("Border", "style", "b"),
        ("[]int", "style", "i"),
        ("map[string]int", "style", "m"),
        ("Style", "s", "v"),
        ("Value", "v", "value"),
    ],
)
def test_argument_name(signature: str, receiver: str, expected: str) -> None:
    assert argument_name(signature, receiver) == expected


def test_skip_diagnostics_point_at_the_declaration_line() -> None:
    candidate = CandidateType(
        name="ButtonStyle",
        fields=(_field("Tags", None, type_text="[]string"),),
        source_file=Path("button.go"),
        line=12,
    )
    diagnostics: list[Diagnostic] = []

    FieldExtractor().extract(candidate, diagnostics)

    assert str(diagnostics[0]).startswith("button.go:12: ButtonStyle.Tags: ")

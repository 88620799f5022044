from __future__ import annotations

from pathlib import Path

import pytest

from fluentgen.errors import TemplateRenderError
from fluentgen.extractor import BoundField
from fluentgen.models import CandidateType, FieldSpec
from fluentgen.synthesizer import MethodSynthesizer, doc_lines

_CANDIDATE = CandidateType(name="ButtonStyle", fields=(), source_file=Path("button.go"))


def _bound(name: str, signature: str, argument: str, doc: str = "") -> BoundField:
    spec = FieldSpec(name, signature, doc_comment=doc, is_exported=True, type_text=signature)
    return BoundField(spec=spec, type_signature=signature, argument=argument)


def test_render_produces_a_documented_setter() -> None:
    fragment = MethodSynthesizer().render(
        _CANDIDATE, _bound("Color", "string", "s", "Color of the button.")
    )

    assert fragment.method_name == "WithColor"
    assert fragment.struct_type == "ButtonStyle"
    assert fragment.text == (
        "// WithColor of the button.\n"
        "func (style ButtonStyle) WithColor(s string) ButtonStyle {\n"
        "\tstyle.Color = s\n"
        "\treturn style\n"
        "}\n\n"
    )


def test_render_without_doc_starts_with_the_signature() -> None:
    fragment = MethodSynthesizer("b").render(_CANDIDATE, _bound("Icon", "*bar.Baz", "v"))

    assert fragment.text.startswith("func (b ButtonStyle) WithIcon(v *bar.Baz) ButtonStyle {\n")
    assert fragment.text.endswith("}\n\n")


def test_synthesize_keeps_field_order() -> None:
    fragments = MethodSynthesizer().synthesize(
        _CANDIDATE, [_bound("Width", "int", "i"), _bound("Color", "string", "s")]
    )

    assert [fragment.method_name for fragment in fragments] == ["WithWidth", "WithColor"]


def test_doc_lines_replace_the_first_word_and_keep_blank_lines() -> None:
    assert doc_lines("Color is the\nbackground.\n\nDefaults to red.", "WithColor") == [
        "// WithColor is the",
        "// background.",
        "//",
        "// Defaults to red.",
    ]
    assert doc_lines("", "WithColor") == []


def test_invalid_receiver_is_rejected() -> None:
    with pytest.raises(ValueError):
        MethodSynthesizer("func")


def test_custom_templates_take_precedence(tmp_path: Path) -> None:
    (tmp_path / "method.go.j2").write_text(
        "func ({{ receiver }} *{{ struct_type }}) {{ method_name }}({{ argument }} {{ field_type }}) {}\n",
        encoding="utf-8",
    )

    fragment = MethodSynthesizer(templates_dir=tmp_path).render(_CANDIDATE, _bound("Color", "string", "s"))

    assert fragment.text == "func (style *ButtonStyle) WithColor(s string) {}\n\n"


def test_broken_template_is_reported_on_load(tmp_path: Path) -> None:
    (tmp_path / "method.go.j2").write_text("{% for line in %}", encoding="utf-8")

    with pytest.raises(TemplateRenderError, match="cannot load method.go.j2"):
        MethodSynthesizer(templates_dir=tmp_path)


def test_unknown_template_variable_fails_the_render(tmp_path: Path) -> None:
    (tmp_path / "method.go.j2").write_text("func {{ missing }}\n", encoding="utf-8")
    synthesizer = MethodSynthesizer(templates_dir=tmp_path)

    with pytest.raises(TemplateRenderError) as excinfo:
        synthesizer.render(_CANDIDATE, _bound("Color", "string", "s"))

    assert excinfo.value.type_name == "ButtonStyle"
    assert excinfo.value.field_name == "Color"

"""Tests for doc comment association and comment text extraction."""

from __future__ import annotations

from typing import Dict

from fluentgen.parsing import GoSourceParser, doc_comment


def _field_docs(body: str) -> Dict[str, str]:
    source = f"package styles\n\ntype ButtonStyle struct {body}\n"
    parsed = GoSourceParser().parse(source)
    docs: Dict[str, str] = {}
    spec = next(
        node
        for node in parsed.root.named_children
        if node.type == "type_declaration"
    ).named_children[0]
    declarations = spec.child_by_field_name("type").named_children[0]
    for declaration in declarations.named_children:
        if declaration.type != "field_declaration":
            continue
        for name in declaration.children_by_field_name("name"):
            docs[parsed.text(name)] = doc_comment(declaration, parsed.source)
    return docs


def test_leading_line_comment_is_the_field_doc() -> None:
    docs = _field_docs("{\n\t// Color of the button.\n\tColor string\n}")

    assert docs == {"Color": "Color of the button."}


def test_multi_line_doc_keeps_line_breaks() -> None:
    docs = _field_docs(
        "{\n\t// Color of the border.\n\t// Accepts any CSS color.\n\tColor string\n}"
    )

    assert docs["Color"] == "Color of the border.\nAccepts any CSS color."


def test_block_comment_doc_is_unwrapped() -> None:
    docs = _field_docs("{\n\t/* Width in pixels. */\n\tWidth int\n}")

    assert docs["Width"] == "Width in pixels."


def test_trailing_comment_does_not_document_next_field() -> None:
    docs = _field_docs("{\n\tColor string // trailing note\n\tSize int\n}")

    assert docs == {"Color": "", "Size": ""}


def test_comment_separated_by_blank_line_is_not_a_doc() -> None:
    docs = _field_docs("{\n\t// Detached note.\n\n\tColor string\n}")

    assert docs["Color"] == ""


def test_comment_on_opening_brace_line_is_not_a_doc() -> None:
    docs = _field_docs("{ // Color of the button.\n\tColor string\n}")

    assert docs["Color"] == ""


def test_directives_are_dropped_from_doc_text() -> None:
    docs = _field_docs("{\n\t//lint:ignore U1000 kept for parity\n\t// Color of the button.\n\tColor string\n}")

    assert docs["Color"] == "Color of the button."


def test_shared_declaration_shares_doc() -> None:
    docs = _field_docs("{\n\t// Margins in pixels.\n\tTop, Bottom int\n}")

    assert docs == {"Top": "Margins in pixels.", "Bottom": "Margins in pixels."}

"""Struct field and type declaration enumeration over Go syntax trees."""

from __future__ import annotations

from typing import Callable, Iterator, List, Optional, Tuple

from tree_sitter import Node

from ..models import FieldSpec
from .comments import doc_comment
from .parser import ParsedFile, node_text

TypeRender = Callable[[Node], Optional[str]]


def is_exported(name: str) -> bool:
    """Go visibility rule: exported identifiers start with an upper-case letter."""
    return name[:1].isupper()


def top_level_type_specs(parsed: ParsedFile) -> Iterator[Node]:
    """Yield every top-level ``type_spec`` and ``type_alias`` in declaration order."""
    for child in parsed.root.named_children:
        if child.type != "type_declaration":
            continue
        for spec in child.named_children:
            if spec.type in {"type_spec", "type_alias"}:
                yield spec


def struct_field_specs(
    struct_node: Node, source_bytes: bytes, render: TypeRender
) -> Tuple[FieldSpec, ...]:
    """Describe each directly declared field of ``struct_node`` in declaration order.

    Declarations naming several fields (``A, B int``) produce one spec per name,
    all sharing the declaration's doc comment. Embedded fields are reported
    under their type name with ``is_embedded`` set.
    """
    declarations = _field_declaration_list(struct_node)
    if declarations is None:
        return ()

    specs: List[FieldSpec] = []
    for declaration in declarations.named_children:
        if declaration.type != "field_declaration":
            continue
        type_node = declaration.child_by_field_name("type")
        if type_node is None:
            continue
        type_text = node_text(type_node, source_bytes)
        names = declaration.children_by_field_name("name")
        doc = doc_comment(declaration, source_bytes)
        if not names:
            embedded = _embedded_name(type_node, source_bytes)
            specs.append(
                FieldSpec(
                    identifier=embedded,
                    type_signature=None,
                    doc_comment=doc,
                    is_embedded=True,
                    is_exported=is_exported(embedded),
                    type_text=type_text,
                )
            )
            continue
        signature = render(type_node)
        for name_node in names:
            name = node_text(name_node, source_bytes)
            specs.append(
                FieldSpec(
                    identifier=name,
                    type_signature=signature,
                    doc_comment=doc,
                    is_embedded=False,
                    is_exported=is_exported(name),
                    type_text=type_text,
                )
            )
    return tuple(specs)


def _field_declaration_list(struct_node: Node) -> Optional[Node]:
    for child in struct_node.named_children:
        if child.type == "field_declaration_list":
            return child
    return None


def _embedded_name(type_node: Node, source_bytes: bytes) -> str:
    if type_node.type == "qualified_type":
        name = type_node.child_by_field_name("name")
        return node_text(name, source_bytes) if name is not None else ""
    if type_node.type == "generic_type":
        base = type_node.child_by_field_name("type")
        return _embedded_name(base, source_bytes) if base is not None else ""
    return node_text(type_node, source_bytes).lstrip("*")


__all__ = ["TypeRender", "is_exported", "struct_field_specs", "top_level_type_specs"]

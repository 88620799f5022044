"""Go source parsing helpers built on tree-sitter."""

from __future__ import annotations

from .comments import comment_text, doc_comment, doc_comment_nodes
from .fields import is_exported, struct_field_specs, top_level_type_specs
from .parser import GO_LANGUAGE, GoSourceParser, ParsedFile, node_text
from .types import PREDECLARED_TYPES, TypeRenderer, pointee, render_baseline_type

__all__ = [
    "GO_LANGUAGE",
    "GoSourceParser",
    "PREDECLARED_TYPES",
    "ParsedFile",
    "TypeRenderer",
    "comment_text",
    "doc_comment",
    "doc_comment_nodes",
    "is_exported",
    "node_text",
    "pointee",
    "render_baseline_type",
    "struct_field_specs",
    "top_level_type_specs",
]

"""Rendering of Go type expressions into reusable source text."""

from __future__ import annotations

from typing import List, Optional

from tree_sitter import Node

from .parser import node_text

PREDECLARED_TYPES = frozenset(
    {
        "any",
        "bool",
        "byte",
        "comparable",
        "complex64",
        "complex128",
        "error",
        "float32",
        "float64",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "rune",
        "string",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
    }
)


def pointee(node: Node) -> Optional[Node]:
    """Return the type a ``pointer_type`` node points at."""
    named = node.named_children
    return named[0] if named else None


def render_baseline_type(node: Node, source_bytes: bytes) -> Optional[str]:
    """Render a field type using the syntactic rules.

    A single leading pointer is kept as ``*``; the remaining type must be a bare
    identifier or a ``pkg.Name`` selector. Any other shape returns ``None``.
    """
    prefix = ""
    if node.type == "pointer_type":
        inner = pointee(node)
        if inner is None:
            return None
        prefix, node = "*", inner
    if node.type == "type_identifier":
        return prefix + node_text(node, source_bytes)
    if node.type == "qualified_type":
        package = node.child_by_field_name("package")
        name = node.child_by_field_name("name")
        if package is None or name is None:
            return None
        return f"{prefix}{node_text(package, source_bytes)}.{node_text(name, source_bytes)}"
    return None


class TypeRenderer:
    """Renders any Go type expression in canonical gofmt spacing.

    Subclasses hook :meth:`identifier` and :meth:`qualified` to validate or
    rewrite names. ``render`` returns ``None`` for shapes it does not know.
    """

    def __init__(self, source_bytes: bytes) -> None:
        self.source_bytes = source_bytes

    def text(self, node: Node) -> str:
        return node_text(node, self.source_bytes)

    def identifier(self, node: Node) -> str:
        return self.text(node)

    def qualified(self, package: str, name: str, node: Node) -> str:
        return f"{package}.{name}"

    def render(self, node: Optional[Node]) -> Optional[str]:
        if node is None:
            return None
        kind = node.type
        if kind == "type_identifier":
            return self.identifier(node)
        if kind == "qualified_type":
            package = node.child_by_field_name("package")
            name = node.child_by_field_name("name")
            if package is None or name is None:
                return None
            return self.qualified(self.text(package), self.text(name), node)
        if kind == "pointer_type":
            return self._prefixed("*", pointee(node))
        if kind == "slice_type":
            return self._prefixed("[]", node.child_by_field_name("element"))
        if kind == "array_type":
            length = node.child_by_field_name("length")
            if length is None:
                return None
            return self._prefixed(f"[{_squash(self.text(length))}]", node.child_by_field_name("element"))
        if kind == "implicit_length_array_type":
            return self._prefixed("[...]", node.child_by_field_name("element"))
        if kind == "map_type":
            key = self.render(node.child_by_field_name("key"))
            value = self.render(node.child_by_field_name("value"))
            if key is None or value is None:
                return None
            return f"map[{key}]{value}"
        if kind == "channel_type":
            return self._channel(node)
        if kind == "generic_type":
            return self._generic(node)
        if kind == "parenthesized_type":
            inner = self.render(node.named_children[0] if node.named_children else None)
            return f"({inner})" if inner is not None else None
        if kind == "negated_type":
            return self._prefixed("~", node.named_children[0] if node.named_children else None)
        if kind == "type_elem":
            parts = [self.render(child) for child in node.named_children]
            if not parts or any(part is None for part in parts):
                return None
            return " | ".join(parts)  # type: ignore[arg-type]
        if kind == "function_type":
            return self._function(node)
        if kind in {"struct_type", "interface_type"}:
            return _squash(self.text(node))
        return None

    def _prefixed(self, prefix: str, node: Optional[Node]) -> Optional[str]:
        inner = self.render(node)
        return prefix + inner if inner is not None else None

    def _channel(self, node: Node) -> Optional[str]:
        value = self.render(node.child_by_field_name("value"))
        if value is None:
            return None
        tokens = [child.type for child in node.children if not child.is_named]
        if tokens[:2] == ["<-", "chan"]:
            return f"<-chan {value}"
        if tokens[:2] == ["chan", "<-"]:
            return f"chan<- {value}"
        return f"chan {value}"

    def _generic(self, node: Node) -> Optional[str]:
        base = self.render(node.child_by_field_name("type"))
        arguments = node.child_by_field_name("type_arguments")
        if base is None or arguments is None:
            return None
        rendered = [self.render(child) for child in arguments.named_children]
        if not rendered or any(part is None for part in rendered):
            return None
        return f"{base}[{', '.join(rendered)}]"  # type: ignore[arg-type]

    def _function(self, node: Node) -> Optional[str]:
        parameters = self._parameters(node.child_by_field_name("parameters"))
        if parameters is None:
            return None
        result_node = node.child_by_field_name("result")
        if result_node is None:
            return f"func{parameters}"
        if result_node.type == "parameter_list":
            result = self._parameters(result_node)
        else:
            result = self.render(result_node)
        if result is None:
            return None
        return f"func{parameters} {result}"

    def _parameters(self, node: Optional[Node]) -> Optional[str]:
        if node is None:
            return None
        parts: List[str] = []
        for child in node.named_children:
            if child.type == "comment":
                continue
            type_text = self.render(child.child_by_field_name("type"))
            if type_text is None:
                return None
            if child.type == "variadic_parameter_declaration":
                type_text = f"...{type_text}"
            names = [self.text(name) for name in child.children_by_field_name("name")]
            parts.append(f"{', '.join(names)} {type_text}" if names else type_text)
        return f"({', '.join(parts)})"


def _squash(text: str) -> str:
    return " ".join(text.split())


__all__ = ["PREDECLARED_TYPES", "TypeRenderer", "pointee", "render_baseline_type"]

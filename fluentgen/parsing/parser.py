"""Tree-sitter powered Go source parser."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

import tree_sitter_go
from tree_sitter import Language, Node, Parser, Tree

from ..errors import SourceSyntaxError

GO_LANGUAGE = Language(tree_sitter_go.language())


@dataclass
class ParsedFile:
    """A parsed Go compilation unit."""

    path: Path
    source: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Optional[Node]) -> str:
        if node is None:
            return ""
        return node_text(node, self.source)

    @property
    def package_name(self) -> Optional[str]:
        for child in self.root.named_children:
            if child.type == "package_clause":
                for part in child.named_children:
                    if part.type == "package_identifier":
                        return self.text(part)
        return None

    def import_specs(self) -> List[Node]:
        """Return every ``import_spec`` node in source order."""
        return [
            spec
            for child in self.root.named_children
            if child.type == "import_declaration"
            for spec in _iter_import_specs(child)
        ]

    def imports(self) -> List[Tuple[Optional[str], str]]:
        """Return ``(explicit name, import path)`` pairs in source order."""
        specs: List[Tuple[Optional[str], str]] = []
        for spec in self.import_specs():
            name_node = spec.child_by_field_name("name")
            path_node = spec.child_by_field_name("path")
            if path_node is None:
                continue
            name = self.text(name_node) if name_node is not None else None
            specs.append((name, self.text(path_node).strip("\"`")))
        return specs


class GoSourceParser:
    """Parses Go source into tree-sitter syntax trees, rejecting malformed input."""

    def parse(self, source: str | bytes, path: Path | str | None = None) -> ParsedFile:
        source_bytes = source.encode("utf-8") if isinstance(source, str) else source
        file_path = Path(path) if path is not None else Path("<source>")
        # Parser objects are not shared so files can be parsed from worker threads.
        tree = Parser(GO_LANGUAGE).parse(source_bytes)
        if tree.root_node.has_error:
            node = _first_error(tree.root_node)
            raise _syntax_error(node, source_bytes, file_path)
        return ParsedFile(path=file_path, source=source_bytes, tree=tree)

    def parse_file(self, path: Path) -> ParsedFile:
        return self.parse(path.read_bytes(), path)


def node_text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _iter_import_specs(declaration: Node) -> Iterator[Node]:
    for child in declaration.named_children:
        if child.type == "import_spec":
            yield child
        elif child.type == "import_spec_list":
            for spec in child.named_children:
                if spec.type == "import_spec":
                    yield spec


def _first_error(node: Node) -> Node:
    for child in node.children:
        if child.type == "ERROR" or child.is_missing:
            return child
        if child.has_error:
            return _first_error(child)
    return node


def _syntax_error(node: Node, source_bytes: bytes, path: Path) -> SourceSyntaxError:
    line = node.start_point[0] + 1
    column = node.start_point[1] + 1
    if node.is_missing:
        message = f"expected {node.type}"
    else:
        snippet = node_text(node, source_bytes).strip().splitlines()
        found = snippet[0][:40] if snippet else ""
        message = f"unexpected {found!r}" if found else "syntax error"
    return SourceSyntaxError(message, path=path, line=line, column=column)


__all__ = ["GO_LANGUAGE", "GoSourceParser", "ParsedFile", "node_text"]

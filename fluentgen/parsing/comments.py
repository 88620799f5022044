"""Comment grouping and doc-comment text extraction for Go syntax trees."""

from __future__ import annotations

import re
from typing import List, Sequence

from tree_sitter import Node

from .parser import node_text

_DIRECTIVE = re.compile(r"^[a-z0-9]+:[a-z0-9]")
_DIRECTIVE_PREFIXES = ("line ", "extern ", "export ")
_TERMINATORS = {"\n", "\r\n", "\0"}


def doc_comment_nodes(node: Node) -> List[Node]:
    """Return the comment group documenting ``node``.

    A doc comment is the run of line-adjacent comments that ends on the line
    directly above the declaration. Comments sharing a line with the token
    before them are that token's trailing comments and are excluded.
    """
    group: List[Node] = []
    expected_row = node.start_point[0] - 1
    sibling = _previous(node)
    while sibling is not None and sibling.type == "comment":
        if sibling.end_point[0] < expected_row:
            break
        if sibling.end_point[0] > expected_row and not group:
            # Ends on the declaration's own line, so it cannot lead it.
            return []
        group.insert(0, sibling)
        expected_row = sibling.start_point[0] - 1
        sibling = _previous(sibling)

    if not group:
        return []
    if sibling is not None:
        token_row = sibling.end_point[0]
        group = [comment for comment in group if comment.start_point[0] != token_row]
    if not group or group[-1].end_point[0] != node.start_point[0] - 1:
        return []
    return group


def comment_text(comments: Sequence[Node], source_bytes: bytes) -> str:
    """Return the text of a comment group with comment markers removed."""
    lines: List[str] = []
    for comment in comments:
        raw = node_text(comment, source_bytes)
        if raw.startswith("//"):
            body = raw[2:]
            if body.startswith(" "):
                body = body[1:]
            elif _is_directive(body):
                continue
        elif raw.startswith("/*"):
            body = raw[2:-2]
        else:
            body = raw
        lines.extend(line.rstrip() for line in body.split("\n"))

    # Drop leading blank lines and collapse interior runs of blank lines.
    kept: List[str] = []
    for line in lines:
        if line or (kept and kept[-1]):
            kept.append(line)
    while kept and not kept[-1]:
        kept.pop()
    return "\n".join(kept)


def doc_comment(node: Node, source_bytes: bytes) -> str:
    """Return the trimmed doc comment text attached to ``node``, or ``""``."""
    return comment_text(doc_comment_nodes(node), source_bytes).strip()


def _previous(node: Node) -> Node | None:
    # Newline terminators span into the next line and are not tokens of their own.
    sibling = node.prev_sibling
    while sibling is not None and sibling.type in _TERMINATORS:
        sibling = sibling.prev_sibling
    return sibling


def _is_directive(body: str) -> bool:
    if body.startswith(_DIRECTIVE_PREFIXES):
        return True
    return bool(_DIRECTIVE.match(body))


__all__ = ["comment_text", "doc_comment", "doc_comment_nodes"]

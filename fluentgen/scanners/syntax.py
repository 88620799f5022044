"""Syntactic declaration scanner: walks one parsed file at a time."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Sequence

from ..discovery import discover_go_files
from ..errors import FluentGenError, SourceSyntaxError
from ..logging import get_logger
from ..models import CandidateType, Diagnostic, ScannedFile
from ..parsing import (
    GoSourceParser,
    ParsedFile,
    render_baseline_type,
    struct_field_specs,
    top_level_type_specs,
)
from .base import DeclarationScanner

logger = get_logger("scanners.syntax")


class SyntaxScanner(DeclarationScanner):
    """Finds candidate structs from the syntax tree alone, file by file.

    Field types are rendered with the baseline rules, so only named and
    package-qualified types (optionally behind one pointer) get a signature.
    A malformed file fails on its own without affecting its siblings.
    """

    name = "syntax"

    def __init__(
        self,
        suffix: str = "Style",
        *,
        workers: int = 4,
        skip_marker: str = "fluent",
        exclude_paths: Sequence[str] = (),
        parser: GoSourceParser | None = None,
    ) -> None:
        super().__init__(
            suffix, workers=workers, skip_marker=skip_marker, exclude_paths=exclude_paths
        )
        self.parser = parser or GoSourceParser()

    def scan(self, target: Path) -> List[ScannedFile]:
        paths = discover_go_files(
            target, skip_marker=self.skip_marker, exclude_paths=self.exclude_paths
        )
        logger.debug("Scanning %d file(s) under %s", len(paths), target)
        if len(paths) <= 1 or self.workers == 1:
            return [self._scan_path(path) for path in paths]
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            # map() yields in submission order, which keeps file order intact.
            return list(pool.map(self._scan_path, paths))

    def scan_source(self, source: str | bytes, path: Path | str | None = None) -> ScannedFile:
        """Scan in-memory source text. Raises :class:`SourceSyntaxError` on bad input."""
        return self.scan_parsed(self.parser.parse(source, path))

    def scan_parsed(self, parsed: ParsedFile) -> ScannedFile:
        result = ScannedFile(path=parsed.path, package_name=parsed.package_name)
        for spec in top_level_type_specs(parsed):
            if spec.type != "type_spec":
                continue
            name = parsed.text(spec.child_by_field_name("name"))
            if not self.matches(name):
                continue
            type_node = spec.child_by_field_name("type")
            if type_node is None or type_node.type != "struct_type":
                logger.debug("Skipping %s: not a struct type", name)
                continue
            if spec.child_by_field_name("type_parameters") is not None:
                result.diagnostics.append(
                    Diagnostic(
                        "generic struct types are not supported; skipped",
                        path=parsed.path,
                        type_name=name,
                        severity="info",
                        line=spec.start_point[0] + 1,
                    )
                )
                continue
            fields = struct_field_specs(
                type_node,
                parsed.source,
                lambda node: render_baseline_type(node, parsed.source),
            )
            result.candidates.append(
                CandidateType(
                    name=name,
                    fields=fields,
                    source_file=parsed.path,
                    line=spec.start_point[0] + 1,
                )
            )
        return result

    def _scan_path(self, path: Path) -> ScannedFile:
        try:
            source = path.read_bytes()
        except OSError as exc:
            logger.error("Failed to read %s: %s", path, exc)
            return ScannedFile(
                path=path,
                package_name=None,
                error=FluentGenError(f"reading file: {exc.strerror or exc}", path=path),
            )
        try:
            return self.scan_source(source, path)
        except SourceSyntaxError as exc:
            logger.error("%s", exc)
            return ScannedFile(path=path, package_name=None, error=exc)


__all__ = ["SyntaxScanner"]

"""Type-resolved declaration scanner: works on a whole loaded package."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence

from ..logging import get_logger
from ..models import CandidateType, Diagnostic, ScannedFile
from ..resolver import PackageResolver
from .base import DeclarationScanner

logger = get_logger("scanners.resolved")


class ResolvedScanner(DeclarationScanner):
    """Finds candidate structs among a resolved package's declarations.

    The package must resolve completely; a :class:`PackageResolutionError` from
    the resolver propagates so that nothing is generated for a partially typed
    package. Named types are followed to their underlying struct, and every
    field type is rendered in canonical form.
    """

    name = "resolved"

    def __init__(
        self,
        suffix: str = "Style",
        *,
        workers: int = 4,
        skip_marker: str = "fluent",
        exclude_paths: Sequence[str] = (),
        resolver: PackageResolver | None = None,
    ) -> None:
        super().__init__(
            suffix, workers=workers, skip_marker=skip_marker, exclude_paths=exclude_paths
        )
        self.resolver = resolver or PackageResolver(
            skip_marker=skip_marker, exclude_paths=exclude_paths
        )

    def scan(self, target: Path) -> List[ScannedFile]:
        package = self.resolver.load(target)
        by_file: Dict[Path, ScannedFile] = {
            parsed.path: ScannedFile(path=parsed.path, package_name=package.name)
            for parsed in package.files
        }
        for definition in package.definitions.values():
            if definition.is_alias or not self.matches(definition.name):
                continue
            scanned = by_file[definition.source_file]
            base = package.underlying(definition)
            if base is None or base.is_alias or base.type_node.type != "struct_type":
                logger.debug("Skipping %s: underlying type is not a struct", definition.name)
                continue
            if definition.is_generic or base.is_generic:
                scanned.diagnostics.append(
                    Diagnostic(
                        "generic struct types are not supported; skipped",
                        path=definition.source_file,
                        type_name=definition.name,
                        severity="info",
                        line=definition.line,
                    )
                )
                continue
            scanned.candidates.append(
                CandidateType(
                    name=definition.name,
                    fields=package.field_specs(base),
                    source_file=definition.source_file,
                    line=definition.line,
                )
            )
        return list(by_file.values())


__all__ = ["ResolvedScanner"]

"""Pipeline wiring: scanner -> extractor -> synthesizer for each input unit."""

from __future__ import annotations

from pathlib import Path
from typing import List

from .config import FluentGenConfig, validate_config
from .discovery import package_name_from_path
from .errors import PackageResolutionError, TemplateRenderError, UnsupportedFieldTypeError
from .extractor import FieldExtractor
from .logging import get_logger, severity_level
from .models import FileResult, GenerationResult, MethodFragment, ScannedFile
from .scanners import DeclarationScanner, SyntaxScanner, get_scanner
from .sink import render_output
from .synthesizer import MethodSynthesizer


class FluentGenerator:
    """Coordinates fluent setter generation for files, directories and packages.

    Every stage is stateless across files. A failing file (or, for the resolved
    strategy, a failing package) is reported in the result without discarding
    what other files produced.
    """

    def __init__(
        self,
        config: FluentGenConfig | None = None,
        *,
        scanner: DeclarationScanner | None = None,
        extractor: FieldExtractor | None = None,
        synthesizer: MethodSynthesizer | None = None,
    ) -> None:
        self.config = config or FluentGenConfig()
        validate_config(self.config)
        self.scanner = scanner or get_scanner(self.config.strategy, self.config)
        self.extractor = extractor or FieldExtractor(
            self.config.receiver, unsupported_types=self.config.unsupported_types
        )
        self.synthesizer = synthesizer or MethodSynthesizer(
            self.config.receiver, templates_dir=self.config.templates_dir
        )
        self.logger = get_logger("generator")

    def generate(self, target: str | Path) -> GenerationResult:
        """Generate setters for a file, a directory or (resolved strategy) a package."""
        target_path = Path(target)
        self.logger.info(
            "Generating fluent setters for %s with the %s strategy", target, self.scanner.name
        )
        try:
            scanned = self.scanner.scan(target_path)
        except PackageResolutionError as exc:
            self.logger.error("%s", exc)
            return GenerationResult(
                files=[FileResult(path=target_path, error=exc)],
                package_name=_fallback_package_name(target_path),
            )

        files = [self._process(item) for item in scanned]
        result = GenerationResult(files=files, package_name=_package_name(files, target_path))
        self.logger.info(
            "Generated %d method(s) from %d file(s); %d failed",
            len(result.fragments),
            len(files),
            len(result.failures),
        )
        return result

    def generate_source(self, source: str | bytes, path: str | Path | None = None) -> FileResult:
        """Generate setters for in-memory source text using the syntax strategy.

        Raises :class:`SourceSyntaxError` for malformed input and
        :class:`UnsupportedFieldTypeError` under the ``error`` policy.
        """
        scanner = self.scanner
        if not isinstance(scanner, SyntaxScanner):
            scanner = SyntaxScanner(self.config.suffix)
        result = self._process(scanner.scan_source(source, path))
        if result.error is not None:
            raise result.error
        return result

    def render(self, result: GenerationResult) -> str:
        """Return the combined output text for ``result``."""
        return render_output(result.package_name or "main", result.fragments)

    def render_file(self, result: FileResult, package_name: str | None = None) -> str:
        """Return the output text for a single input unit."""
        return render_output(package_name or result.package_name or "main", result.fragments)

    def _process(self, scanned: ScannedFile) -> FileResult:
        result = FileResult(
            path=scanned.path,
            package_name=scanned.package_name,
            diagnostics=list(scanned.diagnostics),
            error=scanned.error,
        )
        for diagnostic in scanned.diagnostics:
            self.logger.log(severity_level(diagnostic.severity), "%s", diagnostic)
        if scanned.error is not None:
            return result

        fragments: List[MethodFragment] = []
        try:
            for candidate in scanned.candidates:
                fields = self.extractor.extract(candidate, result.diagnostics)
                self.logger.debug(
                    "%s: %d of %d field(s) eligible",
                    candidate.name,
                    len(fields),
                    len(candidate.fields),
                )
                fragments.extend(self.synthesizer.synthesize(candidate, fields))
        except (UnsupportedFieldTypeError, TemplateRenderError) as exc:
            self.logger.error("%s", exc)
            result.error = exc
            return result
        result.fragments = fragments
        return result


def _package_name(files: List[FileResult], target: Path) -> str:
    for file_result in files:
        if file_result.package_name:
            return file_result.package_name
    return _fallback_package_name(target)


def _fallback_package_name(target: Path) -> str:
    return package_name_from_path(target) if target.exists() else target.name.split(".")[0] or "main"


__all__ = ["FluentGenerator"]

"""Core data models shared across fluentgen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import FluentGenError


@dataclass(frozen=True)
class FieldSpec:
    """A directly declared struct field as seen by a scanner."""

    identifier: str
    type_signature: Optional[str]
    doc_comment: str = ""
    is_embedded: bool = False
    is_exported: bool = False
    type_text: str = ""


@dataclass(frozen=True)
class CandidateType:
    """A struct declaration whose name matched the configured suffix."""

    name: str
    fields: Tuple[FieldSpec, ...]
    source_file: Optional[Path] = None
    line: int = 0


@dataclass(frozen=True)
class MethodFragment:
    """Rendered source of one fluent setter."""

    struct_type: str
    field_identifier: str
    method_name: str
    text: str
    source_file: Optional[Path] = None


@dataclass(frozen=True)
class Diagnostic:
    """Non-fatal observation made while generating a file."""

    message: str
    path: Optional[Path] = None
    type_name: Optional[str] = None
    field_name: Optional[str] = None
    severity: str = "warning"
    line: int = 0

    def __str__(self) -> str:
        subject = self.type_name or ""
        if self.field_name:
            subject = f"{subject}.{self.field_name}"
        where = str(self.path) if self.path else ""
        if where and self.line:
            where = f"{where}:{self.line}"
        location = ": ".join(part for part in (where, subject) if part)
        return f"{location}: {self.message}" if location else self.message


@dataclass
class ScannedFile:
    """Candidates discovered in one source file, or the error that stopped the scan."""

    path: Path
    package_name: Optional[str]
    candidates: List[CandidateType] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    error: Optional[FluentGenError] = None


@dataclass
class FileResult:
    """Generated fragments for one input unit."""

    path: Path
    package_name: Optional[str] = None
    fragments: List[MethodFragment] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    error: Optional[FluentGenError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def text(self) -> str:
        return "".join(fragment.text for fragment in self.fragments)


@dataclass
class GenerationResult:
    """Ordered per-file results of a generation run."""

    files: List[FileResult] = field(default_factory=list)
    package_name: Optional[str] = None

    @property
    def fragments(self) -> List[MethodFragment]:
        return [fragment for result in self.files for fragment in result.fragments]

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return [diagnostic for result in self.files for diagnostic in result.diagnostics]

    @property
    def failures(self) -> List[FileResult]:
        return [result for result in self.files if result.error is not None]

    @property
    def ok(self) -> bool:
        return not self.failures

"""Error types raised by the fluentgen pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class FluentGenError(RuntimeError):
    """Base error carrying the file/declaration/field context of a failure."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | str | None = None,
        type_name: Optional[str] = None,
        field_name: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None
        self.type_name = type_name
        self.field_name = field_name

    def __str__(self) -> str:
        location = self._location()
        return f"{location}: {self.message}" if location else self.message

    def _location(self) -> str:
        parts = []
        if self.path:
            parts.append(self.path)
        if self.type_name:
            subject = self.type_name
            if self.field_name:
                subject = f"{subject}.{self.field_name}"
            parts.append(subject)
        return ": ".join(parts)


class SourceSyntaxError(FluentGenError):
    """Raised when Go source text cannot be parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | str | None = None,
        line: int = 0,
        column: int = 0,
    ) -> None:
        super().__init__(message, path=path)
        self.line = line
        self.column = column

    def _location(self) -> str:
        base = self.path or "<source>"
        if self.line:
            return f"{base}:{self.line}:{self.column}"
        return base


class PackageResolutionError(FluentGenError):
    """Raised when a package cannot be loaded or its identifiers resolved."""


class UnsupportedFieldTypeError(FluentGenError):
    """Raised when a field's type shape cannot be rendered and the policy is strict."""


class TemplateRenderError(FluentGenError):
    """Raised when the method template cannot be rendered."""


__all__ = [
    "FluentGenError",
    "PackageResolutionError",
    "SourceSyntaxError",
    "TemplateRenderError",
    "UnsupportedFieldTypeError",
]

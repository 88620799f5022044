"""Generate chainable setter methods for Go struct types."""

from __future__ import annotations

from .config import FluentGenConfig, load_config
from .errors import (
    FluentGenError,
    PackageResolutionError,
    SourceSyntaxError,
    TemplateRenderError,
    UnsupportedFieldTypeError,
)
from .generator import FluentGenerator
from .models import CandidateType, FieldSpec, GenerationResult, MethodFragment

__version__ = "0.1.0"

__all__ = [
    "CandidateType",
    "FieldSpec",
    "FluentGenConfig",
    "FluentGenError",
    "FluentGenerator",
    "GenerationResult",
    "MethodFragment",
    "PackageResolutionError",
    "SourceSyntaxError",
    "TemplateRenderError",
    "UnsupportedFieldTypeError",
    "load_config",
]

"""Declaration scanner strategies and lookup by name."""

from __future__ import annotations

from typing import Callable, Dict

from ..config import FluentGenConfig
from .base import DeclarationScanner
from .resolved import ResolvedScanner
from .syntax import SyntaxScanner

_BUILTIN_SCANNERS: Dict[str, Callable[..., DeclarationScanner]] = {
    SyntaxScanner.name: SyntaxScanner,
    ResolvedScanner.name: ResolvedScanner,
}


def get_scanner(name: str, config: FluentGenConfig | None = None) -> DeclarationScanner:
    """Return the scanner registered under ``name``, configured from ``config``."""
    factory = _BUILTIN_SCANNERS.get(name.lower())
    if factory is None:
        available = ", ".join(sorted(_BUILTIN_SCANNERS))
        raise ValueError(f"Unknown scanner {name!r}; expected one of: {available}")
    config = config or FluentGenConfig()
    return factory(
        config.suffix,
        workers=config.workers,
        skip_marker=config.skip_marker,
        exclude_paths=config.exclude_paths,
    )


__all__ = ["DeclarationScanner", "ResolvedScanner", "SyntaxScanner", "get_scanner"]

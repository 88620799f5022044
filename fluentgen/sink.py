"""Emission of generated fragments as Go source files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, TextIO

from .logging import get_logger
from .models import FileResult, GenerationResult, MethodFragment

logger = get_logger("sink")


def render_output(package_name: str, fragments: Iterable[MethodFragment]) -> str:
    """Return a package clause, a blank line and every fragment in order."""
    body = "".join(fragment.text for fragment in fragments)
    return f"package {package_name}\n\n{body}"


def write_combined(result: GenerationResult, stream: TextIO) -> None:
    """Write every successful fragment of ``result`` to ``stream`` as one file."""
    stream.write(render_output(result.package_name or "main", result.fragments))


def write_combined_file(result: GenerationResult, destination: Path) -> Path:
    destination.parent.mkdir(parents=True, exist_ok=True)
    with destination.open("w", encoding="utf-8") as handle:
        write_combined(result, handle)
    logger.info("Wrote %d method(s) to %s", len(result.fragments), destination)
    return destination


def per_file_destination(
    source: Path, *, file_suffix: str = "_fluent", directory: Path | None = None
) -> Path:
    """Return ``<stem><file_suffix><ext>`` beside ``source`` or inside ``directory``."""
    name = f"{source.stem}{file_suffix}{source.suffix}"
    return (directory or source.parent) / name


def write_per_file(
    result: GenerationResult,
    *,
    file_suffix: str = "_fluent",
    directory: Path | None = None,
) -> List[Path]:
    """Write one generated file per input file that produced fragments."""
    written: List[Path] = []
    for file_result in result.files:
        if not file_result.fragments:
            continue
        destination = per_file_destination(
            file_result.path, file_suffix=file_suffix, directory=directory
        )
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(_file_text(file_result, result), encoding="utf-8")
        logger.info("Wrote %d method(s) to %s", len(file_result.fragments), destination)
        written.append(destination)
    return written


def _file_text(file_result: FileResult, result: GenerationResult) -> str:
    package_name = file_result.package_name or result.package_name or "main"
    return render_output(package_name, file_result.fragments)


__all__ = [
    "per_file_destination",
    "render_output",
    "write_combined",
    "write_combined_file",
    "write_per_file",
]

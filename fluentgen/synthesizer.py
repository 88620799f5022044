"""Renders fluent setter methods from the method template."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from .config import is_go_identifier
from .errors import TemplateRenderError
from .extractor import BoundField
from .models import CandidateType, MethodFragment

METHOD_TEMPLATE = "method.go.j2"
METHOD_PREFIX = "With"

_LEADING_WORD = re.compile(r"^\S+")


class MethodSynthesizer:
    """Turns eligible fields into method fragments.

    The Jinja environment is built once per synthesizer. A custom
    ``templates_dir`` is searched before the bundled templates, so a project
    can override ``method.go.j2`` without copying the rest.
    """

    def __init__(self, receiver: str = "style", *, templates_dir: Path | None = None) -> None:
        if not is_go_identifier(receiver):
            raise ValueError(f"receiver {receiver!r} is not a valid Go identifier")
        self.receiver = receiver
        search_path = [str(Path(__file__).with_name("templates"))]
        if templates_dir is not None:
            search_path.insert(0, str(templates_dir))
        self._env = Environment(
            loader=FileSystemLoader(search_path),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        try:
            self._template = self._env.get_template(METHOD_TEMPLATE)
        except TemplateError as exc:
            raise TemplateRenderError(f"cannot load {METHOD_TEMPLATE}: {exc}") from exc

    def synthesize(self, candidate: CandidateType, fields: Iterable[BoundField]) -> List[MethodFragment]:
        return [self.render(candidate, field) for field in fields]

    def render(self, candidate: CandidateType, field: BoundField) -> MethodFragment:
        method_name = f"{METHOD_PREFIX}{field.spec.identifier}"
        try:
            rendered = self._template.render(
                doc_lines=doc_lines(field.spec.doc_comment, method_name),
                receiver=self.receiver,
                struct_type=candidate.name,
                method_name=method_name,
                field_identifier=field.spec.identifier,
                argument=field.argument,
                field_type=field.type_signature,
            )
        except TemplateError as exc:
            raise TemplateRenderError(
                f"executing template: {exc}",
                path=candidate.source_file,
                type_name=candidate.name,
                field_name=field.spec.identifier,
            ) from exc
        # Exactly one blank line after every fragment so fragments concatenate as-is.
        text = rendered.strip("\n") + "\n\n"
        return MethodFragment(
            struct_type=candidate.name,
            field_identifier=field.spec.identifier,
            method_name=method_name,
            text=text,
            source_file=candidate.source_file,
        )


def doc_lines(doc_comment: Optional[str], method_name: str) -> List[str]:
    """Render a field's doc comment as comment lines led by the method name.

    The first word of the doc text is replaced by ``method_name``
    (``Color of the border.`` -> ``// WithColor of the border.``).
    """
    if not doc_comment:
        return []
    lines = doc_comment.split("\n")
    lines[0] = _LEADING_WORD.sub(lambda _: method_name, lines[0], count=1)
    return [f"// {line}" if line else "//" for line in lines]


__all__ = ["METHOD_PREFIX", "MethodSynthesizer", "doc_lines"]

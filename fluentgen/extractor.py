"""Field eligibility, unsupported-type policy and argument naming."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .config import UNSUPPORTED_POLICIES
from .errors import UnsupportedFieldTypeError
from .logging import get_logger
from .models import CandidateType, Diagnostic, FieldSpec

_FALLBACK_ARGUMENTS = ("v", "value", "arg")

logger = get_logger("extractor")


@dataclass(frozen=True)
class BoundField:
    """A field that will receive a setter, with its generated argument name."""

    spec: FieldSpec
    type_signature: str
    argument: str


class FieldExtractor:
    """Selects the fields of a candidate that get setters and names their arguments."""

    def __init__(self, receiver: str = "style", *, unsupported_types: str = "skip") -> None:
        if unsupported_types not in UNSUPPORTED_POLICIES:
            raise ValueError(f"Unknown unsupported-type policy: {unsupported_types!r}")
        self.receiver = receiver
        self.unsupported_types = unsupported_types

    def extract(
        self, candidate: CandidateType, diagnostics: Optional[List[Diagnostic]] = None
    ) -> List[BoundField]:
        """Return the eligible fields of ``candidate`` in declaration order.

        Embedded and unexported fields are skipped silently. A field whose type
        could not be rendered is skipped with a diagnostic, or raises
        :class:`UnsupportedFieldTypeError` under the ``error`` policy.
        """
        bound: List[BoundField] = []
        for spec in candidate.fields:
            if spec.is_embedded or not spec.is_exported:
                continue
            if not spec.type_signature:
                self._unsupported(candidate, spec, diagnostics)
                continue
            bound.append(
                BoundField(
                    spec=spec,
                    type_signature=spec.type_signature,
                    argument=argument_name(spec.type_signature, self.receiver),
                )
            )
        return bound

    def _unsupported(
        self,
        candidate: CandidateType,
        spec: FieldSpec,
        diagnostics: Optional[List[Diagnostic]],
    ) -> None:
        message = f"unsupported field type {spec.type_text!r}"
        if self.unsupported_types == "error":
            raise UnsupportedFieldTypeError(
                message,
                path=candidate.source_file,
                type_name=candidate.name,
                field_name=spec.identifier,
            )
        logger.warning(
            "Skipping %s.%s: %s", candidate.name, spec.identifier, message
        )
        if diagnostics is not None:
            diagnostics.append(
                Diagnostic(
                    f"{message}; field skipped",
                    path=candidate.source_file,
                    type_name=candidate.name,
                    field_name=spec.identifier,
                    line=candidate.line,
                )
            )


def argument_name(type_signature: str, receiver: str) -> str:
    """Derive a setter argument name from the field's rendered type.

    The lower-cased first character after an optional ``*`` is used
    (``*bar.Baz`` -> ``b``). When that is not a letter, the first letter of the
    type text is used instead; names equal to ``receiver`` fall back to ``v``,
    ``value`` or ``arg``.
    """
    text = type_signature[1:] if type_signature.startswith("*") else type_signature
    first = text[:1].lower()
    if not first.isalpha():
        first = next((char.lower() for char in text if char.isalpha()), "")
    if first and first != receiver:
        return first
    return next(name for name in _FALLBACK_ARGUMENTS if name != receiver)


__all__ = ["BoundField", "FieldExtractor", "argument_name"]

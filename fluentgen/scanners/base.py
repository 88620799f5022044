"""Base class for declaration scanners."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence

from ..models import ScannedFile


class DeclarationScanner(ABC):
    """Contract for strategies that discover suffix-matching struct declarations."""

    name: str = ""

    def __init__(
        self,
        suffix: str = "Style",
        *,
        workers: int = 4,
        skip_marker: str = "fluent",
        exclude_paths: Sequence[str] = (),
    ) -> None:
        self.suffix = suffix
        self.workers = workers
        self.skip_marker = skip_marker
        self.exclude_paths = list(exclude_paths)

    def matches(self, type_name: str) -> bool:
        """Return True when ``type_name`` ends with the configured suffix."""
        return type_name.endswith(self.suffix)

    @abstractmethod
    def scan(self, target: Path) -> List[ScannedFile]:
        """Return candidates for ``target`` grouped per source file, in file order."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from fluentgen.logging import configure_logging, get_logger, severity_level


@pytest.mark.parametrize(
    ("severity", "level"),
    [
        ("info", logging.INFO),
        ("warning", logging.WARNING),
        ("ERROR", logging.ERROR),
        ("notice", logging.WARNING),
    ],
)
def test_severity_level(severity: str, level: int) -> None:
    assert severity_level(severity) == level


def test_configure_logging_replaces_handlers(tmp_path: Path) -> None:
    configure_logging()
    logger = configure_logging(verbose=True, log_file=tmp_path / "run.log")

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2

    get_logger("resolver").debug("loaded %s", "widgets")
    for handler in logger.handlers:
        handler.flush()

    assert "[fluentgen.resolver] DEBUG loaded widgets" in (tmp_path / "run.log").read_text(
        encoding="utf-8"
    )
    configure_logging()

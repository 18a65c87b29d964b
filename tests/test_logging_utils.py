"""Tests for loguru configuration (logging_utils.py)."""

from __future__ import annotations

import sys

from loguru import logger

from kanban_sync.logging_utils import configure_logging


def test_configure_logging_filters_by_level(capsys) -> None:
    configure_logging("warning")
    logger.info("hidden message")
    logger.warning("shown message")
    err = capsys.readouterr().err
    assert "shown message" in err
    assert "hidden message" not in err
    logger.remove()
    logger.add(sys.__stderr__, level="INFO")

"""Tests for recognized-text logging helpers."""

from __future__ import annotations

import logging

import pytest

from receiptlens.runtime.logging import get_logger, log_recognized_text, text_preview


def test_text_preview_flattens_lines() -> None:
    assert text_preview("Walmart\n\n  Total: $42.50 \n") == "Walmart | Total: $42.50"


def test_text_preview_truncates() -> None:
    preview = text_preview("A" * 200, limit=20)
    assert preview == "A" * 17 + "..."


def test_recognized_text_is_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.recognized_text")

    with caplog.at_level(logging.DEBUG, logger="tests.recognized_text"):
        log_recognized_text(logger, "OCR page 1", "Walmart\nTotal: $42.50")

    assert [record.levelno for record in caplog.records] == [logging.DEBUG]
    assert "OCR page 1: 21 characters: Walmart | Total: $42.50" in caplog.text


def test_recognized_text_is_silent_above_debug(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.recognized_text_quiet")

    with caplog.at_level(logging.INFO, logger="tests.recognized_text_quiet"):
        log_recognized_text(logger, "Image OCR", "Visa ending 1234")

    assert caplog.records == []


def test_get_logger_nests_names_under_package_namespace() -> None:
    assert get_logger("receiptlens.runtime.x").name == "receiptlens.runtime.x"
    assert get_logger("scripts.tool").name == "receiptlens.scripts.tool"

"""Shared pytest fixtures for receiptlens tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import fitz  # PyMuPDF
import pytest

from receiptlens.domain.errors import RecognitionError
from receiptlens.domain.receipt import RecognizedLine

LETTER_WIDTH = 612
LETTER_HEIGHT = 792


class ScriptedRecognizer:
    """Return canned text per call, in call order; optionally fail some calls."""

    def __init__(self, pages: Sequence[str] = (), fail_calls: Sequence[int] = ()) -> None:
        self.pages = list(pages)
        self.fail_calls = set(fail_calls)
        self.calls = 0
        self.image_sizes: list[tuple[int, int]] = []

    def recognize(self, image) -> list[RecognizedLine]:
        index = self.calls
        self.calls += 1
        self.image_sizes.append(image.size)
        if index in self.fail_calls:
            raise RecognitionError(f"engine failed on call {index}")
        text = self.pages[index] if index < len(self.pages) else ""
        return [RecognizedLine(line, 0.9) for line in text.splitlines() if line.strip()]


@pytest.fixture
def make_recognizer() -> Callable[..., ScriptedRecognizer]:
    return ScriptedRecognizer


@pytest.fixture
def make_pdf(tmp_path: Path) -> Callable[..., Path]:
    """Build a letter-size PDF with one page per entry; "" makes a blank page."""

    def _make(pages: Sequence[str], name: str = "receipt.pdf", metadata: dict[str, str] | None = None) -> Path:
        path = tmp_path / name
        doc = fitz.open()
        for text in pages:
            page = doc.new_page(width=LETTER_WIDTH, height=LETTER_HEIGHT)
            if text:
                page.insert_text((72, 72), text, fontsize=11)
        if metadata:
            doc.set_metadata(metadata)
        doc.save(str(path))
        doc.close()
        return path

    return _make

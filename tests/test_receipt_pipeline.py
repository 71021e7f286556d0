"""Tests for the image/PDF receipt pipeline."""

from __future__ import annotations

import asyncio
import io
from datetime import date
from decimal import Decimal
from pathlib import Path

import httpx
import pytest
from PIL import Image

from receiptlens.domain.errors import InvalidImage, NoTextFound, ProcessingFailed, RecognitionError
from receiptlens.runtime.config import ScanConfig
from receiptlens.runtime.receipt_pipeline import ReceiptPipeline, create_pipeline, load_image
from receiptlens.runtime.recognizers import OCRServiceRecognizer

RECEIPT_TEXT = "Walmart\nTotal: $42.50\nTax: $3.50\nVisa ending 1234\n03/15/2024"


def _png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (320, 480), color="white").save(buffer, format="PNG")
    return buffer.getvalue()


def test_load_image_accepts_bytes_paths_and_images(tmp_path: Path) -> None:
    path = tmp_path / "receipt.png"
    path.write_bytes(_png_bytes())
    img = Image.new("RGB", (10, 10))

    assert load_image(_png_bytes()).size == (320, 480)
    assert load_image(path).size == (320, 480)
    assert load_image(img) is img


def test_load_image_rejects_garbage() -> None:
    with pytest.raises(InvalidImage):
        load_image(b"definitely not an image")


def test_process_image_extracts_fields(make_recognizer) -> None:
    recognizer = make_recognizer([RECEIPT_TEXT])
    seen: list[float] = []

    receipt = asyncio.run(ReceiptPipeline(recognizer).process_image(_png_bytes(), progress=seen.append))

    assert receipt.store == "Walmart"
    assert receipt.total_amount == Decimal("42.50")
    assert receipt.tax_amount == Decimal("3.50")
    assert receipt.payment_method == "Visa"
    assert receipt.purchase_date == date(2024, 3, 15)
    assert seen == [0.0, 0.2, 0.6, 1.0]


def test_process_image_wraps_engine_failure(make_recognizer) -> None:
    recognizer = make_recognizer(fail_calls=[0])

    with pytest.raises(ProcessingFailed) as excinfo:
        asyncio.run(ReceiptPipeline(recognizer).process_image(_png_bytes()))

    assert isinstance(excinfo.value.underlying, RecognitionError)
    assert excinfo.value.__cause__ is excinfo.value.underlying


def test_process_image_without_text_raises(make_recognizer) -> None:
    with pytest.raises(NoTextFound):
        asyncio.run(ReceiptPipeline(make_recognizer()).process_image(_png_bytes()))


def test_process_image_rejects_undecodable_input(make_recognizer) -> None:
    recognizer = make_recognizer([RECEIPT_TEXT])

    with pytest.raises(InvalidImage):
        asyncio.run(ReceiptPipeline(recognizer).process_image(b"garbage"))

    assert recognizer.calls == 0


def test_process_file_dispatches_pdf_to_document_path(make_pdf, make_recognizer) -> None:
    path = make_pdf([RECEIPT_TEXT])
    pipeline = create_pipeline(ScanConfig(fallback_to_today=False), recognizer=make_recognizer())

    receipt = asyncio.run(pipeline.process_file(path))

    assert receipt.total_amount == Decimal("42.50")
    assert receipt.purchase_date == date(2024, 3, 15)


def test_create_pipeline_passes_extraction_settings(make_recognizer) -> None:
    config = ScanConfig(known_merchants=("Best Buy",), fallback_to_today=False, max_ocr_pages=3)
    pipeline = create_pipeline(config, recognizer=make_recognizer(["BEST BUY #12\nTotal 5.00"]))

    receipt = asyncio.run(pipeline.process_image(_png_bytes()))

    assert receipt.store == "Best Buy"
    assert receipt.purchase_date is None
    assert pipeline.document_source.max_ocr_pages == 3


def test_malformed_service_reply_on_image_is_processing_failed() -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[])))
    pipeline = ReceiptPipeline(OCRServiceRecognizer("http://ocr.test", client=client))

    with pytest.raises(ProcessingFailed) as excinfo:
        asyncio.run(pipeline.process_image(_png_bytes()))

    assert isinstance(excinfo.value.underlying, RecognitionError)

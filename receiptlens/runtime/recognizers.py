"""Text recognizers: the OCR engines behind the pipeline.

The pipeline only depends on the TextRecognizer protocol. Two adapters are
provided: local Tesseract (pytesseract) and a remote PaddleOCR-style HTTP
service (httpx).
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Protocol

import httpx

from receiptlens.domain.errors import OCRServiceUnavailable, RecognitionError
from receiptlens.domain.receipt import RecognizedLine
from receiptlens.receipt.ocr_helpers import (
    OCR_IMAGE_PADDING,
    image_to_jpeg_bytes,
    lines_from_detections,
    lines_from_tesseract_data,
    prepare_image,
)
from receiptlens.runtime.logging import get_logger

if TYPE_CHECKING:
    from PIL import Image

    from receiptlens.runtime.config import ScanConfig

logger = get_logger(__name__)


class TextRecognizer(Protocol):
    """Image in, ordered recognized lines out."""

    def recognize(self, image: Image.Image) -> list[RecognizedLine]:
        """Raise RecognitionError when the engine fails."""
        ...


class TesseractRecognizer:
    """Recognize text locally with Tesseract."""

    def __init__(self, language: str = "eng", psm: int = 6) -> None:
        self.language = language
        self.psm = psm

    def recognize(self, image: Image.Image) -> list[RecognizedLine]:
        import pytesseract

        try:
            data = pytesseract.image_to_data(
                image.convert("RGB"),
                lang=self.language,
                config=f"--psm {self.psm}",
                output_type=pytesseract.Output.DICT,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, RuntimeError) as e:
            raise RecognitionError(f"Tesseract failed: {e}") from e
        lines = lines_from_tesseract_data(data)
        logger.debug("Tesseract recognized %d lines", len(lines))
        return lines


class OCRServiceRecognizer:
    """Recognize text by posting the image to an OCR HTTP service."""

    def __init__(
        self,
        ocr_url: str,
        timeout: float = 60.0,
        padding: int = OCR_IMAGE_PADDING,
        client: httpx.Client | None = None,
    ) -> None:
        self.ocr_url = ocr_url.rstrip("/")
        self.timeout = timeout
        self.padding = padding
        self._client = client

    def recognize(self, image: Image.Image) -> list[RecognizedLine]:
        logger.info("Sending receipt to OCR service at %s...", self.ocr_url)
        payload = image_to_jpeg_bytes(prepare_image(image, padding=self.padding))

        try:
            start_time = time.time()
            response = self._post(payload)
            elapsed_time = time.time() - start_time
            logger.info("OCR service returned in %.2f seconds", elapsed_time)
        except httpx.RequestError as e:
            logger.error("Failed to connect to OCR service: %s", e)
            raise OCRServiceUnavailable(f"Failed to connect to OCR service: {e}") from e

        if response.status_code != 200:
            # Response body may echo recognized text; keep it out of non-debug logs.
            logger.error("OCR service error: %s", response.status_code)
            logger.debug("OCR service error body: %s", response.text)
            raise OCRServiceUnavailable(f"OCR service error: {response.status_code}")

        try:
            raw_result = response.json()
            return lines_from_detections(raw_result, padding=self.padding)
        except (ValueError, TypeError, KeyError, IndexError, AttributeError) as e:
            raise RecognitionError(f"Malformed OCR service response: {e}") from e

    def _post(self, payload: bytes) -> httpx.Response:
        files = {"file": ("receipt.jpg", payload, "image/jpeg")}
        if self._client is not None:
            return self._client.post(f"{self.ocr_url}/ocr", files=files, timeout=self.timeout)
        return httpx.post(f"{self.ocr_url}/ocr", files=files, timeout=self.timeout)


def build_recognizer(config: ScanConfig) -> TextRecognizer:
    """Construct the recognizer selected by configuration."""
    if config.ocr_engine == "service":
        return OCRServiceRecognizer(config.ocr_url, timeout=config.ocr_timeout)
    return TesseractRecognizer(language=config.ocr_language)

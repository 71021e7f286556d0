"""Runtime receipt pipeline: image or PDF in, ReceiptData out (non-HTTP)."""

from __future__ import annotations

import asyncio
import io
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from receiptlens.domain.errors import InvalidImage, NoTextFound, ProcessingFailed, RecognitionError
from receiptlens.domain.receipt import ReceiptData
from receiptlens.receipt.ocr_helpers import join_recognized_lines
from receiptlens.receipt.text_parser import ReceiptFieldExtractor
from receiptlens.runtime.config import ScanConfig
from receiptlens.runtime.document_source import DocumentTextSource
from receiptlens.runtime.logging import get_logger, log_recognized_text
from receiptlens.runtime.progress import ProgressCallback, ProgressReporter, as_reporter
from receiptlens.runtime.recognizers import TextRecognizer, build_recognizer

logger = get_logger(__name__)

ImageInput = Image.Image | bytes | str | Path


def load_image(source: ImageInput) -> Image.Image:
    """
    Decode an image from a PIL image, raw bytes or a file path.

    EXIF orientation is applied so OCR sees the photo upright.

    Raises:
        InvalidImage: if the input cannot be decoded
    """
    if isinstance(source, Image.Image):
        img = source
    else:
        try:
            data = source if isinstance(source, bytes) else Path(source).read_bytes()
            img = Image.open(io.BytesIO(data))
            img.load()
        except (OSError, UnidentifiedImageError, ValueError) as e:
            raise InvalidImage(f"Invalid image format: {e}") from e
        img = ImageOps.exif_transpose(img)

    if img.width <= 0 or img.height <= 0:
        raise InvalidImage("Image has no pixels")
    return img


class ReceiptPipeline:
    """Extract receipt fields from a photo or a PDF document.

    Collaborators are injected so a test double can stand in for the OCR
    engine. One document or image is processed per call; callers await the
    result and may impose their own timeout with asyncio.wait_for().
    """

    def __init__(
        self,
        recognizer: TextRecognizer,
        document_source: DocumentTextSource | None = None,
        extractor: ReceiptFieldExtractor | None = None,
    ) -> None:
        self.recognizer = recognizer
        self.document_source = document_source or DocumentTextSource(recognizer)
        self.extractor = extractor or ReceiptFieldExtractor()

    async def recognize_image_text(self, image: Image.Image) -> str:
        """Run OCR on one image; engine failures become ProcessingFailed."""
        try:
            lines = await asyncio.to_thread(self.recognizer.recognize, image)
        except RecognitionError as e:
            logger.error("OCR processing failed: %s", e)
            raise ProcessingFailed(e) from e
        text = join_recognized_lines(lines)
        log_recognized_text(logger, "Image OCR", text)
        return text

    async def process_image(
        self,
        image: ImageInput,
        progress: ProgressReporter | ProgressCallback | None = None,
    ) -> ReceiptData:
        """
        Extract receipt fields from a single photographed receipt.

        Progress: 0.2 after decoding, 0.6 after OCR, 1.0 after extraction.

        Raises:
            InvalidImage: the image cannot be decoded
            ProcessingFailed: the OCR engine failed
            NoTextFound: OCR produced no text
        """
        reporter = as_reporter(progress)
        reporter.start()

        decoded = await asyncio.to_thread(load_image, image)
        reporter.report(0.2)

        text = await self.recognize_image_text(decoded)
        reporter.report(0.6)
        if not text.strip():
            raise NoTextFound("No text could be extracted from the image")

        receipt = self.extractor.extract(text)
        reporter.finish()
        logger.info("Extracted receipt fields from image (%d missing)", len(receipt.missing_fields()))
        return receipt

    async def process_document(
        self,
        path: str | Path,
        progress: ProgressReporter | ProgressCallback | None = None,
    ) -> ReceiptData:
        """
        Extract receipt fields from a PDF (embedded text and page OCR).

        Raises:
            FileTooLarge, InvalidDocument, NoTextFound: no usable text
        """
        reporter = as_reporter(progress)
        document = await self.document_source.process_with_fallback(path, progress=reporter)
        receipt = self.extractor.extract(document.text)
        logger.info(
            "Extracted receipt fields from %d-page document (%d missing)",
            document.page_count,
            len(receipt.missing_fields()),
        )
        return receipt

    async def process_file(
        self,
        path: str | Path,
        progress: ProgressReporter | ProgressCallback | None = None,
    ) -> ReceiptData:
        """Dispatch on file type: PDFs go through the document path, anything else is an image."""
        if Path(path).suffix.lower() == ".pdf":
            return await self.process_document(path, progress=progress)
        return await self.process_image(path, progress=progress)


def create_pipeline(config: ScanConfig, recognizer: TextRecognizer | None = None) -> ReceiptPipeline:
    """Wire a pipeline from configuration."""
    recognizer = recognizer or build_recognizer(config)
    document_source = DocumentTextSource(
        recognizer,
        max_file_size=config.max_file_size_bytes,
        max_ocr_pages=config.max_ocr_pages,
        render_dpi=config.render_dpi,
    )
    extractor = ReceiptFieldExtractor(
        known_merchants=config.known_merchants,
        fallback_to_today=config.fallback_to_today,
    )
    return ReceiptPipeline(recognizer, document_source=document_source, extractor=extractor)

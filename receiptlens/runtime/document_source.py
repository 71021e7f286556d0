"""PDF text acquisition: embedded text layer first, rasterized-page OCR second."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import fitz  # PyMuPDF
from PIL import Image

from receiptlens.domain.errors import FileTooLarge, InvalidDocument, NoTextFound, RecognitionError
from receiptlens.domain.receipt import DocumentMetadata, DocumentText
from receiptlens.receipt.ocr_helpers import join_recognized_lines
from receiptlens.runtime.logging import get_logger, log_recognized_text
from receiptlens.runtime.progress import ProgressCallback, ProgressReporter, as_reporter
from receiptlens.runtime.recognizers import TextRecognizer

logger = get_logger(__name__)

DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024  # 50MB
DEFAULT_MAX_OCR_PAGES = 10
DEFAULT_RENDER_DPI = 144
PDF_POINTS_PER_INCH = 72


class DocumentTextSource:
    """Obtain the best available text for a PDF document.

    Each call opens and closes its own document handle; nothing is cached
    between calls. Pages are always visited in document order because the
    concatenation order decides which field match is found first.
    """

    def __init__(
        self,
        recognizer: TextRecognizer,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        max_ocr_pages: int = DEFAULT_MAX_OCR_PAGES,
        render_dpi: int = DEFAULT_RENDER_DPI,
    ) -> None:
        self.recognizer = recognizer
        self.max_file_size = max_file_size
        self.max_ocr_pages = max_ocr_pages
        self.render_dpi = render_dpi

    def _check_size(self, path: Path) -> None:
        try:
            size = path.stat().st_size
        except OSError as e:
            raise InvalidDocument(f"Cannot read PDF document {path}: {e}") from e
        if size > self.max_file_size:
            raise FileTooLarge(size, self.max_file_size)

    @contextmanager
    def _open(self, path: str | Path) -> Iterator[fitz.Document]:
        """Open a PDF after the size guard; parse failures become InvalidDocument."""
        path = Path(path)
        self._check_size(path)
        try:
            doc = fitz.open(str(path), filetype="pdf")
        except (RuntimeError, ValueError) as e:
            raise InvalidDocument(f"Invalid or corrupted PDF document {path.name}: {e}") from e
        try:
            if doc.needs_pass:
                raise InvalidDocument(f"PDF document {path.name} is password protected")
            if doc.page_count == 0:
                raise InvalidDocument(f"PDF document {path.name} has no pages")
            yield doc
        finally:
            doc.close()

    def extract_embedded_text(self, path: str | Path) -> str:
        """
        Concatenate the embedded text layer of every page, in order.

        Raises:
            FileTooLarge: before any parsing, if the file exceeds the size limit
            InvalidDocument: if the document cannot be opened
            NoTextFound: if every page is blank
        """
        with self._open(path) as doc:
            text = "".join(page.get_text("text") + "\n" for page in doc)
            page_count = doc.page_count

        if not text.strip():
            raise NoTextFound("No text content found in PDF")
        logger.debug("Extracted embedded text from %d pages", page_count)
        log_recognized_text(logger, "Embedded text", text)
        return text

    def rasterize_pages(self, path: str | Path, max_pages: int | None = None) -> list[Image.Image]:
        """
        Render pages to RGB images on an opaque white background.

        Args:
            path: PDF path
            max_pages: Render at most this many leading pages (None = all)

        Returns:
            One image per page in document order, aspect ratio preserved
        """
        zoom = self.render_dpi / PDF_POINTS_PER_INCH
        matrix = fitz.Matrix(zoom, zoom)
        images: list[Image.Image] = []
        with self._open(path) as doc:
            page_count = doc.page_count if max_pages is None else min(doc.page_count, max_pages)
            for page_index in range(page_count):
                # alpha=False renders onto white, so transparent regions stay white
                pix = doc[page_index].get_pixmap(matrix=matrix, alpha=False)
                images.append(Image.frombytes("RGB", (pix.width, pix.height), pix.samples))
        logger.debug("Rasterized %d pages at %d dpi", len(images), self.render_dpi)
        return images

    def page_images(self, path: str | Path) -> list[Image.Image]:
        """Rasterize pages for OCR-only callers, capped at max_ocr_pages."""
        return self.rasterize_pages(path, max_pages=self.max_ocr_pages)

    def validate_document(self, path: str | Path) -> bool:
        """Return True if the PDF opens, has pages and a non-empty first page."""
        try:
            with self._open(path) as doc:
                rect = doc[0].rect
                return rect.width > 0 and rect.height > 0
        except (InvalidDocument, FileTooLarge):
            return False

    def read_metadata(self, path: str | Path) -> DocumentMetadata | None:
        """Return the PDF information dictionary, or None if unreadable."""
        try:
            with self._open(path) as doc:
                info = doc.metadata or {}
                page_count = doc.page_count
        except (InvalidDocument, FileTooLarge):
            return None

        def _value(key: str) -> str | None:
            value = info.get(key)
            return value or None

        return DocumentMetadata(
            page_count=page_count,
            title=_value("title"),
            author=_value("author"),
            subject=_value("subject"),
            creator=_value("creator"),
            creation_date=_value("creationDate"),
            modification_date=_value("modDate"),
        )

    def _recognize_page(self, image: Image.Image) -> str:
        return join_recognized_lines(self.recognizer.recognize(image))

    async def process_with_fallback(
        self,
        path: str | Path,
        progress: ProgressReporter | ProgressCallback | None = None,
    ) -> DocumentText:
        """
        Gather embedded text plus OCR text from every rendered page.

        Progress: 0.2 after direct extraction, 0.4 after rendering, then
        linear up to 0.9 as pages are recognized, 1.0 on completion. A page
        whose recognition fails is logged and skipped.

        Raises:
            FileTooLarge, InvalidDocument: the document cannot be used at all
            NoTextFound: neither the text layer nor OCR produced any text
        """
        reporter = as_reporter(progress)
        reporter.start()

        try:
            direct_text = await asyncio.to_thread(self.extract_embedded_text, path)
        except NoTextFound:
            logger.info("No embedded text layer; relying on OCR")
            direct_text = ""
        reporter.report(0.2)

        images = await asyncio.to_thread(self.rasterize_pages, path)
        reporter.report(0.4)

        ocr_parts: list[str] = []
        total_images = len(images)
        for index, image in enumerate(images):
            try:
                page_text = await asyncio.to_thread(self._recognize_page, image)
                log_recognized_text(logger, f"OCR page {index + 1}", page_text)
                ocr_parts.append(page_text + "\n")
            except RecognitionError as e:
                logger.warning("OCR failed for page %d of %d: %s", index + 1, total_images, e)
            reporter.report(0.4 + 0.5 * (index + 1) / total_images)

        ocr_text = "".join(ocr_parts)
        combined_text = direct_text + "\n" + ocr_text

        if not combined_text.strip() and images:
            logger.info("Combined text is empty; retrying OCR on the first page")
            try:
                ocr_text = await asyncio.to_thread(self._recognize_page, images[0])
                combined_text = ocr_text
            except RecognitionError as e:
                logger.warning("OCR retry on first page failed: %s", e)

        if not combined_text.strip():
            raise NoTextFound("No text could be extracted from the PDF")

        reporter.finish()
        return DocumentText(
            text=combined_text,
            page_count=total_images,
            direct_text=direct_text,
            ocr_text=ocr_text,
            page_images=images,
        )

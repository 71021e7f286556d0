"""Exception taxonomy for receipt acquisition and recognition.

Acquisition errors are terminal for a call and reach the caller.
Recognition errors come from a TextRecognizer; the document pipeline absorbs
them per page, the image pipeline wraps them in ProcessingFailed.
Field extraction never raises: a missed field is None.
"""

from __future__ import annotations


class ReceiptLensError(Exception):
    """Base class for all receiptlens errors."""

    message = "Receipt processing error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class AcquisitionError(ReceiptLensError):
    """No usable text could be obtained from the input."""


class InvalidImage(AcquisitionError):
    message = "Invalid image format"


class InvalidDocument(AcquisitionError):
    message = "Invalid or corrupted PDF document"


class FileTooLarge(AcquisitionError):
    message = "PDF file is too large to process"

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"PDF file is too large to process ({size} bytes, limit {limit} bytes)")
        self.size = size
        self.limit = limit


class NoTextFound(AcquisitionError):
    message = "No text content found"


class RecognitionError(ReceiptLensError):
    """The text recognition engine failed."""

    message = "Text recognition failed"


class OCRServiceUnavailable(RecognitionError):
    """Raised when the OCR service cannot be reached or returns an error."""

    message = "OCR service unavailable"


class ProcessingFailed(ReceiptLensError):
    """Recognition failed while processing a single image."""

    def __init__(self, underlying: BaseException) -> None:
        super().__init__(f"OCR processing failed: {underlying}")
        self.underlying = underlying

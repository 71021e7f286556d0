"""Core domain models for receiptlens.

This module provides the data models and errors shared across the project:
- ReceiptData: structured purchase facts extracted from a receipt
- RecognizedLine: one line of OCR output
- DocumentText, DocumentMetadata: PDF acquisition results

Usage:
    from receiptlens.domain import ReceiptData, RecognizedLine
"""

from receiptlens.domain.errors import (
    AcquisitionError,
    FileTooLarge,
    InvalidDocument,
    InvalidImage,
    NoTextFound,
    OCRServiceUnavailable,
    ProcessingFailed,
    ReceiptLensError,
    RecognitionError,
)
from receiptlens.domain.receipt import DocumentMetadata, DocumentText, ReceiptData, RecognizedLine

__all__ = [
    "ReceiptData",
    "RecognizedLine",
    "DocumentText",
    "DocumentMetadata",
    # Errors
    "ReceiptLensError",
    "AcquisitionError",
    "InvalidImage",
    "InvalidDocument",
    "FileTooLarge",
    "NoTextFound",
    "RecognitionError",
    "OCRServiceUnavailable",
    "ProcessingFailed",
]

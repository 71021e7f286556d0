"""Runtime infrastructure for receiptlens.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Configuration via load_scan_config(), ScanConfig
- OCR engines via TextRecognizer, build_recognizer()
- PDF acquisition via DocumentTextSource
- The end-to-end ReceiptPipeline

Usage:
    from receiptlens.runtime import create_pipeline, get_logger, load_scan_config

    logger = get_logger(__name__)
    pipeline = create_pipeline(load_scan_config())
    receipt = asyncio.run(pipeline.process_file("receipt.pdf"))
"""

from receiptlens.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from receiptlens.runtime.config import ScanConfig, load_scan_config
from receiptlens.runtime.progress import ProgressReporter
from receiptlens.runtime.recognizers import (
    OCRServiceRecognizer,
    TesseractRecognizer,
    TextRecognizer,
    build_recognizer,
)
from receiptlens.runtime.document_source import DocumentTextSource
from receiptlens.runtime.receipt_pipeline import ReceiptPipeline, create_pipeline, load_image

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Config
    "ScanConfig",
    "load_scan_config",
    # Pipeline
    "ProgressReporter",
    "TextRecognizer",
    "TesseractRecognizer",
    "OCRServiceRecognizer",
    "build_recognizer",
    "DocumentTextSource",
    "ReceiptPipeline",
    "create_pipeline",
    "load_image",
]

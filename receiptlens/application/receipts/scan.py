"""Receipt scan workflow orchestration."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from receiptlens.domain.errors import (
    FileTooLarge,
    InvalidDocument,
    InvalidImage,
    NoTextFound,
    ProcessingFailed,
)
from receiptlens.runtime import ScanConfig, create_pipeline, get_logger
from receiptlens.runtime.progress import ProgressCallback

if TYPE_CHECKING:
    from receiptlens.domain.receipt import ReceiptData
    from receiptlens.runtime.recognizers import TextRecognizer

logger = get_logger(__name__)

ScanStatus = Literal[
    "file_not_found",
    "invalid_input",
    "no_text",
    "ocr_unavailable",
    "extracted",
]


@dataclass(frozen=True)
class ReceiptScanRequest:
    """Inputs for running receipt scan workflow."""

    file_path: Path
    config: ScanConfig
    recognizer: TextRecognizer | None = None
    progress: ProgressCallback | None = None


@dataclass(frozen=True)
class ReceiptScanResult:
    """Outcome from receipt scan workflow."""

    status: ScanStatus
    receipt: ReceiptData | None = None
    error: str | None = None


def run_receipt_scan(request: ReceiptScanRequest) -> ReceiptScanResult:
    """Run scan flow: acquire text -> extract fields. Persistence is left to the caller."""
    if not request.file_path.exists():
        return ReceiptScanResult(
            status="file_not_found",
            error=f"Receipt file not found: {request.file_path}",
        )

    pipeline = create_pipeline(request.config, recognizer=request.recognizer)
    try:
        receipt = asyncio.run(pipeline.process_file(request.file_path, progress=request.progress))
    except (InvalidImage, InvalidDocument, FileTooLarge) as exc:
        return ReceiptScanResult(status="invalid_input", error=str(exc))
    except NoTextFound as exc:
        return ReceiptScanResult(status="no_text", error=str(exc))
    except ProcessingFailed as exc:
        return ReceiptScanResult(status="ocr_unavailable", error=str(exc))

    return ReceiptScanResult(status="extracted", receipt=receipt)

"""Receipt command handlers used by the unified CLI."""

import argparse
import dataclasses
import json
import sys
from pathlib import Path

from receiptlens.domain.receipt import ReceiptData
from receiptlens.runtime import get_logger, load_scan_config

logger = get_logger(__name__)


def _load_config(args: argparse.Namespace):
    config = load_scan_config(args.config)
    overrides = {}
    if getattr(args, "engine", None):
        overrides["ocr_engine"] = args.engine
    if getattr(args, "ocr_url", None):
        overrides["ocr_engine"] = "service"
        overrides["ocr_url"] = args.ocr_url
    if getattr(args, "no_date_fallback", False):
        overrides["fallback_to_today"] = False
    return dataclasses.replace(config, **overrides) if overrides else config


def _print_receipt(receipt: ReceiptData) -> None:
    def show(value: object) -> str:
        return "UNKNOWN" if value is None else str(value)

    print("\n" + "=" * 60)
    print("EXTRACTED RECEIPT")
    print("=" * 60)
    print(f"Store: {show(receipt.store)}")
    print(f"Title: {show(receipt.title)}")
    date_str = receipt.purchase_date.isoformat() if receipt.purchase_date else "UNKNOWN"
    if receipt.purchase_date_is_fallback:
        date_str += " (not printed; defaulted to today)"
    print(f"Date: {date_str}")
    print(f"Price: {show(receipt.price)}")
    print(f"Tax: {show(receipt.tax_amount)}")
    print(f"Total: {show(receipt.total_amount)}")
    print(f"Payment: {show(receipt.payment_method)}")
    if receipt.receipt_number:
        print(f"Receipt #: {receipt.receipt_number}")
    if receipt.warranty_info:
        print(f"Warranty: {receipt.warranty_info}")
    missing = receipt.missing_fields()
    if missing:
        print(f"\nFill in manually: {', '.join(missing)}")
    print("=" * 60)


def cmd_scan(args: argparse.Namespace) -> None:
    """Extract purchase facts from a receipt image or PDF and print them."""
    from receiptlens.application.receipts.scan import ReceiptScanRequest, run_receipt_scan

    try:
        config = _load_config(args)
    except ValueError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    def _progress(value: float) -> None:
        logger.debug("Progress: %.0f%%", value * 100)

    result = run_receipt_scan(ReceiptScanRequest(file_path=Path(args.file), config=config, progress=_progress))

    if result.status == "file_not_found":
        logger.error("%s", result.error)
        print(f"Error: {result.error}")
        sys.exit(1)

    if result.status == "ocr_unavailable":
        logger.error("%s", result.error)
        print(f"OCR failed: {result.error}")
        if config.ocr_engine == "service":
            print("Make sure the OCR service is running before scanning receipts.")
        sys.exit(1)

    if result.status in ("invalid_input", "no_text"):
        print(f"Could not read receipt: {result.error}")
        sys.exit(1)

    receipt = result.receipt
    if receipt is None:
        print("Scan failed: missing receipt output.")
        sys.exit(1)

    if args.json:
        print(json.dumps(receipt.to_dict(), indent=2))
    else:
        _print_receipt(receipt)


def cmd_pdf_info(args: argparse.Namespace) -> None:
    """Print whether a PDF is usable, with its metadata."""
    from receiptlens.runtime.document_source import DocumentTextSource
    from receiptlens.runtime.recognizers import build_recognizer

    config = load_scan_config(args.config)
    source = DocumentTextSource(build_recognizer(config), max_file_size=config.max_file_size_bytes)
    path = Path(args.file)

    if not source.validate_document(path):
        print(f"Invalid PDF: {path}")
        sys.exit(1)

    metadata = source.read_metadata(path)
    if metadata is None:
        print(f"Invalid PDF: {path}")
        sys.exit(1)
    for field in dataclasses.fields(metadata):
        value = getattr(metadata, field.name)
        if value is not None:
            print(f"{field.name}: {value}")

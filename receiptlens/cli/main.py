#!/usr/bin/env python3

import argparse
from collections.abc import Callable, Sequence


def _coerce_exit_code(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


def _run_command(command: Callable[[argparse.Namespace], None], args: argparse.Namespace) -> int:
    """
    Normalize command handlers that call sys.exit().

    This keeps process termination centralized in this module's entrypoint.
    """
    try:
        command(args)
    except SystemExit as exc:
        return _coerce_exit_code(exc.code)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Receipt text extraction CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  scan <file>                Extract purchase facts from a receipt image or PDF
  pdf-info <file>            Show PDF validity and metadata

Environment:
  RECEIPTLENS_CONFIG         TOML settings file
  RECEIPTLENS_LOG_LEVEL      DEBUG, INFO, WARNING or ERROR
""",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    scan_parser = subparsers.add_parser("scan", help="Extract fields from a receipt image or PDF")
    scan_parser.add_argument("file", help="Path to receipt image or PDF")
    scan_parser.add_argument("--config", default=None, help="Path to TOML settings (default: $RECEIPTLENS_CONFIG)")
    scan_parser.add_argument("--engine", choices=["tesseract", "service"], default=None, help="OCR engine override")
    scan_parser.add_argument("--ocr-url", default=None, help="OCR service URL (implies --engine service)")
    scan_parser.add_argument("--json", action="store_true", help="Print the extracted record as JSON")
    scan_parser.add_argument("--no-date-fallback", action="store_true", help="Leave the date blank when none is printed")

    info_parser = subparsers.add_parser("pdf-info", help="Show PDF validity and metadata")
    info_parser.add_argument("file", help="Path to PDF")
    info_parser.add_argument("--config", default=None, help="Path to TOML settings")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "scan":
        from receiptlens.cli.receipt import cmd_scan

        return _run_command(cmd_scan, args)
    if args.command == "pdf-info":
        from receiptlens.cli.receipt import cmd_pdf_info

        return _run_command(cmd_pdf_info, args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())

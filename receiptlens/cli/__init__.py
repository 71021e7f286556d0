"""Unified command-line interface for receiptlens.

Usage:
    receiptlens scan <image-or-pdf>
    receiptlens scan <file> --json
    receiptlens scan <file> --ocr-url http://localhost:8001
    receiptlens pdf-info <pdf>
"""

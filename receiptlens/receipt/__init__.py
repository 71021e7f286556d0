"""Pure receipt text parsing: pattern tables, normalization and field extraction.

Nothing in this package performs I/O or talks to an OCR engine.
"""

from .field_patterns import DATE_PATTERNS, PAYMENT_METHODS, PRICE_PATTERNS, TAX_PATTERNS, TOTAL_PATTERNS
from .normalization import parse_amount
from .text_parser import ReceiptFieldExtractor, parse_receipt_text

__all__ = [
    "ReceiptFieldExtractor",
    "parse_receipt_text",
    "parse_amount",
    "PRICE_PATTERNS",
    "TOTAL_PATTERNS",
    "TAX_PATTERNS",
    "DATE_PATTERNS",
    "PAYMENT_METHODS",
]

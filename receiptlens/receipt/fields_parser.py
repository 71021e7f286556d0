"""Per-field extraction helpers for receipt text.

Every helper takes the full recognized text, walks its pattern table in
priority order and returns None when nothing usable is found.
"""

import re
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from .date_utils import parse_date_text
from .field_patterns import (
    ADDRESS_PATTERNS,
    CASHIER_PATTERNS,
    DATE_PATTERNS,
    MIN_ADDRESS_LENGTH,
    MIN_PHONE_LENGTH,
    PAYMENT_METHODS,
    PHONE_PATTERNS,
    PRICE_PATTERNS,
    RECEIPT_NUMBER_PATTERNS,
    STORE_EXCLUDED_WORDS,
    STORE_HEADER_LINES,
    STORE_LABEL_WINDOW,
    STORE_LABELS,
    TAX_PATTERNS,
    TITLE_EXCLUDED_WORDS,
    TITLE_LABEL_WINDOW,
    TITLE_LABELS,
    TOTAL_PATTERNS,
    WARRANTY_CONTEXT_AFTER,
    WARRANTY_CONTEXT_BEFORE,
    WARRANTY_KEYWORDS,
    WEBSITE_PATTERNS,
    AmountPattern,
    DatePattern,
    FieldPattern,
)
from .normalization import parse_amount


def _first_amount(text: str, patterns: Sequence[AmountPattern]) -> Decimal | None:
    """Return the amount from the first pattern whose first match parses."""
    for pattern in patterns:
        match = pattern.regex.search(text)
        if not match:
            continue
        amount = parse_amount(match.group(1))
        # Use 'is not None' since Decimal("0.00") is falsy but valid
        if amount is not None:
            return amount
    return None


def _extract_price(text: str) -> Decimal | None:
    """Extract the primary transaction amount."""
    return _first_amount(text, PRICE_PATTERNS)


def _extract_total_amount(text: str) -> Decimal | None:
    """Extract the grand total (independent of price)."""
    return _first_amount(text, TOTAL_PATTERNS)


def _extract_tax_amount(text: str) -> Decimal | None:
    """Extract sales tax / VAT / GST amount."""
    return _first_amount(text, TAX_PATTERNS)


def _text_after_label(text: str, labels: Iterable[str], window: int, min_length: int) -> str | None:
    """
    Find the first label (in list order) and return the text following it.

    Takes up to `window` characters after the label, trims it, and keeps only
    the first line. Results of `min_length` characters or fewer are rejected
    and the next label is tried.
    """
    for label in labels:
        match = re.search(re.escape(label), text, re.IGNORECASE)
        if not match:
            continue
        value_start = match.end()
        value = text[value_start : value_start + window].strip()
        value = value.splitlines()[0].strip() if value else ""
        if len(value) > min_length:
            return value
    return None


def _contains_any(line: str, words: Iterable[str]) -> bool:
    lowered = line.lower()
    return any(word in lowered for word in words)


def _extract_store(text: str, known_merchants: Sequence[str] = ()) -> str | None:
    """
    Extract the merchant name.

    Strategy order:
    1. Known merchants found in the text (longest first, word-bounded)
    2. Labelled value ("Store:", "Purchased at:", ...)
    3. First plausible line in the receipt header
    """
    for merchant in sorted(known_merchants, key=len, reverse=True):
        if re.search(r"\b" + re.escape(merchant) + r"\b", text, re.IGNORECASE):
            return merchant

    labelled = _text_after_label(text, STORE_LABELS, STORE_LABEL_WINDOW, min_length=2)
    if labelled:
        return labelled

    # Store names sit above totals and dates in typical receipt layouts
    for line in text.splitlines()[:STORE_HEADER_LINES]:
        cleaned = line.strip()
        if not 3 <= len(cleaned) <= 50:
            continue
        if "$" in cleaned or _contains_any(cleaned, STORE_EXCLUDED_WORDS):
            continue
        return cleaned
    return None


def _extract_title(text: str) -> str | None:
    """
    Extract the purchased item description.

    Falls back to the middle third of the receipt, between the store header
    and the totals footer.
    """
    labelled = _text_after_label(text, TITLE_LABELS, TITLE_LABEL_WINDOW, min_length=3)
    if labelled:
        return labelled

    lines = text.split("\n")
    middle_start = len(lines) // 3
    middle_end = 2 * len(lines) // 3
    for line in lines[middle_start:middle_end]:
        cleaned = line.strip()
        if not 5 < len(cleaned) < 80:
            continue
        if "$" in cleaned or _contains_any(cleaned, TITLE_EXCLUDED_WORDS):
            continue
        return cleaned
    return None


def _extract_date(text: str, patterns: Sequence[DatePattern] = DATE_PATTERNS) -> date | None:
    """Extract the purchase date (None if no pattern both matches and parses)."""
    for pattern in patterns:
        match = pattern.regex.search(text)
        if not match:
            continue
        parsed = parse_date_text(match.group(0), pattern.formats)
        if parsed is not None:
            return parsed
    return None


def _extract_warranty_info(text: str) -> str | None:
    """Return the text surrounding the first warranty keyword, unparsed."""
    for keyword in WARRANTY_KEYWORDS:
        match = re.search(re.escape(keyword), text, re.IGNORECASE)
        if not match:
            continue
        window_start = max(0, match.start() - WARRANTY_CONTEXT_BEFORE)
        window_end = match.end() + WARRANTY_CONTEXT_AFTER
        snippet = text[window_start:window_end].strip()
        if snippet:
            return snippet
    return None


def _extract_payment_method(text: str) -> str | None:
    """
    Return the first payment vocabulary term present, title-cased.

    Terms must stand as whole words: "Cashier" is not "cash", and a term
    glued to digits ("VISA1234") is not recognized.
    """
    for method in PAYMENT_METHODS:
        pattern = r"\b" + r"\s+".join(re.escape(word) for word in method.split()) + r"\b"
        if re.search(pattern, text, re.IGNORECASE):
            return method.title()
    return None


def _first_capture(text: str, patterns: Sequence[FieldPattern], min_length: int = 1) -> str | None:
    for pattern in patterns:
        match = pattern.regex.search(text)
        if not match:
            continue
        value = match.group(1).strip()
        if len(value) >= min_length:
            return value
    return None


def _extract_receipt_number(text: str) -> str | None:
    """Extract a receipt / transaction / order / invoice number."""
    return _first_capture(text, RECEIPT_NUMBER_PATTERNS)


def _extract_cashier(text: str) -> str | None:
    return _first_capture(text, CASHIER_PATTERNS)


def _extract_store_address(text: str) -> str | None:
    return _first_capture(text, ADDRESS_PATTERNS, min_length=MIN_ADDRESS_LENGTH)


def _extract_store_phone(text: str) -> str | None:
    return _first_capture(text, PHONE_PATTERNS, min_length=MIN_PHONE_LENGTH)


def _extract_store_website(text: str) -> str | None:
    """Extract a store URL; labelled values must look like a URL."""
    for pattern in WEBSITE_PATTERNS:
        match = pattern.regex.search(text)
        if not match:
            continue
        value = match.group(1).strip().rstrip(".,;")
        if value.lower().startswith(("http", "www")):
            return value
    return None

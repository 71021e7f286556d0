"""Amount normalization across decimal/thousands separator conventions."""

import re
from decimal import Decimal, InvalidOperation

CURRENCY_SYMBOLS = "$€£¥"


def parse_amount(raw: str) -> Decimal | None:
    """
    Parse an OCR amount string into a non-negative Decimal.

    Handles "1,234.56" (US), "1.234,56" (EU) and "12,50" (decimal comma).
    A single separator followed by exactly three digits with other groups
    ("1,234") is read as thousands; a lone dot is always decimal.

    Returns:
        Decimal value, or None if the text is not a number.
    """
    text = raw.strip().strip(CURRENCY_SYMBOLS).strip()
    text = re.sub(r"\s+", "", text)
    if not text or not re.fullmatch(r"[\d.,]+", text) or not re.search(r"\d", text):
        return None

    has_comma = "," in text
    has_dot = "." in text
    if has_comma and has_dot:
        # Whichever separator appears last is the decimal mark.
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif has_comma:
        head, _, tail = text.rpartition(",")
        if text.count(",") == 1 and len(tail) != 3:
            text = f"{head}.{tail}"
        else:
            text = text.replace(",", "")
    elif text.count(".") > 1:
        text = text.replace(".", "")

    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite() or value < 0:
        return None
    return value

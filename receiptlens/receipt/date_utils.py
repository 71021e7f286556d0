"""Date helpers for receipt parsing."""

import re
from collections.abc import Iterable
from datetime import date, datetime


def fallback_purchase_date() -> date:
    """Return the stand-in purchase date used when no date is printed."""
    return date.today()


def parse_date_text(text: str, formats: Iterable[str]) -> date | None:
    """Parse a matched date string with the first format that accepts it."""
    cleaned = re.sub(r"\s+", " ", text.strip())
    # "Sept." / "Jan." -> "Sep" / "Jan" so %b accepts them
    cleaned = re.sub(r"(?i)\bsept\b", "Sep", cleaned)
    cleaned = re.sub(r"(?<=[A-Za-z])\.", "", cleaned)
    for fmt in formats:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue
    return None

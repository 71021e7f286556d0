"""Pattern tables are data: their order is the extraction priority."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from receiptlens.receipt.field_patterns import DATE_PATTERNS, PRICE_PATTERNS, TAX_PATTERNS, TOTAL_PATTERNS
from receiptlens.receipt.fields_parser import _extract_date, _first_amount


def test_price_labels_keep_declared_order() -> None:
    names = [pattern.name for pattern in PRICE_PATTERNS]
    assert names[:4] == ["total", "amount", "subtotal", "grand total"]
    assert names[-3:] == ["currency prefix", "currency suffix", "bare number"]


def test_total_table_tries_specific_labels_before_bare_total() -> None:
    names = [pattern.name for pattern in TOTAL_PATTERNS]
    assert names[0] == "grand total"
    assert names[-1] == "total"


def test_tax_table_starts_with_sales_tax() -> None:
    names = [pattern.name for pattern in TAX_PATTERNS]
    assert names[0] == "sales tax"
    assert names.index("tax") > names.index("federal tax")


def test_date_table_is_month_first() -> None:
    first = DATE_PATTERNS[0]
    assert first.name == "MM/DD/YYYY"
    assert first.formats[0] == "%m/%d/%Y"


def test_earlier_pattern_wins_even_if_later_in_text() -> None:
    text = "Amount 3.00\nTotal 9.00"
    assert _first_amount(text, PRICE_PATTERNS) == Decimal("9.00")


def test_reordering_the_table_changes_the_result() -> None:
    text = "Amount 3.00\nTotal 9.00"
    reordered = (PRICE_PATTERNS[1], PRICE_PATTERNS[0])
    assert _first_amount(text, reordered) == Decimal("3.00")


def test_date_patterns_can_be_supplied() -> None:
    text = "05/06/2024"
    day_first = (DATE_PATTERNS[0]._replace(formats=("%d/%m/%Y",)),)

    assert _extract_date(text) == date(2024, 5, 6)
    assert _extract_date(text, day_first) == date(2024, 6, 5)

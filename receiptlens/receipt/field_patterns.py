"""Ordered pattern tables for receipt field extraction.

Each table is scanned in order and the first pattern that yields a value
wins, so list order is the priority order. Add locales or formats by
extending the tables; the extractors never branch on individual entries.
"""

import re
from typing import NamedTuple

# Optional currency marker in front of an amount.
CURRENCY = r"(?:[$€£¥]\s*)?"
# Digits with optional thousands groups and decimal part ("1,234.56", "12,50").
AMOUNT = r"(\d+(?:[.,]\d{3})*(?:[.,]\d{1,2})?)(?!\d)"


class AmountPattern(NamedTuple):
    """A labelled (or bare) monetary amount pattern."""

    name: str
    regex: re.Pattern[str]


class DatePattern(NamedTuple):
    """A date regex paired with the strptime formats tried on its match."""

    name: str
    regex: re.Pattern[str]
    formats: tuple[str, ...]


class FieldPattern(NamedTuple):
    """A pattern whose first capture group is the field value."""

    name: str
    regex: re.Pattern[str]


def _label(label: str) -> str:
    """Word-bounded label regex where spaces match any whitespace run."""
    words = [re.escape(word) for word in label.split()]
    return r"\b" + r"\s*".join(words) + r"\b"


def _labelled_amount(label: str) -> AmountPattern:
    regex = re.compile(_label(label) + r"[\s:]*" + CURRENCY + AMOUNT, re.IGNORECASE)
    return AmountPattern(label, regex)


PRICE_PATTERNS: tuple[AmountPattern, ...] = (
    *(
        _labelled_amount(label)
        for label in (
            "total",
            "amount",
            "subtotal",
            "grand total",
            "balance",
            "due",
            "final total",
            "amount due",
            "final amount",
            "balance due",
            "total amount",
            "final balance",
        )
    ),
    AmountPattern("currency prefix", re.compile(r"[$€£¥]\s*" + AMOUNT)),
    AmountPattern("currency suffix", re.compile(AMOUNT + r"\s*[$€£¥]")),
    AmountPattern("bare number", re.compile(r"(\d+(?:\.\d+)?)")),
)

# Most specific first: a bare "total" label must not shadow "grand total".
TOTAL_PATTERNS: tuple[AmountPattern, ...] = tuple(
    _labelled_amount(label)
    for label in (
        "grand total",
        "final total",
        "amount due",
        "balance due",
        "total amount",
        "final amount",
        "final balance",
        "total",
    )
)

TAX_PATTERNS: tuple[AmountPattern, ...] = tuple(
    _labelled_amount(label)
    for label in (
        "sales tax",
        "state tax",
        "local tax",
        "provincial tax",
        "federal tax",
        "tax",
        "vat",
        "gst",
        "hst",
        "pst",
    )
)

_MONTHS = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?|"
    r"sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)


def _numeric_date(separator: str, year_digits: int) -> re.Pattern[str]:
    sep = re.escape(separator)
    return re.compile(rf"(?<!\d)\d{{1,2}}{sep}\d{{1,2}}{sep}\d{{{year_digits}}}(?!\d)")


# Month-first readings are tried before day-first for every numeric layout.
DATE_PATTERNS: tuple[DatePattern, ...] = (
    DatePattern("MM/DD/YYYY", _numeric_date("/", 4), ("%m/%d/%Y", "%d/%m/%Y")),
    DatePattern("MM-DD-YYYY", _numeric_date("-", 4), ("%m-%d-%Y", "%d-%m-%Y")),
    DatePattern("MM.DD.YYYY", _numeric_date(".", 4), ("%m.%d.%Y", "%d.%m.%Y")),
    DatePattern("MM/DD/YY", _numeric_date("/", 2), ("%m/%d/%y", "%d/%m/%y")),
    DatePattern("MM-DD-YY", _numeric_date("-", 2), ("%m-%d-%y", "%d-%m-%y")),
    DatePattern("MM.DD.YY", _numeric_date(".", 2), ("%m.%d.%y", "%d.%m.%y")),
    DatePattern("YYYY-MM-DD", re.compile(r"(?<!\d)\d{4}-\d{1,2}-\d{1,2}(?!\d)"), ("%Y-%m-%d",)),
    DatePattern(
        "Month DD, YYYY",
        re.compile(rf"\b{_MONTHS}\.?\s+\d{{1,2}},\s*\d{{4}}\b", re.IGNORECASE),
        ("%b %d, %Y", "%B %d, %Y"),
    ),
    DatePattern(
        "Month DD YYYY",
        re.compile(rf"\b{_MONTHS}\.?\s+\d{{1,2}}\s+\d{{4}}\b", re.IGNORECASE),
        ("%b %d %Y", "%B %d %Y"),
    ),
)

STORE_LABELS = (
    "store:",
    "shop:",
    "retailer:",
    "merchant:",
    "vendor:",
    "company:",
    "business:",
    "outlet:",
    "market:",
    "location:",
    "branch:",
    "franchise:",
    "chain:",
    "establishment:",
    "from:",
    "purchased at:",
    "bought at:",
    "dealer:",
    "distributor:",
)
STORE_LABEL_WINDOW = 50
STORE_HEADER_LINES = 8
STORE_EXCLUDED_WORDS = ("total", "date", "time", "receipt", "subtotal", "tax", "cashier", "register")

TITLE_LABELS = (
    "item:",
    "product:",
    "description:",
    "name:",
    "goods:",
    "merchandise:",
    "article:",
    "commodity:",
    "purchase:",
    "model:",
    "brand:",
    "type:",
    "category:",
    "service:",
    "work:",
    "labor:",
    "installation:",
    "delivery:",
)
TITLE_LABEL_WINDOW = 100
TITLE_EXCLUDED_WORDS = (
    "total",
    "date",
    "time",
    "receipt",
    "subtotal",
    "tax",
    "change",
    "cash",
    "cashier",
    "register",
)

WARRANTY_KEYWORDS = (
    "warranty",
    "guarantee",
    "coverage",
    "protection",
    "assurance",
    "guaranty",
    "warrant",
    "coverage period",
    "warranty period",
    "limited warranty",
    "extended warranty",
    "manufacturer warranty",
    "return policy",
    "exchange policy",
    "refund policy",
)
WARRANTY_CONTEXT_BEFORE = 30
WARRANTY_CONTEXT_AFTER = 80

PAYMENT_METHODS = (
    "cash",
    "credit card",
    "debit card",
    "visa",
    "mastercard",
    "amex",
    "american express",
    "paypal",
    "apple pay",
    "google pay",
    "check",
    "money order",
    "gift card",
    "store credit",
    "bank transfer",
    "venmo",
    "zelle",
    "bitcoin",
    "crypto",
    "contactless",
    "chip card",
    "swipe card",
    "tap to pay",
)

# Identifier token must contain a digit so "Receipt Total" is not a number.
_IDENTIFIER = r"([A-Z0-9-]*\d[A-Z0-9-]*)"

RECEIPT_NUMBER_PATTERNS: tuple[FieldPattern, ...] = tuple(
    FieldPattern(
        label,
        re.compile(_label(label) + r"\s*(?:#|no\.?|number|id)?[\s:#]*" + _IDENTIFIER, re.IGNORECASE),
    )
    for label in ("receipt", "transaction", "order", "invoice")
)

CASHIER_PATTERNS: tuple[FieldPattern, ...] = tuple(
    FieldPattern(label, re.compile(_label(label) + r"(?:\s*(?:name|#|id))?[\s:#]*([A-Za-z0-9]+)", re.IGNORECASE))
    for label in ("cashier", "clerk", "associate", "employee", "staff", "register")
)

ADDRESS_PATTERNS: tuple[FieldPattern, ...] = (
    FieldPattern("address", re.compile(r"\baddress\b[\s:]*([^\n]+)", re.IGNORECASE)),
    FieldPattern("location", re.compile(r"\blocation\b[\s:]*([^\n]+)", re.IGNORECASE)),
    FieldPattern(
        "street",
        re.compile(
            r"(\d+\s+[A-Za-z][A-Za-z ]*?\s(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Drive|Dr|"
            r"Lane|Ln|Way|Court|Ct|Place|Pl)\b\.?)",
            re.IGNORECASE,
        ),
    ),
)
MIN_ADDRESS_LENGTH = 11

PHONE_PATTERNS: tuple[FieldPattern, ...] = (
    FieldPattern("phone", re.compile(r"\bphone\b[\s:]*([\d\-() ]*\d)", re.IGNORECASE)),
    FieldPattern("tel", re.compile(r"\btel\b\.?[\s:]*([\d\-() ]*\d)", re.IGNORECASE)),
    FieldPattern("call", re.compile(r"\bcall\b[\s:]*([\d\-() ]*\d)", re.IGNORECASE)),
    FieldPattern("(555) 555-5555", re.compile(r"(\(\d{3}\)\s*\d{3}-\d{4})")),
    FieldPattern("555-555-5555", re.compile(r"(?<!\d)(\d{3}-\d{3}-\d{4})(?!\d)")),
    FieldPattern("555.555.5555", re.compile(r"(?<!\d)(\d{3}\.\d{3}\.\d{4})(?!\d)")),
)
MIN_PHONE_LENGTH = 10

WEBSITE_PATTERNS: tuple[FieldPattern, ...] = (
    FieldPattern("website", re.compile(r"\bwebsite\b[\s:]*(\S+)", re.IGNORECASE)),
    FieldPattern("web", re.compile(r"\bweb\b[\s:]*(\S+)", re.IGNORECASE)),
    FieldPattern("site", re.compile(r"\bsite\b[\s:]*(\S+)", re.IGNORECASE)),
    FieldPattern("url", re.compile(r"(https?://\S+)", re.IGNORECASE)),
    FieldPattern("www", re.compile(r"\b(www\.\S+)", re.IGNORECASE)),
)

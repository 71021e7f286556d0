"""Data models for receipt text extraction."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from PIL import Image

MONETARY_FIELDS = ("price", "tax_amount", "total_amount")


@dataclass(frozen=True)
class RecognizedLine:
    """A single line of recognized text (top candidate only)."""

    text: str
    confidence: float = 1.0


@dataclass(frozen=True)
class ReceiptData:
    """Structured purchase facts extracted from a receipt.

    Every structured field is best-effort: None means "could not determine".
    """

    raw_text: str
    title: str | None = None
    store: str | None = None
    price: Decimal | None = None
    purchase_date: date | None = None
    tax_amount: Decimal | None = None
    total_amount: Decimal | None = None
    payment_method: str | None = None
    warranty_info: str | None = None
    receipt_number: str | None = None
    cashier: str | None = None
    store_address: str | None = None
    store_phone: str | None = None
    store_website: str | None = None
    # True when purchase_date is the synthetic "today" rather than a parsed date.
    purchase_date_is_fallback: bool = False

    def __post_init__(self) -> None:
        for name in MONETARY_FIELDS:
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    def missing_fields(self) -> list[str]:
        """Names of structured fields left blank for manual entry."""
        skipped = {"raw_text", "purchase_date_is_fallback"}
        missing = [f.name for f in fields(self) if f.name not in skipped and getattr(self, f.name) is None]
        if self.purchase_date_is_fallback:
            missing.append("purchase_date")
        return missing

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe representation (Decimal as string, date as ISO)."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Decimal):
                value = str(value)
            elif isinstance(value, date):
                value = value.isoformat()
            result[f.name] = value
        return result


@dataclass
class DocumentText:
    """Text gathered from a document plus the rendered page images."""

    text: str
    page_count: int
    direct_text: str = ""
    ocr_text: str = ""
    page_images: list[Image.Image] = field(default_factory=list)


@dataclass(frozen=True)
class DocumentMetadata:
    """Information dictionary of a PDF document."""

    page_count: int
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    creator: str | None = None
    creation_date: str | None = None
    modification_date: str | None = None

"""Parse raw receipt text into structured ReceiptData."""

from collections.abc import Sequence

from receiptlens.domain.receipt import ReceiptData

from .date_utils import fallback_purchase_date
from .fields_parser import (
    _extract_cashier,
    _extract_date,
    _extract_payment_method,
    _extract_price,
    _extract_receipt_number,
    _extract_store,
    _extract_store_address,
    _extract_store_phone,
    _extract_store_website,
    _extract_tax_amount,
    _extract_title,
    _extract_total_amount,
    _extract_warranty_info,
)


class ReceiptFieldExtractor:
    """Heuristic field extraction over a block of recognized text.

    Stateless: each call to extract() is a pure function of the text, except
    that a receipt without a printed date gets today's date when
    `fallback_to_today` is enabled. Fields are extracted independently and
    are never cross-checked (price, tax and total may disagree).
    """

    def __init__(self, known_merchants: Sequence[str] = (), fallback_to_today: bool = True) -> None:
        """
        Args:
            known_merchants: Merchant names preferred over the store heuristics.
            fallback_to_today: Use today's date when no date is found; when
                False the purchase date is left as None.
        """
        self.known_merchants = tuple(known_merchants)
        self.fallback_to_today = fallback_to_today

    def extract(self, text: str) -> ReceiptData:
        """
        Extract purchase facts from recognized text.

        This is a best-effort parser - results should be manually reviewed.
        Missing fields are None; this method never raises on odd input.
        """
        purchase_date = _extract_date(text)
        date_is_fallback = False
        if purchase_date is None and self.fallback_to_today:
            purchase_date = fallback_purchase_date()
            date_is_fallback = True

        return ReceiptData(
            raw_text=text,
            title=_extract_title(text),
            store=_extract_store(text, self.known_merchants),
            price=_extract_price(text),
            purchase_date=purchase_date,
            purchase_date_is_fallback=date_is_fallback,
            tax_amount=_extract_tax_amount(text),
            total_amount=_extract_total_amount(text),
            payment_method=_extract_payment_method(text),
            warranty_info=_extract_warranty_info(text),
            receipt_number=_extract_receipt_number(text),
            cashier=_extract_cashier(text),
            store_address=_extract_store_address(text),
            store_phone=_extract_store_phone(text),
            store_website=_extract_store_website(text),
        )


def parse_receipt_text(
    text: str,
    known_merchants: Sequence[str] = (),
    fallback_to_today: bool = True,
) -> ReceiptData:
    """Convenience wrapper around ReceiptFieldExtractor.extract()."""
    return ReceiptFieldExtractor(known_merchants, fallback_to_today).extract(text)

"""
Flat, primitives-only product records for tabular export.

Amounts are stored as exact decimal strings (never floats) so a record read back
from a DataFrame or a spreadsheet compares equal to the one written.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

import pandas as pd

from amazon_product_api.models.product_item import ProductItem

_TRUE_STRINGS = {"true", "1", "yes", "y"}


@dataclass(frozen=True)
class FlatProductRecord:
    asin: str
    title: Optional[str]
    price_amount: Optional[str]
    price_currency: Optional[str]
    original_price_amount: Optional[str]
    discount_amount: Optional[str]
    discount_percentage: Optional[str]
    is_available: bool
    is_in_stock: bool
    has_prime: bool
    detail_page_url: Optional[str]
    image_url: Optional[str]

    @property
    def price(self) -> Optional[Decimal]:
        return Decimal(self.price_amount) if self.price_amount is not None else None

    @property
    def discount(self) -> Optional[Decimal]:
        return Decimal(self.discount_percentage) if self.discount_percentage is not None else None


def _amount(value: Optional[Decimal]) -> Optional[str]:
    return str(value) if value is not None else None


def _missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _text(value: Any) -> Optional[str]:
    return None if _missing(value) else str(value)


def _flag(value: Any) -> bool:
    if _missing(value):
        return False
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def to_flat_record(item: ProductItem) -> FlatProductRecord:
    price = item.price()
    original = item.original_price()
    discount = item.discount_amount()

    return FlatProductRecord(
        asin=item.asin or "",
        title=item.title,
        price_amount=_amount(price.amount) if price else None,
        price_currency=price.currency if price else None,
        original_price_amount=_amount(original.amount) if original else None,
        discount_amount=_amount(discount.amount) if discount else None,
        discount_percentage=_amount(item.discount_percentage()),
        is_available=bool(price and price.is_available),
        is_in_stock=item.is_in_stock(),
        has_prime=item.has_prime_offer(),
        detail_page_url=item.detail_page_url,
        image_url=item.image_url(),
    )


def from_flat_record(row: Mapping[str, Any]) -> FlatProductRecord:
    """Rebuild a record from a mapping (dict, DataFrame row). Unknown keys are ignored."""
    return FlatProductRecord(
        asin=_text(row.get("asin")) or "",
        title=_text(row.get("title")),
        price_amount=_text(row.get("price_amount")),
        price_currency=_text(row.get("price_currency")),
        original_price_amount=_text(row.get("original_price_amount")),
        discount_amount=_text(row.get("discount_amount")),
        discount_percentage=_text(row.get("discount_percentage")),
        is_available=_flag(row.get("is_available")),
        is_in_stock=_flag(row.get("is_in_stock")),
        has_prime=_flag(row.get("has_prime")),
        detail_page_url=_text(row.get("detail_page_url")),
        image_url=_text(row.get("image_url")),
    )


FLAT_COLUMNS = [f.name for f in fields(FlatProductRecord)]


def products_to_dataframe(items: Iterable[ProductItem]) -> pd.DataFrame:
    rows = [asdict(to_flat_record(item)) for item in items]
    return pd.DataFrame(rows, columns=FLAT_COLUMNS, dtype=object)


def dataframe_to_records(df: pd.DataFrame) -> list[FlatProductRecord]:
    return [from_flat_record(row) for row in df.to_dict(orient="records")]

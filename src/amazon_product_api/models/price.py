from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping, Optional

DEFAULT_CURRENCY = "EUR"

_SWAP_SEPARATORS = str.maketrans(",.", ".,")


def to_decimal(value: Any) -> Decimal:
    """Convert an API amount (number or numeric string) to Decimal without float widening."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal("0")
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return result if result.is_finite() else Decimal("0")


def _group(amount: Decimal, decimals: int) -> str:
    """Round half-up and group thousands with ',' and decimals with '.'."""
    quantum = Decimal(1).scaleb(-decimals)
    rounded = amount.quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded:,.{decimals}f}"


def format_price(amount: Any, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Fixed per-currency display rules:
      EUR -> "€ 1.234,56"   USD -> "$1,234.56"   GBP -> "£1,234.56"
      JPY -> "¥2,999"       other -> "<CODE> 1,234.56"
    """
    value = to_decimal(amount)
    if currency == "EUR":
        return "€ " + _group(value, 2).translate(_SWAP_SEPARATORS)
    if currency == "USD":
        return "$" + _group(value, 2)
    if currency == "GBP":
        return "£" + _group(value, 2)
    if currency == "JPY":
        return "¥" + _group(value, 0)
    return f"{currency} " + _group(value, 2)


@dataclass(frozen=True)
class Price:
    amount: Decimal
    currency: str = DEFAULT_CURRENCY
    display_value: Optional[str] = None
    price_per_unit: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Price":
        """Build from a PA-API money record (Amount, Currency, DisplayAmount/DisplayValue)."""
        return cls(
            amount=to_decimal(data.get("Amount")),
            currency=data.get("Currency") or DEFAULT_CURRENCY,
            display_value=data.get("DisplayAmount") or data.get("DisplayValue"),
            price_per_unit=data.get("PricePerUnit"),
        )

    @property
    def formatted(self) -> str:
        return format_price(self.amount, self.currency)

    @property
    def display(self) -> str:
        return self.display_value or self.formatted

    @property
    def is_available(self) -> bool:
        return self.amount > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "amount": self.amount,
            "currency": self.currency,
            "display_value": self.display,
            "formatted": self.formatted,
            "price_per_unit": self.price_per_unit,
            "is_available": self.is_available,
        }

    def __str__(self) -> str:
        return self.display

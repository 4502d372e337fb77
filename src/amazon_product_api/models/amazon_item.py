from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Optional

from amazon_product_api.client.config import DEFAULT_TRACKING_PLACEHOLDER
from amazon_product_api.models.product_item import ProductItem

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class AmazonItem:
    """
    Flat item record in the shape older consumers expect
    (title/price/fullprice/saving/link/image + Prime pricing).
    """
    asin: str
    title: str
    price: Decimal
    fullprice: Decimal
    saving: int  # whole-number discount percentage
    link: str
    image: str
    has_prime_price: bool
    prime_prices: dict[str, Decimal] = field(default_factory=dict)
    product: Optional[ProductItem] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_product(
        cls,
        item: ProductItem,
        partner_tag: str,
        tracking_placeholder: str = DEFAULT_TRACKING_PLACEHOLDER,
    ) -> "AmazonItem":
        current = item.price()
        price = current.amount if current else Decimal("0")

        original = item.original_price()
        fullprice = original.amount if original else price

        pct = item.discount_percentage()
        saving = int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP)) if pct else 0

        link = item.detail_page_url or ""
        if partner_tag:
            link = link.replace(partner_tag, tracking_placeholder)

        has_prime = item.has_prime_offer()

        return cls(
            asin=item.asin or "",
            title=item.title or "",
            price=price,
            fullprice=fullprice,
            saving=saving,
            link=link,
            image=item.image_url("Large") or "",
            has_prime_price=has_prime,
            prime_prices=_prime_prices(price, fullprice) if has_prime else {},
            product=item,
        )

    @classmethod
    def from_api_data(
        cls,
        data: Mapping[str, Any],
        partner_tag: str,
        tracking_placeholder: str = DEFAULT_TRACKING_PLACEHOLDER,
    ) -> "AmazonItem":
        return cls.from_product(ProductItem(data), partner_tag, tracking_placeholder)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "asin": self.asin,
            "price": self.price,
            "fullprice": self.fullprice,
            "saving": self.saving,
            "link": self.link,
            "images": self.image,
            "hasPrimeExclusive": self.has_prime_price,
            "primePrices": dict(self.prime_prices),
        }


def _prime_prices(price: Decimal, fullprice: Decimal) -> dict[str, Decimal]:
    saving = fullprice - price
    pct = saving / fullprice * 100 if fullprice > 0 else Decimal("0")
    return {
        "price": price,
        "saving": saving.quantize(_CENT, rounding=ROUND_HALF_UP),
        "fullprice": fullprice,
        "saving_percentage": pct.quantize(_CENT, rounding=ROUND_HALF_UP),
    }

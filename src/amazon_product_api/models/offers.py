"""
Offer collection and price resolution over a raw PA-API item document.

An item can carry offers in two schemas at once:
  - "Offers"   (Offers.Listings):   price at Price.{Amount,Currency}, SavingBasis on the listing
  - "OffersV2" (OffersV2.Listings): price at Price.Money, SavingBasis at Price.SavingBasis.Money,
                                    Prime deals under DealDetails

Offers are tagged with their schema when collected; every field lookup branches on
that tag. Nothing is cached: each query re-reads the raw document.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Mapping, Optional

from amazon_product_api.models.price import Price


class OfferSchema(str, Enum):
    OFFERS = "Offers"
    OFFERS_V2 = "OffersV2"


class PricePolicy(str, Enum):
    BUY_BOX = "buy_box"            # price of the buy-box winner only
    LOWEST_PRICE = "lowest_price"  # minimum price across all offers


PRIME_EXCLUSIVE = "PRIME_EXCLUSIVE"


def dig(data: Any, *keys: str) -> Any:
    """Walk nested mappings; None as soon as a level is missing or not a mapping."""
    for key in keys:
        if not isinstance(data, Mapping):
            return None
        data = data.get(key)
    return data


def _mapping(value: Any) -> Optional[Mapping[str, Any]]:
    return value if isinstance(value, Mapping) else None


def _price_or_none(record: Optional[Mapping[str, Any]]) -> Optional[Price]:
    if record is None or record.get("Amount") is None:
        return None
    return Price.from_api(record)


@dataclass(frozen=True)
class TaggedOffer:
    schema: OfferSchema
    data: Mapping[str, Any]

    @property
    def price_record(self) -> Optional[Mapping[str, Any]]:
        if self.schema is OfferSchema.OFFERS_V2:
            return _mapping(dig(self.data, "Price", "Money"))
        return _mapping(dig(self.data, "Price"))

    @property
    def saving_basis_record(self) -> Optional[Mapping[str, Any]]:
        if self.schema is OfferSchema.OFFERS_V2:
            return _mapping(dig(self.data, "Price", "SavingBasis", "Money"))
        return _mapping(dig(self.data, "SavingBasis"))

    @property
    def price(self) -> Optional[Price]:
        return _price_or_none(self.price_record)

    @property
    def amount(self) -> Optional[Decimal]:
        price = self.price
        return price.amount if price is not None else None

    @property
    def saving_basis(self) -> Optional[Price]:
        return _price_or_none(self.saving_basis_record)

    @property
    def is_buy_box_winner(self) -> bool:
        return self.data.get("IsBuyBoxWinner") is True

    @property
    def deal_details(self) -> Optional[Mapping[str, Any]]:
        return _mapping(self.data.get("DealDetails"))

    @property
    def is_prime(self) -> bool:
        # DealDetails and ProgramEligibility sit at the same path in both schemas.
        if dig(self.data, "DealDetails", "AccessType") == PRIME_EXCLUSIVE:
            return True
        if dig(self.data, "ProgramEligibility", "IsPrimeExclusive") is True:
            return True
        return dig(self.data, "ProgramEligibility", "IsPrimeEligible") is True

    @property
    def availability_message(self) -> Optional[str]:
        return dig(self.data, "Availability", "Message")

    @property
    def is_in_stock(self) -> bool:
        if dig(self.data, "Availability", "Type") == "Now":
            return True
        message = self.availability_message
        return isinstance(message, str) and "in stock" in message.lower()

    @property
    def condition(self) -> Optional[str]:
        return dig(self.data, "Condition", "Value")

    @property
    def merchant_info(self) -> Optional[Mapping[str, Any]]:
        return _mapping(self.data.get("MerchantInfo"))

    @property
    def delivery_info(self) -> Optional[Mapping[str, Any]]:
        return _mapping(self.data.get("DeliveryInfo"))


def collect_offers(raw: Mapping[str, Any]) -> list[TaggedOffer]:
    """All listings, Offers before OffersV2, each in discovery order."""
    out: list[TaggedOffer] = []
    for schema in (OfferSchema.OFFERS, OfferSchema.OFFERS_V2):
        listings = dig(raw, schema.value, "Listings")
        if not isinstance(listings, list):
            continue
        out.extend(TaggedOffer(schema, listing) for listing in listings if isinstance(listing, Mapping))
    return out


def summary_highest_prices(raw: Mapping[str, Any]) -> list[Price]:
    summaries = dig(raw, "Offers", "Summaries")
    if not isinstance(summaries, list):
        return []
    prices = (_price_or_none(_mapping(dig(s, "HighestPrice"))) for s in summaries)
    return [p for p in prices if p is not None]


class OfferResolver:
    def __init__(self, raw: Mapping[str, Any], policy: PricePolicy = PricePolicy.BUY_BOX) -> None:
        self.raw = raw
        self.policy = PricePolicy(policy)

    def offers(self) -> list[TaggedOffer]:
        return collect_offers(self.raw)

    def buy_box_offer(self) -> Optional[TaggedOffer]:
        """First offer flagged IsBuyBoxWinner; None when no offer wins (never offer zero)."""
        for offer in self.offers():
            if offer.is_buy_box_winner:
                return offer
        return None

    def lowest_price_offer(self) -> Optional[TaggedOffer]:
        priced = [o for o in self.offers() if o.price is not None]
        if not priced:
            return None
        return min(priced, key=lambda o: o.price.amount)

    def selected_offer(self) -> Optional[TaggedOffer]:
        if self.policy is PricePolicy.LOWEST_PRICE:
            return self.lowest_price_offer()
        return self.buy_box_offer()

    def current_price(self) -> Optional[Price]:
        offer = self.selected_offer()
        return offer.price if offer is not None else None

    def original_price(self) -> Optional[Price]:
        """
        Pre-discount price:
          1. saving basis of the selected offer, if strictly above the current price
          2. else the highest Offers.Summaries price strictly above the current price
          3. else the current price itself (no discount)
        """
        current = self.current_price()
        if current is None:
            return None

        offer = self.selected_offer()
        basis = offer.saving_basis if offer is not None else None
        if basis is not None and basis.amount > current.amount:
            return basis

        higher = [p for p in summary_highest_prices(self.raw) if p.amount > current.amount]
        if higher:
            return max(higher, key=lambda p: p.amount)

        return current

    def discount_amount(self) -> Optional[Price]:
        current = self.current_price()
        original = self.original_price()
        if current is None or original is None:
            return None

        amount = original.amount - current.amount
        if amount <= 0:
            return None
        return Price(amount=amount, currency=current.currency)

    def discount_percentage(self) -> Optional[Decimal]:
        original = self.original_price()
        discount = self.discount_amount()
        if original is None or discount is None or original.amount <= 0:
            return None
        pct = discount.amount / original.amount * 100
        return pct.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

    def has_prime(self) -> bool:
        return any(o.is_prime for o in self.offers())

    def is_in_stock(self) -> bool:
        return any(o.is_in_stock for o in self.offers())

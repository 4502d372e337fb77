from __future__ import annotations

import copy
from decimal import Decimal
from typing import Any, Mapping, Optional

from amazon_product_api.models.offers import OfferResolver, PricePolicy, TaggedOffer, dig
from amazon_product_api.models.price import Price


class ProductItem:
    """
    One item from a GetItems response.

    Owns a private copy of the raw item document; every accessor is a read over it.
    Price-related accessors go through OfferResolver with the item's PricePolicy.
    """

    def __init__(self, data: Mapping[str, Any], policy: PricePolicy = PricePolicy.BUY_BOX) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(data))
        self.policy = PricePolicy(policy)

    @property
    def _offers(self) -> OfferResolver:
        return OfferResolver(self._data, self.policy)

    # ---------- identity / content ----------
    @property
    def asin(self) -> Optional[str]:
        return self._data.get("ASIN")

    @property
    def title(self) -> Optional[str]:
        return dig(self._data, "ItemInfo", "Title", "DisplayValue")

    @property
    def features(self) -> list[str]:
        values = dig(self._data, "ItemInfo", "Features", "DisplayValues")
        return list(values) if isinstance(values, list) else []

    @property
    def description(self) -> Optional[str]:
        features = self.features
        return ". ".join(features) if features else None

    @property
    def brand(self) -> Optional[str]:
        return dig(self._data, "ItemInfo", "ByLineInfo", "Brand", "DisplayValue")

    @property
    def manufacturer(self) -> Optional[str]:
        return dig(self._data, "ItemInfo", "ByLineInfo", "Manufacturer", "DisplayValue")

    @property
    def detail_page_url(self) -> Optional[str]:
        return self._data.get("DetailPageURL")

    def image_url(self, size: str = "Large") -> Optional[str]:
        return dig(self._data, "Images", "Primary", size, "URL")

    def all_images(self, size: str = "Large") -> list[str]:
        """Primary image first, then variants that have the requested size."""
        images: list[str] = []
        primary = self.image_url(size)
        if primary:
            images.append(primary)

        variants = dig(self._data, "Images", "Variants")
        if isinstance(variants, list):
            for variant in variants:
                url = dig(variant, size, "URL")
                if url:
                    images.append(url)
        return images

    @property
    def technical_info(self) -> dict[str, Any]:
        return dict(dig(self._data, "ItemInfo", "TechnicalInfo") or {})

    @property
    def dimensions(self) -> Optional[dict[str, Any]]:
        return self.technical_info.get("ItemDimensions")

    @property
    def weight(self) -> Optional[dict[str, Any]]:
        return self.technical_info.get("ItemWeight")

    @property
    def classifications(self) -> dict[str, Any]:
        return dict(dig(self._data, "ItemInfo", "Classifications") or {})

    @property
    def rating(self) -> Optional[float]:
        value = dig(self._data, "CustomerReviews", "StarRating", "Value")
        return float(value) if value is not None else None

    @property
    def review_count(self) -> Optional[int]:
        value = dig(self._data, "CustomerReviews", "Count")
        return int(value) if value is not None else None

    # ---------- offers / pricing ----------
    def all_offers(self) -> list[TaggedOffer]:
        return self._offers.offers()

    def buy_box_offer(self) -> Optional[TaggedOffer]:
        return self._offers.buy_box_offer()

    def selected_offer(self) -> Optional[TaggedOffer]:
        return self._offers.selected_offer()

    def price(self) -> Optional[Price]:
        return self._offers.current_price()

    def original_price(self) -> Optional[Price]:
        return self._offers.original_price()

    def discount_amount(self) -> Optional[Price]:
        return self._offers.discount_amount()

    def discount_percentage(self) -> Optional[Decimal]:
        return self._offers.discount_percentage()

    def has_prime_offer(self) -> bool:
        return self._offers.has_prime()

    def is_in_stock(self) -> bool:
        return self._offers.is_in_stock()

    def availability(self) -> Optional[str]:
        offer = self.selected_offer()
        return offer.availability_message if offer else None

    def condition(self) -> Optional[str]:
        offer = self.selected_offer()
        return offer.condition if offer else None

    def merchant_info(self) -> Optional[Mapping[str, Any]]:
        offer = self.selected_offer()
        return offer.merchant_info if offer else None

    def delivery_info(self) -> Optional[Mapping[str, Any]]:
        offer = self.selected_offer()
        return offer.delivery_info if offer else None

    # ---------- deals (OffersV2) ----------
    def deal_info(self) -> Optional[Mapping[str, Any]]:
        offer = self.selected_offer()
        return offer.deal_details if offer else None

    def deal_badge(self) -> Optional[str]:
        return dig(self.deal_info(), "Badge")

    def deal_start_time(self) -> Optional[str]:
        return dig(self.deal_info(), "StartTime")

    def deal_end_time(self) -> Optional[str]:
        return dig(self.deal_info(), "EndTime")

    def is_prime_exclusive_deal(self) -> bool:
        return dig(self.deal_info(), "AccessType") == "PRIME_EXCLUSIVE"

    def has_active_deal(self) -> bool:
        if self.deal_info() is not None:
            return True
        return self.discount_amount() is not None

    def savings_basis_type(self) -> Optional[str]:
        offer = self.selected_offer()
        return dig(offer.data, "Price", "SavingBasis", "SavingBasisType") if offer else None

    def savings_basis_type_label(self) -> Optional[str]:
        offer = self.selected_offer()
        return dig(offer.data, "Price", "SavingBasis", "SavingBasisTypeLabel") if offer else None

    # ---------- raw / export ----------
    def raw_data(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)

    def to_dict(self) -> dict[str, Any]:
        price = self.price()
        original = self.original_price()
        discount = self.discount_amount()

        return {
            "asin": self.asin,
            "title": self.title,
            "brand": self.brand,
            "manufacturer": self.manufacturer,
            "description": self.description,
            "features": self.features,
            "image_url": self.image_url(),
            "all_images": self.all_images(),
            "price": price.to_dict() if price else None,
            "original_price": original.to_dict() if original else None,
            "discount_amount": discount.to_dict() if discount else None,
            "discount_percentage": self.discount_percentage(),
            "savings_basis_type": self.savings_basis_type(),
            "savings_basis_type_label": self.savings_basis_type_label(),
            "has_prime": self.has_prime_offer(),
            "availability": self.availability(),
            "is_in_stock": self.is_in_stock(),
            "condition": self.condition(),
            "merchant_info": self.merchant_info(),
            "delivery_info": self.delivery_info(),
            "detail_page_url": self.detail_page_url,
            "dimensions": self.dimensions,
            "weight": self.weight,
            "classifications": self.classifications,
            "rating": self.rating,
            "review_count": self.review_count,
            "has_active_deal": self.has_active_deal(),
            "deal_info": self.deal_info(),
            "deal_badge": self.deal_badge(),
            "deal_start_time": self.deal_start_time(),
            "deal_end_time": self.deal_end_time(),
            "is_prime_exclusive_deal": self.is_prime_exclusive_deal(),
        }

    def __repr__(self) -> str:
        return f"ProductItem(asin={self.asin!r}, policy={self.policy.value!r})"

"""
Convenience lookups on top of ProductApiClient.

Every method catches AmazonApiError and returns an error payload instead of
raising, so callers can render results for a batch without a try/except each.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Optional

from amazon_product_api.client.errors import AmazonApiError
from amazon_product_api.client.paapi_client import ProductApiClient
from amazon_product_api.models.price import format_price

logger = logging.getLogger(__name__)

ASIN_RE = re.compile(r"[A-Z0-9]{10}")

# Checked in order; the last one matches any bare 10-char path segment.
ASIN_URL_PATTERNS = [
    re.compile(r"/dp/([A-Z0-9]{10})"),
    re.compile(r"/gp/product/([A-Z0-9]{10})"),
    re.compile(r"/exec/obidos/ASIN/([A-Z0-9]{10})"),
    re.compile(r"asin=([A-Z0-9]{10})"),
    re.compile(r"/([A-Z0-9]{10})(?:/|\?|$)"),
]


def _error_payload(e: AmazonApiError) -> dict[str, Any]:
    return {"success": False, "error": str(e), "code": e.status_code}


def _display(price) -> Optional[str]:
    return price.display if price else None


class AmazonHelper:
    def __init__(self, client: ProductApiClient) -> None:
        self.client = client

    def simple_product_info(self, asin: str) -> dict[str, Any]:
        try:
            product = self.client.get_item(asin)
        except AmazonApiError as e:
            logger.warning(f"simple_product_info({asin}) failed: {e}")
            return _error_payload(e)

        return {
            "success": True,
            "asin": product.asin,
            "title": product.title,
            "brand": product.brand,
            "price": _display(product.price()),
            "original_price": _display(product.original_price()),
            "discount_percentage": product.discount_percentage(),
            "image": product.image_url(),
            "prime": product.has_prime_offer(),
            "in_stock": product.is_in_stock(),
            "url": product.detail_page_url,
        }

    def compare_products(self, asins: Iterable[str]) -> dict[str, Any]:
        """Products sorted by current price, cheapest first (unpriced items count as 0)."""
        try:
            products = self.client.get_items(asins)
        except AmazonApiError as e:
            logger.warning(f"compare_products failed: {e}")
            return {"error": str(e), "products": []}

        results = []
        for product in products:
            price = product.price()
            original = product.original_price()
            results.append(
                {
                    "asin": product.asin,
                    "title": product.title,
                    "brand": product.brand,
                    "current_price": price.amount if price else Decimal("0"),
                    "current_price_display": price.display if price else "N/A",
                    "original_price": original.amount if original else Decimal("0"),
                    "discount_percentage": product.discount_percentage(),
                    "prime": product.has_prime_offer(),
                    "in_stock": product.is_in_stock(),
                }
            )

        results.sort(key=lambda r: r["current_price"])
        return {"products": results, "count": len(results)}

    def find_discounted_products(self, asins: Iterable[str], min_discount: float = 10) -> dict[str, Any]:
        """Products discounted by at least `min_discount` percent, biggest discount first."""
        threshold = Decimal(str(min_discount))
        try:
            products = self.client.get_items(asins)
        except AmazonApiError as e:
            logger.warning(f"find_discounted_products failed: {e}")
            return {"error": str(e), "products": []}

        discounted = []
        for product in products:
            pct = product.discount_percentage()
            if pct is None or pct < threshold:
                continue
            discounted.append(
                {
                    "asin": product.asin,
                    "title": product.title,
                    "current_price": _display(product.price()) or "N/A",
                    "original_price": _display(product.original_price()) or "N/A",
                    "discount_percentage": pct,
                    "savings": _display(product.discount_amount()),
                    "prime": product.has_prime_offer(),
                    "image": product.image_url(),
                }
            )

        discounted.sort(key=lambda r: r["discount_percentage"], reverse=True)
        return {"products": discounted, "count": len(discounted)}

    def find_prime_products(self, asins: Iterable[str]) -> dict[str, Any]:
        try:
            products = self.client.get_items(asins)
        except AmazonApiError as e:
            logger.warning(f"find_prime_products failed: {e}")
            return {"error": str(e), "products": []}

        prime = [
            {
                "asin": product.asin,
                "title": product.title,
                "brand": product.brand,
                "price": _display(product.price()) or "N/A",
                "in_stock": product.is_in_stock(),
                "image": product.image_url(),
                "url": product.detail_page_url,
            }
            for product in products
            if product.has_prime_offer()
        ]
        return {"products": prime, "count": len(prime)}

    def generate_product_report(self, asin: str) -> dict[str, Any]:
        try:
            product = self.client.get_item(asin)
        except AmazonApiError as e:
            logger.warning(f"generate_product_report({asin}) failed: {e}")
            return _error_payload(e)

        price = product.price()
        original = product.original_price()
        discount = product.discount_amount()
        images = product.all_images()

        report = {
            "basic_info": {
                "asin": product.asin,
                "title": product.title,
                "brand": product.brand,
                "manufacturer": product.manufacturer,
                "condition": product.condition(),
                "url": product.detail_page_url,
            },
            "pricing": {
                "current_price": price.to_dict() if price else None,
                "original_price": original.to_dict() if original else None,
                "discount_amount": discount.to_dict() if discount else None,
                "discount_percentage": product.discount_percentage(),
            },
            "availability": {
                "in_stock": product.is_in_stock(),
                "availability_message": product.availability(),
                "prime_eligible": product.has_prime_offer(),
                "has_active_deal": product.has_active_deal(),
            },
            "media": {
                "primary_image": product.image_url(),
                "all_images": images,
                "image_count": len(images),
            },
            "details": {
                "description": product.description,
                "features": product.features,
                "dimensions": product.dimensions,
                "weight": product.weight,
                "classifications": product.classifications,
            },
            "merchant": {
                "merchant_info": product.merchant_info(),
                "delivery_info": product.delivery_info(),
            },
            "generated_at": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        }
        return {"success": True, "report": report}

    def compatible_item(self, asin: str) -> dict[str, Any]:
        try:
            item = self.client.get_amazon_item(asin)
        except AmazonApiError as e:
            logger.warning(f"compatible_item({asin}) failed: {e}")
            return _error_payload(e)
        return {"success": True, "item": item, "data": item.to_dict()}

    @staticmethod
    def format_price(amount: Any, currency: str = "EUR") -> str:
        return format_price(amount, currency)

    @staticmethod
    def is_valid_asin(asin: str) -> bool:
        return bool(ASIN_RE.fullmatch(asin or ""))

    @staticmethod
    def extract_asin_from_url(url: str) -> Optional[str]:
        for pattern in ASIN_URL_PATTERNS:
            m = pattern.search(url or "")
            if m:
                return m.group(1)
        return None

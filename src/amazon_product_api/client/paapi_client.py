"""
Product Advertising API 5.0 client (GetItems).

One synchronous, signed POST per call. No retries: a failed attempt surfaces
immediately as AmazonApiError / AuthenticationError / InvalidParameterError.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional, Sequence

import requests

from amazon_product_api.auth.aws_signature import AwsSignature, SigningRequest, amz_timestamp, sha256_hex
from amazon_product_api.client.config import ConfigSource, load_paapi_config, validate_timeout
from amazon_product_api.client.errors import AmazonApiError, InvalidParameterError, classify_error
from amazon_product_api.models.amazon_item import AmazonItem
from amazon_product_api.models.offers import PricePolicy, dig
from amazon_product_api.models.product_item import ProductItem

logger = logging.getLogger(__name__)

GET_ITEMS_PATH = "/paapi5/getitems"
GET_ITEMS_TARGET = "com.amazon.paapi5.v1.ProductAdvertisingAPIv1.GetItems"
CONTENT_TYPE = "application/json; charset=UTF-8"
CONTENT_ENCODING = "amz-1.0"
PARTNER_TYPE = "Associates"
MAX_ASINS_PER_REQUEST = 10

DEFAULT_RESOURCES = [
    "ItemInfo.Title",
    "ItemInfo.ByLineInfo",
    "ItemInfo.ProductInfo",
    "ItemInfo.TechnicalInfo",
    "ItemInfo.Features",
    "ItemInfo.ContentInfo",
    "ItemInfo.Classifications",
    "Images.Primary.Small",
    "Images.Primary.Medium",
    "Images.Primary.Large",
    "Images.Variants.Small",
    "Images.Variants.Medium",
    "Images.Variants.Large",
    "Offers.Listings.Price",
    "Offers.Listings.SavingBasis",
    "Offers.Listings.ProgramEligibility.IsPrimeExclusive",
    "Offers.Summaries.HighestPrice",
    "OffersV2.Listings.Price",
    "OffersV2.Listings.DealDetails",
    "OffersV2.Listings.MerchantInfo",
    "OffersV2.Listings.Availability",
    "OffersV2.Listings.Condition",
    "OffersV2.Listings.LoyaltyPoints",
    "OffersV2.Listings.IsBuyBoxWinner",
    "OffersV2.Listings.ViolatesMAP",
]

# Where the item list may live in a response, checked in this order.
ITEMS_PATHS = (
    ("ItemsResult", "Items"),
    ("GetItemsResponse", "Items"),
    ("Items",),
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _first_error(data: Any) -> tuple[Optional[str], str]:
    errors = dig(data, "Errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        return errors[0].get("Code"), errors[0].get("Message") or "Unknown API error"
    return None, "Unknown API error"


class ProductApiClient:
    def __init__(
        self,
        config: ConfigSource,
        session: Optional[requests.Session] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.config = load_paapi_config(config)
        self._timeout = self.config.timeout
        self.signer = AwsSignature(self.config.access_key, self.config.secret_key, self.config.region)
        self._clock = clock or _utc_now

        if session is None:
            session = requests.Session()
            session.headers.update({"Accept": "application/json"})
        self._session = session

        logger.info(f"Initialized ProductApiClient for {self.config.marketplace} ({self.config.host})")

    @property
    def timeout(self) -> int:
        return self._timeout

    @timeout.setter
    def timeout(self, value: int) -> None:
        self._timeout = validate_timeout(value)

    @property
    def endpoint(self) -> str:
        return f"https://{self.config.host}{GET_ITEMS_PATH}"

    # ---------- operations ----------
    def get_items(
        self,
        asins: Iterable[str],
        resources: Optional[Sequence[str]] = None,
        offer_count: int = 1,
        policy: PricePolicy = PricePolicy.BUY_BOX,
    ) -> list[ProductItem]:
        """
        Fetch up to 10 items by ASIN. Records come back in response order.

        Raises:
            InvalidParameterError: empty ASIN list or more than 10 ASINs (before any network call)
            AuthenticationError: credentials rejected
            AmazonApiError: transport failure, bad response, throttling, server error
        """
        asins = list(asins)
        if not asins:
            raise InvalidParameterError("ASIN list cannot be empty")
        if len(asins) > MAX_ASINS_PER_REQUEST:
            raise InvalidParameterError(f"Maximum {MAX_ASINS_PER_REQUEST} ASINs allowed per request")

        payload = self.build_get_items_payload(asins, resources, offer_count)
        logger.info(f"GetItems: {len(asins)} ASIN(s) on {self.config.marketplace}")

        data = self._post(GET_ITEMS_PATH, GET_ITEMS_TARGET, payload)
        raw_items = self._extract_items(data)

        logger.info(f"GetItems: received {len(raw_items)} item(s)")
        return [ProductItem(raw, policy) for raw in raw_items]

    def get_item(
        self,
        asin: str,
        resources: Optional[Sequence[str]] = None,
        offer_count: int = 1,
        policy: PricePolicy = PricePolicy.BUY_BOX,
    ) -> ProductItem:
        items = self.get_items([asin], resources, offer_count, policy)
        if not items:
            raise AmazonApiError(f"No item returned for ASIN {asin}")
        return items[0]

    def get_amazon_items(
        self,
        asins: Iterable[str],
        resources: Optional[Sequence[str]] = None,
        offer_count: int = 1,
    ) -> list[AmazonItem]:
        return [
            AmazonItem.from_product(item, self.config.partner_tag, self.config.tracking_placeholder)
            for item in self.get_items(asins, resources, offer_count)
        ]

    def get_amazon_item(
        self,
        asin: str,
        resources: Optional[Sequence[str]] = None,
        offer_count: int = 1,
    ) -> AmazonItem:
        item = self.get_item(asin, resources, offer_count)
        return AmazonItem.from_product(item, self.config.partner_tag, self.config.tracking_placeholder)

    # ---------- request building ----------
    def build_get_items_payload(
        self,
        asins: Sequence[str],
        resources: Optional[Sequence[str]] = None,
        offer_count: int = 1,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "ItemIds": list(asins),
            "ItemIdType": "ASIN",
            "Marketplace": self.config.marketplace,
            "PartnerTag": self.config.partner_tag,
            "PartnerType": PARTNER_TYPE,
            "OfferCount": offer_count,
            "Resources": list(resources) if resources else list(DEFAULT_RESOURCES),
        }
        if self.config.language:
            payload["LanguagesOfPreference"] = [self.config.language]
        return payload

    def build_headers(self, path: str, target: str, body: bytes) -> dict[str, str]:
        """All signed headers plus Authorization. `body` must be the exact bytes that will be sent."""
        timestamp = amz_timestamp(self._clock())
        headers = {
            "Host": self.config.host,
            "Content-Type": CONTENT_TYPE,
            "Content-Encoding": CONTENT_ENCODING,
            "X-Amz-Target": target,
            "X-Amz-Content-Sha256": sha256_hex(body),
            "X-Amz-Date": timestamp,
        }
        authorization = self.signer.sign(
            SigningRequest(method="POST", uri_path=path, payload=body, timestamp=timestamp, headers=headers)
        )
        logger.debug(f"Signed {target} at {timestamp} (signed headers: {', '.join(sorted(headers))})")
        return {**headers, "Authorization": authorization}

    # ---------- transport ----------
    def _post(self, path: str, target: str, payload: dict[str, Any]) -> dict[str, Any]:
        body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        headers = self.build_headers(path, target, body)
        url = f"https://{self.config.host}{path}"

        try:
            resp = self._session.post(url, data=body, headers=headers, timeout=self._timeout)
        except requests.exceptions.Timeout as e:
            raise AmazonApiError(f"Request timed out after {self._timeout} seconds ({url})") from e
        except requests.exceptions.ConnectionError as e:
            raise AmazonApiError(f"Could not connect to {self.config.host}: {e}") from e
        except requests.exceptions.RequestException as e:
            raise AmazonApiError(f"HTTP request to {url} failed: {e}") from e

        return self._handle_response(resp)

    def _handle_response(self, resp: requests.Response) -> dict[str, Any]:
        status = resp.status_code
        ok = 200 <= status < 300

        try:
            data = resp.json(parse_float=Decimal)
        except ValueError as e:
            if not ok:
                raise classify_error(None, status, f"HTTP {status}", resp.text) from e
            raise AmazonApiError(f"Invalid JSON response (HTTP {status})", status, response_body=resp.text) from e

        if not ok:
            code, message = _first_error(data)
            raise classify_error(code, status, message, data)

        if not isinstance(data, dict):
            raise AmazonApiError(f"Unexpected response shape: {type(data).__name__}", status, response_body=data)

        return data

    def _extract_items(self, data: dict[str, Any]) -> list[dict[str, Any]]:
        items = None
        for path in ITEMS_PATHS:
            candidate = dig(data, *path)
            if isinstance(candidate, list):
                items = candidate
                break

        errors = data.get("Errors")
        if items is None:
            if errors:
                # Error payload on HTTP 200: classify by code alone.
                code, message = _first_error(data)
                raise classify_error(code, 0, message, data)
            raise AmazonApiError("Invalid response format: missing ItemsResult.Items", 200, response_body=data)

        if isinstance(errors, list):
            for err in errors:
                if isinstance(err, dict):
                    logger.warning(f"GetItems partial error {err.get('Code')}: {err.get('Message')}")

        return [item for item in items if isinstance(item, dict)]

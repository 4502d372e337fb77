from decimal import Decimal

import pytest

from amazon_product_api.client.errors import AmazonApiError, AuthenticationError
from amazon_product_api.helpers.amazon_helper import AmazonHelper
from amazon_product_api.models.amazon_item import AmazonItem
from amazon_product_api.models.product_item import ProductItem


def product(asin, amount, saving_basis=None, prime=False):
    price = {"Money": {"Amount": amount, "Currency": "EUR"}}
    if saving_basis is not None:
        price["SavingBasis"] = {"Money": {"Amount": saving_basis, "Currency": "EUR"}}
    listing = {"Price": price, "IsBuyBoxWinner": True}
    if prime:
        listing["DealDetails"] = {"AccessType": "PRIME_EXCLUSIVE"}
    return ProductItem(
        {
            "ASIN": asin,
            "DetailPageURL": f"https://www.amazon.it/dp/{asin}?tag=example-21",
            "ItemInfo": {"Title": {"DisplayValue": f"Item {asin}"}},
            "OffersV2": {"Listings": [listing]},
        }
    )


CATALOG = {
    "B000000001": product("B000000001", 50, saving_basis=100, prime=True),   # 50% off
    "B000000002": product("B000000002", 20),                                 # no discount
    "B000000003": product("B000000003", 90, saving_basis=100),               # 10% off
    "B000000004": product("B000000004", 35, saving_basis=50, prime=True),    # 30% off
}


class DummyClient:
    def __init__(self, error=None):
        self.error = error

    def get_items(self, asins):
        if self.error:
            raise self.error
        return [CATALOG[a] for a in asins]

    def get_item(self, asin):
        return self.get_items([asin])[0]

    def get_amazon_item(self, asin):
        return AmazonItem.from_product(self.get_item(asin), "example-21")


def test_simple_product_info():
    info = AmazonHelper(DummyClient()).simple_product_info("B000000001")
    assert info["success"] is True
    assert info["price"] == "€ 50,00"
    assert info["original_price"] == "€ 100,00"
    assert info["discount_percentage"] == Decimal("50.0")
    assert info["prime"] is True


def test_simple_product_info_error_payload():
    helper = AmazonHelper(DummyClient(error=AuthenticationError("Authentication failed", 401)))
    assert helper.simple_product_info("B000000001") == {
        "success": False,
        "error": "Authentication failed",
        "code": 401,
    }


def test_compare_products_sorted_by_price():
    result = AmazonHelper(DummyClient()).compare_products(list(CATALOG))
    assert result["count"] == 4
    assert [p["asin"] for p in result["products"]] == ["B000000002", "B000000004", "B000000001", "B000000003"]


def test_find_discounted_products_threshold_and_order():
    helper = AmazonHelper(DummyClient())

    result = helper.find_discounted_products(list(CATALOG))
    assert [p["asin"] for p in result["products"]] == ["B000000001", "B000000004", "B000000003"]

    result = helper.find_discounted_products(list(CATALOG), min_discount=30)
    assert [p["asin"] for p in result["products"]] == ["B000000001", "B000000004"]
    assert result["products"][0]["savings"] == "€ 50,00"


def test_find_prime_products():
    result = AmazonHelper(DummyClient()).find_prime_products(list(CATALOG))
    assert {p["asin"] for p in result["products"]} == {"B000000001", "B000000004"}


def test_batch_helpers_return_error_payload():
    helper = AmazonHelper(DummyClient(error=AmazonApiError("Server Error", 500)))
    assert helper.compare_products(["B000000001"]) == {"error": "Server Error", "products": []}
    assert helper.find_discounted_products(["B000000001"])["products"] == []
    assert helper.find_prime_products(["B000000001"])["error"] == "Server Error"


def test_generate_product_report():
    result = AmazonHelper(DummyClient()).generate_product_report("B000000004")
    assert result["success"] is True
    report = result["report"]
    assert report["basic_info"]["asin"] == "B000000004"
    assert report["pricing"]["discount_percentage"] == Decimal("30.0")
    assert report["availability"]["prime_eligible"] is True
    assert report["media"]["image_count"] == 0
    assert "generated_at" in report


def test_compatible_item():
    result = AmazonHelper(DummyClient()).compatible_item("B000000001")
    assert result["success"] is True
    assert result["data"]["link"] == "https://www.amazon.it/dp/B000000001?tag=booBLZTRKood"
    assert result["data"]["saving"] == 50


@pytest.mark.parametrize(
    "asin,valid",
    [("B08N5WRWNW", True), ("0123456789", True), ("b08n5wrwnw", False), ("B08N5WRWN", False), ("B08N5WRWNW\n", False)],
)
def test_is_valid_asin(asin, valid):
    assert AmazonHelper.is_valid_asin(asin) is valid


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://www.amazon.it/Echo-Dot/dp/B08N5WRWNW/ref=sr_1_1", "B08N5WRWNW"),
        ("https://www.amazon.com/gp/product/B07XJ8C8F5?th=1", "B07XJ8C8F5"),
        ("https://www.amazon.com/exec/obidos/ASIN/B000123456/", "B000123456"),
        ("https://www.amazon.de/s?k=x&asin=B0ABCDEF12", "B0ABCDEF12"),
        ("https://amzn.eu/B0ABCDEF12", "B0ABCDEF12"),
        ("https://www.amazon.it/s?k=echo", None),
    ],
)
def test_extract_asin_from_url(url, expected):
    assert AmazonHelper.extract_asin_from_url(url) == expected


def test_format_price_shortcut():
    assert AmazonHelper.format_price(Decimal("1234.5"), "EUR") == "€ 1.234,50"
    assert AmazonHelper.format_price(2999, "JPY") == "¥2,999"

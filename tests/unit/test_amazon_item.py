from decimal import Decimal

from amazon_product_api.models.amazon_item import AmazonItem


def discounted_item(prime=False):
    listing = {
        "Price": {
            "Money": {"Amount": 29.99, "Currency": "EUR"},
            "SavingBasis": {"Money": {"Amount": 39.99, "Currency": "EUR"}},
        },
        "IsBuyBoxWinner": True,
    }
    if prime:
        listing["DealDetails"] = {"AccessType": "PRIME_EXCLUSIVE"}
    return {
        "ASIN": "B08N5WRWNW",
        "DetailPageURL": "https://www.amazon.it/dp/B08N5WRWNW?tag=example-21&linkCode=ogi",
        "ItemInfo": {"Title": {"DisplayValue": "Echo Dot"}},
        "Images": {"Primary": {"Large": {"URL": "https://m.media-amazon.com/images/I/large.jpg"}}},
        "OffersV2": {"Listings": [listing]},
    }


def test_compat_record_fields():
    item = AmazonItem.from_api_data(discounted_item(), partner_tag="example-21")

    assert item.asin == "B08N5WRWNW"
    assert item.title == "Echo Dot"
    assert item.price == Decimal("29.99")
    assert item.fullprice == Decimal("39.99")
    assert item.saving == 25
    assert item.link == "https://www.amazon.it/dp/B08N5WRWNW?tag=booBLZTRKood&linkCode=ogi"
    assert item.image == "https://m.media-amazon.com/images/I/large.jpg"
    assert item.has_prime_price is False
    assert item.prime_prices == {}


def test_custom_tracking_placeholder():
    item = AmazonItem.from_api_data(discounted_item(), partner_tag="example-21", tracking_placeholder="TRK")
    assert "tag=TRK" in item.link


def test_prime_prices_computed_for_prime_items():
    item = AmazonItem.from_api_data(discounted_item(prime=True), partner_tag="example-21")
    assert item.has_prime_price is True
    assert item.prime_prices == {
        "price": Decimal("29.99"),
        "saving": Decimal("10.00"),
        "fullprice": Decimal("39.99"),
        "saving_percentage": Decimal("25.01"),
    }


def test_unpriced_item_defaults():
    item = AmazonItem.from_api_data({"ASIN": "B000000001"}, partner_tag="example-21")
    assert item.price == Decimal("0")
    assert item.fullprice == Decimal("0")
    assert item.saving == 0
    assert item.link == ""
    assert item.image == ""


def test_to_dict_uses_legacy_keys():
    d = AmazonItem.from_api_data(discounted_item(prime=True), partner_tag="example-21").to_dict()
    assert set(d) == {"title", "asin", "price", "fullprice", "saving", "link", "images", "hasPrimeExclusive", "primePrices"}
    assert d["hasPrimeExclusive"] is True

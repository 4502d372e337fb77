import logging
import sys

from amazon_product_api.client.config import load_paapi_config_from_env
from amazon_product_api.client.errors import AmazonApiError
from amazon_product_api.client.paapi_client import ProductApiClient

logging.basicConfig(level=logging.INFO)

asin = sys.argv[1] if len(sys.argv) > 1 else "B08N5WRWNW"

client = ProductApiClient(load_paapi_config_from_env())
try:
    item = client.get_item(asin)
except AmazonApiError as e:
    print(f"PA-API auth check FAILED: {type(e).__name__} [{e.status_code} {e.error_code}] {e}")
    sys.exit(1)

print("PA-API auth check OK.", item.asin, "|", item.title, "|", item.price())

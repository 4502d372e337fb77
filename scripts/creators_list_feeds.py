import logging
import sys

from amazon_product_api.creators import CreatorsApiClient, CreatorsApiError, load_creators_config_from_env

logging.basicConfig(level=logging.INFO)

marketplace = sys.argv[1] if len(sys.argv) > 1 else "www.amazon.com"

client = CreatorsApiClient(load_creators_config_from_env())
try:
    feeds = client.list_feeds(marketplace)
except CreatorsApiError as e:
    print(f"Creators API call FAILED: [{e.status_code}] {e}\n{e.body}")
    sys.exit(1)

print(f"{len(feeds)} feed(s) for {marketplace}")
for feed in feeds:
    print(f"  {feed.feed_name}  size={feed.size}  updated={feed.last_updated}  md5={feed.md5}")

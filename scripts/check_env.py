import sys

from amazon_product_api.client.config import ENV_KEYS, missing_env_keys
from amazon_product_api.creators.config import CREATORS_ENV_KEYS, missing_creators_env_keys

paapi_missing = missing_env_keys()
creators_missing = missing_creators_env_keys()

for title, names, missing in (
    ("PA-API", ENV_KEYS.values(), paapi_missing),
    ("Creators API", CREATORS_ENV_KEYS.values(), creators_missing),
):
    print(f"{title}: {'ready' if not missing else 'incomplete'}")
    for name in missing:
        print(f"  missing: {name}")
    print(f"  known variables: {', '.join(names)}")

# Either API being fully configured is enough to run something.
sys.exit(0 if not paapi_missing or not creators_missing else 1)

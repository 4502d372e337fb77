from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from dotenv import load_dotenv

from amazon_product_api.client.errors import InvalidParameterError
from amazon_product_api.client.marketplaces import get_marketplace, marketplace_for_host

DEFAULT_TIMEOUT = 30
MIN_TIMEOUT = 1
MAX_TIMEOUT = 300
DEFAULT_TRACKING_PLACEHOLDER = "booBLZTRKood"

ConfigSource = Union["PaapiConfig", Mapping[str, Any], str, Path]


@dataclass(frozen=True)
class PaapiConfig:
    access_key: str
    secret_key: str
    partner_tag: str
    marketplace: str
    host: str
    region: str
    language: Optional[str] = None
    timeout: int = DEFAULT_TIMEOUT
    tracking_placeholder: str = DEFAULT_TRACKING_PLACEHOLDER


def validate_timeout(value: Any) -> int:
    try:
        timeout = int(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"timeout must be between {MIN_TIMEOUT} and {MAX_TIMEOUT} seconds")
    if isinstance(value, bool) or not MIN_TIMEOUT <= timeout <= MAX_TIMEOUT:
        raise InvalidParameterError(f"timeout must be between {MIN_TIMEOUT} and {MAX_TIMEOUT} seconds")
    return timeout


def _pick(raw: Mapping[str, Any], camel: str, snake: str) -> Optional[str]:
    for key in (camel, snake):
        value = raw.get(key)
        if value is not None and str(value).strip() != "":
            return str(value).strip()
    return None


def _require(raw: Mapping[str, Any], camel: str, snake: str) -> str:
    value = _pick(raw, camel, snake)
    if value is None:
        raise InvalidParameterError(f"{camel} is required")
    return value


def _read_config_file(path: Path) -> Mapping[str, Any]:
    if not path.is_file():
        raise InvalidParameterError(f"Configuration file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidParameterError(f"Invalid JSON in configuration file: {path}") from e
    if not isinstance(data, dict):
        raise InvalidParameterError(f"Invalid JSON in configuration file: {path} (expected an object)")
    return data


def config_from_mapping(raw: Mapping[str, Any]) -> PaapiConfig:
    """
    Validate a config mapping (camelCase or snake_case keys) and build a PaapiConfig.

    Marketplace and host are resolved against the marketplace table:
      - marketplace given -> host/region/language come from the table unless overridden
      - only a known host given -> marketplace is looked up from the host
      - only an unknown host given -> region must be supplied explicitly
    """
    access_key = _require(raw, "accessKey", "access_key")
    secret_key = _require(raw, "secretKey", "secret_key")
    partner_tag = _require(raw, "partnerTag", "partner_tag")

    marketplace_name = _pick(raw, "marketplace", "marketplace")
    host = _pick(raw, "host", "host")
    region = _pick(raw, "region", "region")
    language = _pick(raw, "language", "language")

    if marketplace_name is None and host is None:
        raise InvalidParameterError("Either marketplace or host is required")

    if marketplace_name is not None:
        marketplace = get_marketplace(marketplace_name)
        if marketplace is None:
            raise InvalidParameterError(f"Invalid marketplace: {marketplace_name}")
    else:
        marketplace = marketplace_for_host(host)

    if marketplace is not None:
        marketplace_name = marketplace.domain
        host = host or marketplace.host
        region = region or marketplace.region
        language = language or marketplace.language
    else:
        if region is None:
            raise InvalidParameterError(f"region is required for unknown host: {host}")
        marketplace_name = host.replace("webservices.", "www.", 1)

    timeout = validate_timeout(raw["timeout"]) if raw.get("timeout") is not None else DEFAULT_TIMEOUT

    return PaapiConfig(
        access_key=access_key,
        secret_key=secret_key,
        partner_tag=partner_tag,
        marketplace=marketplace_name,
        host=host,
        region=region,
        language=language,
        timeout=timeout,
        tracking_placeholder=_pick(raw, "trackingPlaceholder", "tracking_placeholder") or DEFAULT_TRACKING_PLACEHOLDER,
    )


def load_paapi_config(source: ConfigSource) -> PaapiConfig:
    """Accept an existing PaapiConfig, a mapping, or a path to a JSON config file."""
    if isinstance(source, PaapiConfig):
        return source
    if isinstance(source, (str, Path)):
        return config_from_mapping(_read_config_file(Path(source)))
    return config_from_mapping(source)


ENV_KEYS = {
    "access_key": "PAAPI_ACCESS_KEY",
    "secret_key": "PAAPI_SECRET_KEY",
    "partner_tag": "PAAPI_PARTNER_TAG",
    "marketplace": "PAAPI_MARKETPLACE",
    "host": "PAAPI_HOST",
    "region": "PAAPI_REGION",
    "language": "PAAPI_LANGUAGE",
    "timeout": "PAAPI_TIMEOUT",
    "tracking_placeholder": "PAAPI_TRACKING_PLACEHOLDER",
}


def load_paapi_config_from_env() -> PaapiConfig:
    """
    Load PA-API config from environment variables (and .env, if present).

    This function performs only validation + object construction.
    It does NOT make any network calls.
    """
    load_dotenv(override=False)
    raw = {key: os.getenv(env_name) for key, env_name in ENV_KEYS.items()}
    return config_from_mapping({k: v for k, v in raw.items() if v is not None})


def missing_env_keys() -> list[str]:
    """Required PAAPI_* variables that are unset or blank. Marketplace may be replaced by host."""
    load_dotenv(override=False)

    def is_set(key: str) -> bool:
        return bool((os.getenv(ENV_KEYS[key]) or "").strip())

    missing = [ENV_KEYS[key] for key in ("access_key", "secret_key", "partner_tag") if not is_set(key)]
    if not is_set("marketplace") and not is_set("host"):
        missing.append(f"{ENV_KEYS['marketplace']} or {ENV_KEYS['host']}")
    return missing

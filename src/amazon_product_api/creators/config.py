"""
Creators API configuration.

Credential versions map to regional Cognito token endpoints:
  2.1 -> North America, 2.2 -> Europe, 2.3 -> Far East
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from amazon_product_api.creators.errors import CreatorsConfigError

DEFAULT_HOST = "https://creatorsapi.amazon"
DEFAULT_SCOPE = "creatorsapi/default"
DEFAULT_TIMEOUT = 30
DEFAULT_USER_AGENT = "amazon-product-api/creators"

TOKEN_ENDPOINTS = {
    "2.1": "https://creatorsapi.auth.us-east-1.amazoncognito.com/oauth2/token",
    "2.2": "https://creatorsapi.auth.eu-south-2.amazoncognito.com/oauth2/token",
    "2.3": "https://creatorsapi.auth.us-west-2.amazoncognito.com/oauth2/token",
}


@dataclass
class CreatorsConfig:
    """Mutable: CreatorsApiClient rebuilds its token manager when a credential field changes."""
    credential_id: Optional[str] = None
    credential_secret: Optional[str] = None
    version: Optional[str] = None
    auth_endpoint: Optional[str] = None
    host: str = DEFAULT_HOST
    user_agent: str = DEFAULT_USER_AGENT
    timeout: int = DEFAULT_TIMEOUT


@dataclass(frozen=True)
class OAuth2Config:
    credential_id: str
    credential_secret: str
    version: str
    auth_endpoint: Optional[str] = None
    scope: str = DEFAULT_SCOPE

    @property
    def token_endpoint(self) -> str:
        if self.auth_endpoint:
            return self.auth_endpoint
        try:
            return TOKEN_ENDPOINTS[self.version]
        except KeyError:
            raise CreatorsConfigError(
                f"Unsupported credential version: {self.version} (expected one of {', '.join(TOKEN_ENDPOINTS)})"
            ) from None


def oauth2_config_from(config: CreatorsConfig) -> OAuth2Config:
    if not config.credential_id or not config.credential_secret or not config.version:
        raise CreatorsConfigError(
            "Missing OAuth2 configuration. Please specify credential_id, credential_secret, and version."
        )
    return OAuth2Config(
        credential_id=config.credential_id,
        credential_secret=config.credential_secret,
        version=config.version,
        auth_endpoint=config.auth_endpoint,
    )


CREATORS_ENV_KEYS = {
    "credential_id": "CREATORS_CREDENTIAL_ID",
    "credential_secret": "CREATORS_CREDENTIAL_SECRET",
    "version": "CREATORS_VERSION",
    "auth_endpoint": "CREATORS_AUTH_ENDPOINT",
    "host": "CREATORS_HOST",
}
REQUIRED_CREATORS_KEYS = ("credential_id", "credential_secret", "version")


def load_creators_config_from_env() -> CreatorsConfig:
    load_dotenv(override=False)
    return CreatorsConfig(
        credential_id=os.getenv(CREATORS_ENV_KEYS["credential_id"]),
        credential_secret=os.getenv(CREATORS_ENV_KEYS["credential_secret"]),
        version=os.getenv(CREATORS_ENV_KEYS["version"]),
        auth_endpoint=os.getenv(CREATORS_ENV_KEYS["auth_endpoint"]) or None,
        host=os.getenv(CREATORS_ENV_KEYS["host"]) or DEFAULT_HOST,
    )


def missing_creators_env_keys() -> list[str]:
    config = load_creators_config_from_env()
    missing = [CREATORS_ENV_KEYS[key] for key in REQUIRED_CREATORS_KEYS if not getattr(config, key)]
    if config.version and not config.auth_endpoint and config.version not in TOKEN_ENDPOINTS:
        missing.append(f"{CREATORS_ENV_KEYS['auth_endpoint']} (no built-in endpoint for version {config.version})")
    return missing

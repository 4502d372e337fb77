"""
Creators API client (catalog feeds).

Authentication: OAuth2 client-credentials bearer token, sent as
  Authorization: Bearer <token>, Version <credential version>
Every call also carries the target locale in the `x-marketplace` header.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from amazon_product_api.creators.config import CreatorsConfig, oauth2_config_from
from amazon_product_api.creators.errors import CreatorsApiError, CreatorsConfigError
from amazon_product_api.creators.token_manager import OAuth2TokenManager

logger = logging.getLogger(__name__)

LIST_FEEDS_PATH = "/catalog/v1/listFeeds"
GET_FEED_PATH = "/catalog/v1/getFeed"
MAX_MARKETPLACE_LENGTH = 1000


@dataclass(frozen=True)
class FeedInfo:
    feed_name: str
    size: Optional[int] = None
    last_updated: Optional[str] = None
    md5: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "FeedInfo":
        size = data.get("size")
        return cls(
            feed_name=data.get("feedName") or data.get("feed_name") or "",
            size=int(size) if size is not None else None,
            last_updated=data.get("lastUpdated") or data.get("last_updated"),
            md5=data.get("md5"),
        )


def validate_marketplace(marketplace: Any, operation: str) -> str:
    if marketplace is None:
        raise CreatorsConfigError(f"Missing the required parameter marketplace when calling {operation}")
    marketplace = str(marketplace)
    if len(marketplace) > MAX_MARKETPLACE_LENGTH:
        raise CreatorsConfigError(
            f"invalid length for marketplace when calling {operation}, "
            f"must be smaller than or equal to {MAX_MARKETPLACE_LENGTH}"
        )
    if not marketplace.strip():
        raise CreatorsConfigError(f"invalid value for marketplace when calling {operation}, must not be blank")
    return marketplace


class CreatorsApiClient:
    def __init__(self, config: CreatorsConfig, session: Optional[requests.Session] = None) -> None:
        self.config = config
        if session is None:
            session = requests.Session()
            session.headers.update({"Accept": "application/json"})
        self._session = session

        self._token_manager: Optional[OAuth2TokenManager] = None
        self._token_manager_key: Optional[tuple] = None

    def _credentials_key(self) -> tuple:
        c = self.config
        return (c.credential_id, c.credential_secret, c.version, c.auth_endpoint)

    def token_manager(self) -> OAuth2TokenManager:
        """Current token manager, rebuilt whenever any credential field on the config changed."""
        key = self._credentials_key()
        if self._token_manager is None or key != self._token_manager_key:
            oauth_config = oauth2_config_from(self.config)
            if self._token_manager is not None:
                logger.info("Creators API credentials changed; rebuilding token manager")
            self._token_manager = OAuth2TokenManager(oauth_config, self._session, timeout=self.config.timeout)
            self._token_manager_key = key
        return self._token_manager

    def _headers(self, marketplace: str) -> dict[str, str]:
        token = self.token_manager().get_token()
        headers = {
            "Authorization": f"Bearer {token}, Version {self.config.version}",
            "x-marketplace": marketplace,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.config.user_agent:
            headers["User-Agent"] = self.config.user_agent
        return headers

    def _post(self, path: str, marketplace: str, body: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        url = f"{self.config.host.rstrip('/')}{path}"
        headers = self._headers(marketplace)
        logger.info(f"Creators API POST {path} ({marketplace})")

        try:
            resp = self._session.post(url, json=body or {}, headers=headers, timeout=self.config.timeout)
        except requests.exceptions.Timeout as e:
            raise CreatorsApiError(f"Request timed out after {self.config.timeout} seconds ({url})") from e
        except requests.exceptions.RequestException as e:
            raise CreatorsApiError(f"HTTP request to {url} failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise CreatorsApiError(
                f"[{resp.status_code}] Error calling {path}",
                resp.status_code,
                resp.headers,
                resp.text,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise CreatorsApiError(f"Invalid JSON response from {path}", resp.status_code, resp.headers, resp.text) from e

        if not isinstance(data, dict):
            raise CreatorsApiError(f"Unexpected response shape from {path}", resp.status_code, resp.headers, data)
        return data

    def list_feeds(self, marketplace: str) -> list[FeedInfo]:
        marketplace = validate_marketplace(marketplace, "list_feeds")
        data = self._post(LIST_FEEDS_PATH, marketplace)
        feeds = data.get("feeds") or data.get("Feeds") or []
        return [FeedInfo.from_api(f) for f in feeds if isinstance(f, dict)]

    def get_feed(self, marketplace: str, feed_name: str) -> dict[str, Any]:
        marketplace = validate_marketplace(marketplace, "get_feed")
        if not feed_name or not str(feed_name).strip():
            raise CreatorsConfigError("Missing the required parameter feed_name when calling get_feed")
        return self._post(GET_FEED_PATH, marketplace, {"feedName": feed_name})

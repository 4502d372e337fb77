from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import requests

from amazon_product_api.creators.config import OAuth2Config
from amazon_product_api.creators.errors import CreatorsApiError

logger = logging.getLogger(__name__)

# Tokens are treated as expired this many seconds early.
EXPIRY_MARGIN_S = 60
DEFAULT_EXPIRES_IN_S = 3600


class OAuth2TokenManager:
    """Client-credentials grant with an in-memory token cache."""

    def __init__(
        self,
        config: OAuth2Config,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.timeout = timeout
        self._session = session or requests.Session()
        self._clock = clock
        self._token: Optional[str] = None
        self._expires_at: float = 0.0

    def is_token_valid(self) -> bool:
        return self._token is not None and self._clock() < self._expires_at

    def clear_token(self) -> None:
        self._token = None
        self._expires_at = 0.0

    def get_token(self) -> str:
        if self.is_token_valid():
            return self._token
        return self._refresh()

    def _refresh(self) -> str:
        url = self.config.token_endpoint
        logger.info(f"Requesting Creators API token (version {self.config.version})")

        try:
            resp = self._session.post(
                url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.config.credential_id,
                    "client_secret": self.config.credential_secret,
                    "scope": self.config.scope,
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise CreatorsApiError(f"Token request to {url} failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise CreatorsApiError(
                f"Token request failed with HTTP {resp.status_code}",
                resp.status_code,
                resp.headers,
                resp.text,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise CreatorsApiError("Invalid JSON in token response", resp.status_code, resp.headers, resp.text) from e

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise CreatorsApiError("access_token missing in token response", resp.status_code, resp.headers, data)

        expires_in = int(data.get("expires_in") or DEFAULT_EXPIRES_IN_S)
        self._token = token
        self._expires_at = self._clock() + expires_in - EXPIRY_MARGIN_S
        logger.debug(f"Creators API token cached for {expires_in - EXPIRY_MARGIN_S}s")
        return token

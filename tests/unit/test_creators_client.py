import json

import pytest
import requests

from amazon_product_api.creators import (
    CreatorsApiClient,
    CreatorsApiError,
    CreatorsConfig,
    CreatorsConfigError,
    FeedInfo,
    OAuth2Config,
    OAuth2TokenManager,
)
from amazon_product_api.creators.config import TOKEN_ENDPOINTS, missing_creators_env_keys

EU_TOKEN_URL = TOKEN_ENDPOINTS["2.2"]


def make_response(status, payload=None, text=None):
    resp = requests.Response()
    resp.status_code = status
    resp._content = (text if text is not None else json.dumps(payload)).encode("utf-8")
    resp.encoding = "utf-8"
    return resp


class RoutingSession:
    """Token endpoints hand out numbered tokens; every other URL gets `api_response`."""

    def __init__(self, api_response=None, token_status=200, expires_in=3600):
        self.api_response = api_response
        self.token_status = token_status
        self.expires_in = expires_in
        self.token_calls = []
        self.api_calls = []

    def post(self, url, data=None, json=None, headers=None, timeout=None):
        if "amazoncognito.com" in url or url.endswith("/token"):
            self.token_calls.append({"url": url, "data": data})
            n = len(self.token_calls)
            return make_response(self.token_status, {"access_token": f"tok-{n}", "expires_in": self.expires_in})
        self.api_calls.append({"url": url, "json": json, "headers": headers})
        return self.api_response


def eu_config(**overrides):
    cfg = CreatorsConfig(credential_id="cid", credential_secret="csecret", version="2.2")
    for k, v in overrides.items():
        setattr(cfg, k, v)
    return cfg


def test_token_endpoint_per_version_and_override():
    assert OAuth2Config("a", "b", "2.1").token_endpoint == TOKEN_ENDPOINTS["2.1"]
    assert OAuth2Config("a", "b", "2.3").token_endpoint == TOKEN_ENDPOINTS["2.3"]
    assert OAuth2Config("a", "b", "2.2", auth_endpoint="https://auth.example/token").token_endpoint == (
        "https://auth.example/token"
    )
    with pytest.raises(CreatorsConfigError, match="Unsupported credential version"):
        OAuth2Config("a", "b", "9.9").token_endpoint


def test_token_manager_caches_until_margin():
    now = [1000.0]
    session = RoutingSession(expires_in=3600)
    tm = OAuth2TokenManager(OAuth2Config("cid", "csecret", "2.2"), session, clock=lambda: now[0])

    assert tm.get_token() == "tok-1"
    now[0] += 3600 - 61
    assert tm.get_token() == "tok-1"
    now[0] += 2
    assert tm.get_token() == "tok-2"

    call = session.token_calls[0]
    assert call["url"] == EU_TOKEN_URL
    assert call["data"]["grant_type"] == "client_credentials"
    assert call["data"]["client_id"] == "cid"
    assert call["data"]["scope"] == "creatorsapi/default"


def test_token_manager_clear_token_forces_refresh():
    session = RoutingSession()
    tm = OAuth2TokenManager(OAuth2Config("cid", "csecret", "2.2"), session)
    tm.get_token()
    tm.clear_token()
    assert not tm.is_token_valid()
    assert tm.get_token() == "tok-2"


def test_token_failure_raises():
    tm = OAuth2TokenManager(OAuth2Config("cid", "csecret", "2.2"), RoutingSession(token_status=400))
    with pytest.raises(CreatorsApiError) as exc:
        tm.get_token()
    assert exc.value.status_code == 400


def test_list_feeds_sends_auth_and_marketplace_headers():
    feeds = {
        "feeds": [
            {"feedName": "deals", "size": 1024, "lastUpdated": "2025-01-01T00:00:00Z", "md5": "abc"},
            {"feedName": "bestsellers"},
        ]
    }
    session = RoutingSession(api_response=make_response(200, feeds))
    client = CreatorsApiClient(eu_config(), session=session)

    result = client.list_feeds("www.amazon.it")

    assert result == [
        FeedInfo(feed_name="deals", size=1024, last_updated="2025-01-01T00:00:00Z", md5="abc"),
        FeedInfo(feed_name="bestsellers"),
    ]
    call = session.api_calls[0]
    assert call["url"] == "https://creatorsapi.amazon/catalog/v1/listFeeds"
    assert call["headers"]["Authorization"] == "Bearer tok-1, Version 2.2"
    assert call["headers"]["x-marketplace"] == "www.amazon.it"


def test_get_feed_posts_feed_name():
    session = RoutingSession(api_response=make_response(200, {"feedName": "deals", "url": "https://dl/x"}))
    client = CreatorsApiClient(eu_config(), session=session)

    assert client.get_feed("www.amazon.it", "deals") == {"feedName": "deals", "url": "https://dl/x"}
    assert session.api_calls[0]["url"].endswith("/catalog/v1/getFeed")
    assert session.api_calls[0]["json"] == {"feedName": "deals"}


def test_token_reused_across_calls_and_rebuilt_on_credential_change():
    session = RoutingSession(api_response=make_response(200, {"feeds": []}))
    cfg = eu_config()
    client = CreatorsApiClient(cfg, session=session)

    client.list_feeds("www.amazon.it")
    client.list_feeds("www.amazon.it")
    first_manager = client.token_manager()
    assert len(session.token_calls) == 1

    cfg.credential_secret = "rotated"
    client.list_feeds("www.amazon.it")
    assert client.token_manager() is not first_manager
    assert len(session.token_calls) == 2
    assert session.api_calls[-1]["headers"]["Authorization"] == "Bearer tok-2, Version 2.2"


def test_version_change_rebuilds_and_uses_new_endpoint():
    session = RoutingSession(api_response=make_response(200, {"feeds": []}))
    cfg = eu_config()
    client = CreatorsApiClient(cfg, session=session)
    client.list_feeds("www.amazon.it")

    cfg.version = "2.1"
    client.list_feeds("www.amazon.com")
    assert session.token_calls[-1]["url"] == TOKEN_ENDPOINTS["2.1"]
    assert session.api_calls[-1]["headers"]["Authorization"].endswith("Version 2.1")


def test_missing_credentials():
    client = CreatorsApiClient(CreatorsConfig(credential_id="cid"), session=RoutingSession())
    with pytest.raises(CreatorsConfigError, match="Missing OAuth2 configuration"):
        client.list_feeds("www.amazon.it")


@pytest.mark.parametrize("marketplace", ["", "   ", "x" * 1001, None])
def test_invalid_marketplace_rejected(marketplace):
    session = RoutingSession(api_response=make_response(200, {"feeds": []}))
    client = CreatorsApiClient(eu_config(), session=session)
    with pytest.raises(CreatorsConfigError):
        client.list_feeds(marketplace)
    assert session.api_calls == []


def test_marketplace_of_exactly_1000_chars_accepted():
    session = RoutingSession(api_response=make_response(200, {"feeds": []}))
    CreatorsApiClient(eu_config(), session=session).list_feeds("x" * 1000)
    assert len(session.api_calls) == 1


def test_non_2xx_raises_with_status_and_body():
    session = RoutingSession(api_response=make_response(404, {"message": "feed not found"}))
    client = CreatorsApiClient(eu_config(), session=session)

    with pytest.raises(CreatorsApiError) as exc:
        client.get_feed("www.amazon.it", "missing")
    assert exc.value.status_code == 404
    assert "feed not found" in exc.value.body


def test_malformed_json_raises():
    session = RoutingSession(api_response=make_response(200, text="not-json"))
    with pytest.raises(CreatorsApiError, match="Invalid JSON"):
        CreatorsApiClient(eu_config(), session=session).list_feeds("www.amazon.it")


def test_missing_creators_env_keys(monkeypatch):
    monkeypatch.setattr("amazon_product_api.creators.config.load_dotenv", lambda **kwargs: False)
    for k in ["CREATORS_CREDENTIAL_ID", "CREATORS_CREDENTIAL_SECRET", "CREATORS_VERSION", "CREATORS_AUTH_ENDPOINT"]:
        monkeypatch.delenv(k, raising=False)
    monkeypatch.setenv("CREATORS_CREDENTIAL_ID", "cid")

    assert missing_creators_env_keys() == ["CREATORS_CREDENTIAL_SECRET", "CREATORS_VERSION"]

    monkeypatch.setenv("CREATORS_CREDENTIAL_SECRET", "secret")
    monkeypatch.setenv("CREATORS_VERSION", "9.9")
    assert missing_creators_env_keys() == [
        "CREATORS_AUTH_ENDPOINT (no built-in endpoint for version 9.9)"
    ]

    monkeypatch.setenv("CREATORS_AUTH_ENDPOINT", "https://auth.example/oauth2/token")
    assert missing_creators_env_keys() == []

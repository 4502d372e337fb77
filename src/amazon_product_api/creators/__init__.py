"""Creators API (OAuth2) client."""

from .client import CreatorsApiClient, FeedInfo
from .config import CreatorsConfig, OAuth2Config, load_creators_config_from_env, missing_creators_env_keys
from .errors import CreatorsApiError, CreatorsConfigError
from .token_manager import OAuth2TokenManager

__all__ = [
    "CreatorsApiClient",
    "FeedInfo",
    "CreatorsConfig",
    "OAuth2Config",
    "load_creators_config_from_env",
    "missing_creators_env_keys",
    "CreatorsApiError",
    "CreatorsConfigError",
    "OAuth2TokenManager",
]

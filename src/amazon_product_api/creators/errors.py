from __future__ import annotations

from typing import Any, Mapping, Optional


class CreatorsConfigError(ValueError):
    """Raised when Creators API credentials or settings are missing or invalid."""
    pass


class CreatorsApiError(Exception):
    """Raised when the Creators API (or its token endpoint) returns an error."""

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        headers: Optional[Mapping[str, str]] = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.headers = dict(headers or {})
        self.body = body

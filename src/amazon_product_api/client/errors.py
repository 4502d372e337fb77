from __future__ import annotations

from typing import Any, Optional


class AmazonApiError(Exception):
    """Raised when the Product Advertising API call fails or returns an unusable response."""

    def __init__(
        self,
        message: str = "",
        status_code: int = 0,
        error_code: Optional[str] = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.response_body = response_body


class AuthenticationError(AmazonApiError):
    """Raised when credentials are rejected (bad, expired or mismatched keys)."""


class InvalidParameterError(AmazonApiError, ValueError):
    """Raised for caller mistakes: bad configuration, ASIN count, timeout range."""


# Provider error codes -> error kind. Anything not listed falls back to the HTTP status.
PARAMETER_ERROR_CODES = frozenset(
    {
        "InvalidParameterValue",
        "InvalidParameterCombination",
        "MissingParameter",
        "InvalidInput",
        "InvalidItemId",
        "TooManyItemIds",
        "UnknownOperation",
        "ItemNotAccessible",
    }
)

AUTHENTICATION_ERROR_CODES = frozenset(
    {
        "InvalidSignature",
        "IncompleteSignature",
        "SignatureDoesNotMatch",
        "UnrecognizedClient",
        "InvalidClientTokenId",
        "InvalidPartnerTag",
        "InvalidAssociate",
        "AccessDenied",
        "AccessDeniedException",
        "AccessDeniedAwsUsers",
        "ExpiredToken",
        "MissingAuthenticationToken",
    }
)

THROTTLING_ERROR_CODES = frozenset(
    {
        "TooManyRequests",
        "RequestThrottled",
        "ThrottlingException",
        "RequestLimitExceeded",
    }
)


def classify_error(error_code: Optional[str], status_code: int, message: str, body: Any = None) -> AmazonApiError:
    """Build the exception matching a provider error code, falling back to the HTTP status."""
    code = error_code or "UNKNOWN_ERROR"

    if code in PARAMETER_ERROR_CODES:
        return InvalidParameterError(f"Bad Request ({code}): {message}", status_code or 400, code, body)
    if code in AUTHENTICATION_ERROR_CODES:
        return AuthenticationError(f"Authentication failed ({code}): {message}", status_code or 401, code, body)
    if code in THROTTLING_ERROR_CODES or status_code == 429:
        return AmazonApiError(f"Too Many Requests ({code}): {message}", 429, code, body)

    if status_code == 400:
        return InvalidParameterError(f"Bad Request ({code}): {message}", status_code, code, body)
    if status_code in (401, 403):
        return AuthenticationError(f"Authentication failed ({code}): {message}", status_code, code, body)
    if status_code >= 500:
        return AmazonApiError(f"Server Error ({code}): {message}", status_code, code, body)
    return AmazonApiError(f"API Error ({code}): {message}", status_code, code, body)

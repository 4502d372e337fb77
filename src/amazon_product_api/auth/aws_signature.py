"""
AWS Signature Version 4 for Product Advertising API requests.

The signer is a pure function of its inputs: the timestamp is passed in by the
caller, so the same request always produces the same Authorization header.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Mapping, Union

ALGORITHM = "AWS4-HMAC-SHA256"
DEFAULT_SERVICE = "ProductAdvertisingAPI"
TERMINATOR = "aws4_request"
AMZ_DATE_FORMAT = "%Y%m%dT%H%M%SZ"

Payload = Union[str, bytes]


def _to_bytes(data: Payload) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else data


def sha256_hex(data: Payload) -> str:
    return hashlib.sha256(_to_bytes(data)).hexdigest()


def _hmac(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def amz_timestamp(now: datetime) -> str:
    """Format a datetime as YYYYMMDDThhmmssZ in UTC (naive datetimes are taken as UTC)."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).strftime(AMZ_DATE_FORMAT)


@dataclass(frozen=True)
class SigningRequest:
    """One outbound request to sign. `payload` must be the exact bytes sent on the wire."""
    method: str
    uri_path: str
    payload: bytes
    timestamp: str  # YYYYMMDDThhmmssZ
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def date(self) -> str:
        return self.timestamp[:8]


class AwsSignature:
    def __init__(self, access_key: str, secret_key: str, region: str, service: str = DEFAULT_SERVICE) -> None:
        self.access_key = access_key
        self.secret_key = secret_key
        self.region = region
        self.service = service

    def generate_authorization_header(
        self,
        method: str,
        uri: str,
        payload: Payload,
        timestamp: str,
        headers: Mapping[str, str],
    ) -> str:
        return self.sign(
            SigningRequest(
                method=method,
                uri_path=uri,
                payload=_to_bytes(payload),
                timestamp=timestamp,
                headers=dict(headers),
            )
        )

    def sign(self, request: SigningRequest) -> str:
        """
        Return the Authorization header value:
          AWS4-HMAC-SHA256 Credential=<key>/<scope>, SignedHeaders=<list>, Signature=<hex>
        """
        scope = self.credential_scope(request.date)
        string_to_sign = self.string_to_sign(request)
        signature = hmac.new(
            self.signing_key(request.date),
            string_to_sign.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

        return (
            f"{ALGORITHM} Credential={self.access_key}/{scope}, "
            f"SignedHeaders={signed_headers(request.headers)}, Signature={signature}"
        )

    def credential_scope(self, date: str) -> str:
        return f"{date}/{self.region}/{self.service}/{TERMINATOR}"

    def canonical_request(self, request: SigningRequest) -> str:
        # Query string is always empty: every PA-API operation is a POST with a JSON body.
        return "\n".join(
            [
                request.method,
                request.uri_path,
                "",
                canonical_headers(request.headers),
                signed_headers(request.headers),
                sha256_hex(request.payload),
            ]
        )

    def string_to_sign(self, request: SigningRequest) -> str:
        return "\n".join(
            [
                ALGORITHM,
                request.timestamp,
                self.credential_scope(request.date),
                sha256_hex(self.canonical_request(request)),
            ]
        )

    def signing_key(self, date: str) -> bytes:
        k_date = _hmac(("AWS4" + self.secret_key).encode("utf-8"), date)
        k_region = _hmac(k_date, self.region)
        k_service = _hmac(k_region, self.service)
        return _hmac(k_service, TERMINATOR)


def canonical_headers(headers: Mapping[str, str]) -> str:
    """Lower-cased names, trimmed values, sorted by name; each line ends with a newline."""
    normalized = {name.lower(): str(value).strip() for name, value in headers.items()}
    return "".join(f"{name}:{normalized[name]}\n" for name in sorted(normalized))


def signed_headers(headers: Mapping[str, str]) -> str:
    return ";".join(sorted(name.lower() for name in headers))

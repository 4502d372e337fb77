from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Marketplace:
    domain: str    # e.g. www.amazon.it
    host: str      # e.g. webservices.amazon.it
    region: str    # signing region
    language: str  # default LanguagesOfPreference entry


MARKETPLACES: dict[str, Marketplace] = {
    m.domain: m
    for m in (
        Marketplace("www.amazon.com", "webservices.amazon.com", "us-east-1", "en_US"),
        Marketplace("www.amazon.ca", "webservices.amazon.ca", "us-east-1", "en_CA"),
        Marketplace("www.amazon.com.mx", "webservices.amazon.com.mx", "us-east-1", "es_MX"),
        Marketplace("www.amazon.com.br", "webservices.amazon.com.br", "us-east-1", "pt_BR"),
        Marketplace("www.amazon.co.uk", "webservices.amazon.co.uk", "eu-west-1", "en_GB"),
        Marketplace("www.amazon.de", "webservices.amazon.de", "eu-west-1", "de_DE"),
        Marketplace("www.amazon.fr", "webservices.amazon.fr", "eu-west-1", "fr_FR"),
        Marketplace("www.amazon.it", "webservices.amazon.it", "eu-west-1", "it_IT"),
        Marketplace("www.amazon.es", "webservices.amazon.es", "eu-west-1", "es_ES"),
        Marketplace("www.amazon.in", "webservices.amazon.in", "eu-west-1", "en_IN"),
        Marketplace("www.amazon.co.jp", "webservices.amazon.co.jp", "us-west-2", "ja_JP"),
        Marketplace("www.amazon.com.au", "webservices.amazon.com.au", "us-west-2", "en_AU"),
        Marketplace("www.amazon.sg", "webservices.amazon.sg", "us-west-2", "en_SG"),
    )
}


def get_marketplace(domain: str) -> Optional[Marketplace]:
    return MARKETPLACES.get(domain.strip().lower())


def marketplace_for_host(host: str) -> Optional[Marketplace]:
    host = host.strip().lower()
    for m in MARKETPLACES.values():
        if m.host == host:
            return m
    return None

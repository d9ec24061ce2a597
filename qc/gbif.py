"""GBIF backed reference lookups.

Two clients are provided: a reverse geocoder resolving the country that
contains a point, and a species match client querying the GBIF backbone
taxonomy through :mod:`pygbif`.  Both run their transport through a
:class:`~qc.retry.RetryingClient` and raise
:class:`~qc.errors.LookupTransportError` once retries are exhausted.
Memoisation is layered on top by :class:`~qc.cache.CachedTaxonomyMatcher`.
"""

from __future__ import annotations

import http.client
import json
import logging
import socket
from typing import Any, Dict, List, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import urlopen

from pygbif import species

from dwc.vocab import Country, country_for_code

from .cache import CachedTaxonomyMatcher, LookupCache
from .models import MatchQuery, TaxonMatch
from .retry import RetryingClient, RetryPolicy

DEFAULT_REVERSE_GEOCODE_ENDPOINT = "https://api.gbif.org/v1/geocode/reverse"
DEFAULT_TIMEOUT = 10.0
DEFAULT_RETRY_ATTEMPTS = 5
DEFAULT_BACKOFF_SECONDS = 2.0
DEFAULT_CACHE_SIZE = 10000
DEFAULT_CACHE_TTL_SECONDS = 7200.0

# Network level failures worth another attempt. requests errors raised
# inside pygbif are OSError subclasses.
TRANSIENT_ERRORS = (
    URLError,
    HTTPError,
    http.client.HTTPException,
    json.JSONDecodeError,
    socket.timeout,
    OSError,
)

logger = logging.getLogger(__name__)


def _retry_policy(gbif_cfg: Dict[str, Any], retry_on=TRANSIENT_ERRORS) -> RetryPolicy:
    return RetryPolicy(
        attempts=int(gbif_cfg.get("retry_attempts", DEFAULT_RETRY_ATTEMPTS)),
        backoff_seconds=float(gbif_cfg.get("backoff_seconds", DEFAULT_BACKOFF_SECONDS)),
        retry_on=retry_on,
    )


class GbifGeocoder:
    """Reverse geocoder backed by the GBIF ``geocode/reverse`` service."""

    def __init__(
        self,
        endpoint: str = DEFAULT_REVERSE_GEOCODE_ENDPOINT,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        policy: Optional[RetryPolicy] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.client = RetryingClient("gbif_geocode", policy or RetryPolicy(retry_on=TRANSIENT_ERRORS))

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "GbifGeocoder":
        """Create a geocoder from the ``[gbif]`` configuration section."""
        gbif_cfg = cfg.get("gbif", {})
        return cls(
            endpoint=gbif_cfg.get("reverse_geocode_endpoint", DEFAULT_REVERSE_GEOCODE_ENDPOINT),
            timeout=gbif_cfg.get("timeout", DEFAULT_TIMEOUT),
            policy=_retry_policy(gbif_cfg),
        )

    def _request_json(self, url: str) -> Any:
        with urlopen(url, timeout=self.timeout) as resp:
            return json.load(resp)

    def country_at(self, latitude: float, longitude: float) -> Optional[Country]:
        url = f"{self.endpoint}?{urlencode({'lat': latitude, 'lng': longitude})}"
        data = self.client.call(self._request_json, url)
        return self._country_from_response(data)

    @staticmethod
    def _country_from_response(data: Any) -> Optional[Country]:
        """Pick the first political area carrying a known ISO code."""
        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list):
            return None
        for area in data:
            if not isinstance(area, dict):
                continue
            if area.get("type", "Political") != "Political":
                continue
            country = country_for_code(area.get("isoCountryCode2Digit") or "")
            if country is not None:
                return country
        return None


class GbifSpeciesMatchClient:
    """Match names against the GBIF backbone taxonomy via ``pygbif``."""

    def __init__(self, strict: bool = False, policy: Optional[RetryPolicy] = None):
        self.strict = strict
        self.client = RetryingClient("gbif_species_match", policy or RetryPolicy(retry_on=TRANSIENT_ERRORS))

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "GbifSpeciesMatchClient":
        gbif_cfg = cfg.get("gbif", {})
        return cls(strict=bool(gbif_cfg.get("strict", False)), policy=_retry_policy(gbif_cfg))

    def _params(self, query: MatchQuery) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "name": query.name,
            "rank": query.rank.value.lower() if query.rank else None,
            "kingdom": query.kingdom,
            "phylum": query.phylum,
            "clazz": query.clazz,
            "order": query.order,
            "family": query.family,
            "genus": query.genus,
        }
        params = {key: value for key, value in params.items() if value}
        params["strict"] = self.strict
        return params

    def match(self, query: MatchQuery) -> TaxonMatch:
        params = self._params(query)
        logger.debug(f"GBIF species match for {params}")
        result = self.client.call(species.name_backbone, **params)
        if not isinstance(result, dict) or not result:
            return TaxonMatch.none(note="empty response")
        return TaxonMatch.from_gbif(result)


def build_taxonomy_matcher(cfg: Dict[str, Any]) -> CachedTaxonomyMatcher:
    """Compose the cached, retrying GBIF species matcher from configuration."""

    gbif_cfg = cfg.get("gbif", {})
    cache: LookupCache[MatchQuery, TaxonMatch] = LookupCache(
        max_size=int(gbif_cfg.get("cache_size", DEFAULT_CACHE_SIZE)),
        ttl_seconds=float(gbif_cfg.get("cache_ttl_seconds", DEFAULT_CACHE_TTL_SECONDS)),
    )
    return CachedTaxonomyMatcher(GbifSpeciesMatchClient.from_config(cfg), cache)


__all__ = [
    "GbifGeocoder",
    "GbifSpeciesMatchClient",
    "build_taxonomy_matcher",
    "DEFAULT_REVERSE_GEOCODE_ENDPOINT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_RETRY_ATTEMPTS",
    "DEFAULT_BACKOFF_SECONDS",
    "DEFAULT_CACHE_SIZE",
    "DEFAULT_CACHE_TTL_SECONDS",
]

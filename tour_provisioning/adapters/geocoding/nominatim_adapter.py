"""Nominatim geocoder adapter.

Looks up venue names on OpenStreetMap's Nominatim service so that new
locations can be stored with coordinates and a formatted address.

- Results (including misses) are cached per query
- Requests are rate limited as Nominatim's usage policy requires
- Service errors (timeouts, rate limiting, outages) are logged and
  reported as "not found"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from geopy.exc import GeocoderServiceError
from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import Nominatim

from ...config import GeocodingConfig, get_config
from ...domain.models import GeoPoint
from ..cache.query_cache import QueryCache

_MISS = "__miss__"


@dataclass
class NominatimGeocoderAdapter:
    """Nominatim geocoder adapter with caching and rate limiting.

    This adapter implements GeocoderPort.

    Attributes:
        config: Geocoding configuration
        cache: Cache for geocoding results
    """

    config: GeocodingConfig = field(default_factory=lambda: get_config().geocoding)
    cache: QueryCache[Any] = field(default_factory=lambda: QueryCache(name="geocode"))

    _geocode_fn: Optional[Any] = field(default=None, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _get_geocoder(self) -> Any:
        """Get or initialize the geocoder with rate limiting."""
        if self._geocode_fn is not None:
            return self._geocode_fn

        geolocator = Nominatim(
            user_agent=self.config.user_agent,
            timeout=self.config.timeout_seconds,
        )
        self._geocode_fn = RateLimiter(
            geolocator.geocode,
            min_delay_seconds=self.config.rate_limit_delay,
            max_retries=self.config.max_retries,
            error_wait_seconds=self.config.error_wait_seconds,
            swallow_exceptions=False,
        )
        return self._geocode_fn

    def geocode(self, query: str) -> Optional[GeoPoint]:
        """Geocode a venue name.

        Args:
            query: The location name to geocode.

        Returns:
            GeoPoint, or None if the place is unknown or the service failed.
        """
        if not query or not query.strip():
            return None

        cache_key = f"geocode:{query.strip().lower()}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return None if cached == _MISS else cached

        try:
            result = self._get_geocoder()(query)
        except GeocoderServiceError as e:
            self._logger.warning(
                "Geocode service error",
                extra={"query": query, "error": str(e)},
            )
            return None

        if result is None:
            self._logger.debug("Geocode returned no result", extra={"query": query})
            self.cache.set(cache_key, _MISS)
            return None

        point = GeoPoint(
            latitude=float(result.latitude),
            longitude=float(result.longitude),
            formatted_address=result.address or "",
        )
        self.cache.set(cache_key, point)
        return point

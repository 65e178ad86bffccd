"""Geocoding adapters - Implementations of the GeocoderPort."""

from .nominatim_adapter import NominatimGeocoderAdapter

__all__ = ["NominatimGeocoderAdapter"]

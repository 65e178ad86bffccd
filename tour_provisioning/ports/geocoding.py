"""Geocoding port - Coordinates for newly created locations.

This protocol lets the location resolver attach coordinates and a
formatted address to a venue the first time it is created, without
depending on a particular geocoding service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import GeoPoint


class GeocoderPort(Protocol):
    """Port for geocoding services.

    Implementation: adapters/geocoding/nominatim_adapter.py
    """

    def geocode(self, query: str) -> Optional[GeoPoint]:
        """Geocode a venue or place name.

        Args:
            query: The location name to geocode (e.g., "Palau Sant Jordi").

        Returns:
            GeoPoint with coordinates and address, or None if not found.
        """
        ...

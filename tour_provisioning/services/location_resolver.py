"""Location resolution - venue name to location id.

Looks a venue up by exact name and creates it when missing. There is
no lock or unique constraint behind this: two runs resolving the same
new name at the same time can both create it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..domain.models import GeoPoint
from ..ports.geocoding import GeocoderPort
from ..ports.store import StorePort
from .journal import CreationJournal

LOCATIONS = "locations"


@dataclass
class LocationResolver:
    """Get-or-create for locations, memoized for the life of one run.

    Attributes:
        store: Store holding the locations table
        geocoder: Optional geocoder used to enrich new locations
        journal: Optional journal that records locations this resolver created
    """

    store: StorePort
    geocoder: Optional[GeocoderPort] = None
    journal: Optional[CreationJournal] = None

    _resolved: Dict[str, str] = field(default_factory=dict, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def resolve(self, location_name: Optional[str]) -> Optional[str]:
        """Return the id of the named location, creating it if needed.

        Args:
            location_name: Display name as typed; surrounding whitespace
                is ignored.

        Returns:
            The location id, or None when no name was given.

        Raises:
            StoreError: If the lookup or the insert fails.
        """
        name = (location_name or "").strip()
        if not name:
            return None

        if name in self._resolved:
            return self._resolved[name]

        existing = self.store.find(LOCATIONS, {"name": name})
        if existing is not None:
            self._logger.debug(
                "Found existing location",
                extra={"location": name, "location_id": existing["id"]},
            )
            self._resolved[name] = str(existing["id"])
            return self._resolved[name]

        fields: Dict[str, Any] = {"name": name}
        point = self._geocode(name)
        if point is not None:
            fields.update(
                latitude=point.latitude,
                longitude=point.longitude,
                formatted_address=point.formatted_address,
            )

        created = self.store.create(LOCATIONS, fields)
        location_id = str(created["id"])
        if self.journal is not None:
            self.journal.record(LOCATIONS, {"id": location_id})
        self._logger.info(
            "Created new location",
            extra={"location": name, "location_id": location_id},
        )
        self._resolved[name] = location_id
        return location_id

    def _geocode(self, name: str) -> Optional[GeoPoint]:
        if self.geocoder is None:
            return None
        try:
            return self.geocoder.geocode(name)
        except Exception as e:
            # Coordinates are optional; the location is still created
            self._logger.warning(
                "Geocoding failed, creating location without coordinates",
                extra={"location": name, "error": str(e)},
            )
            return None

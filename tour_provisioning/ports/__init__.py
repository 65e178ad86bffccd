"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the provisioning services and the
systems they drive: the hosted store, the view cache, user
notifications and an optional geocoder.
"""

from .cache import CachePort
from .geocoding import GeocoderPort
from .notifier import NotificationKind, NotifierPort
from .store import Record, StorePort

__all__ = [
    # Store
    "Record",
    "StorePort",
    # Cache
    "CachePort",
    # Notifications
    "NotificationKind",
    "NotifierPort",
    # Geocoding
    "GeocoderPort",
]

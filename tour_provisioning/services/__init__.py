"""Services layer - Application orchestration.

Available services:
- TourProvisioningService: Main entry point for creating a tour
- DateNormalizer: Validates and orders tour date rows
- LocationResolver: Get-or-create for venues
- EntityGraphBuilder: Persists the tour/job/tour-date hierarchy
- TourCatalog: Cached read views over provisioned tours
"""

from .catalog import TourCatalog
from .date_normalizer import DateNormalizer
from .graph_builder import EntityGraphBuilder
from .journal import CreationJournal
from .location_resolver import LocationResolver
from .provisioning import TourProvisioningService

__all__ = [
    "TourProvisioningService",
    "DateNormalizer",
    "LocationResolver",
    "EntityGraphBuilder",
    "CreationJournal",
    "TourCatalog",
]

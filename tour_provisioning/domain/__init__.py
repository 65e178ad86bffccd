"""Domain layer - Core business models and errors.

This module contains immutable record models, the mutable tour form
and typed errors used throughout the application. No external
dependencies.
"""

from .errors import (
    ConfigurationError,
    ProvisioningError,
    StoreError,
    ValidationError,
)
from .forms import TourForm
from .models import (
    DEFAULT_TOUR_COLOR,
    DateEntry,
    Department,
    GeoPoint,
    Job,
    JobDepartmentLink,
    Location,
    Tour,
    TourDate,
    TourPlan,
    ValidatedDate,
)

__all__ = [
    # Models
    "DEFAULT_TOUR_COLOR",
    "Department",
    "GeoPoint",
    "Tour",
    "Job",
    "TourDate",
    "Location",
    "JobDepartmentLink",
    "DateEntry",
    "ValidatedDate",
    "TourPlan",
    # Form
    "TourForm",
    # Errors
    "ProvisioningError",
    "ValidationError",
    "StoreError",
    "ConfigurationError",
]

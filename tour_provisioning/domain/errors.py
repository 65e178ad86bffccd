"""Typed domain errors for tour provisioning.

Every failure a provisioning run can surface is one of these types, so
callers can tell bad input apart from a store that failed mid-sequence.

All errors inherit from ProvisioningError and can optionally
wrap a root cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class ProvisioningError(Exception):
    """Base error for the provisioning domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class ValidationError(ProvisioningError):
    """Malformed or incomplete provisioning input.

    Always raised before the first store write, so the store is
    unchanged when a caller sees it.

    Attributes:
        field_name: Form field that failed validation ("title", "dates", ...)
        row: Zero-based index of the offending date row, if any
    """

    field_name: str = ""
    row: Optional[int] = None


@dataclass
class StoreError(ProvisioningError):
    """A remote read or write against the store failed.

    Raised mid-sequence: whatever was written before the failing call
    stays committed unless compensation is enabled.

    Attributes:
        entity: Store table the operation targeted
        operation: "create", "find", "select" or "delete"
    """

    entity: str = ""
    operation: str = ""


@dataclass
class ConfigurationError(ProvisioningError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
        expected_type: Expected type or format
    """

    setting_name: str = ""
    expected_type: Optional[str] = None

"""Standardized exception hierarchy for the matching service."""

from typing import Any


class MatchingError(Exception):
    """Base exception for all matching service errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(MatchingError):
    """Invalid input or data format."""

    pass


class InvalidArgumentError(ValidationError):
    """Missing or empty argument on a low-level index call."""

    pass


class InvalidGeohashError(ValidationError):
    """Geohash string contains characters outside the base32 alphabet."""

    pass


class InvalidPrecisionError(ValidationError):
    """Geohash precision outside the supported range."""

    pass


class NotFoundError(MatchingError):
    """Requested entity does not exist."""

    pass


class DriverNotFoundError(NotFoundError):
    """No driver registered under the given id."""

    def __init__(self, driver_id: str):
        super().__init__(f"Driver not found: {driver_id}", details={"driver_id": driver_id})
        self.driver_id = driver_id


class ConflictError(MatchingError):
    """Operation conflicts with existing state."""

    pass


class DuplicateDriverError(ConflictError):
    """A driver with the same id is already registered."""

    def __init__(self, driver_id: str):
        super().__init__(
            f"Driver with ID {driver_id} already exists", details={"driver_id": driver_id}
        )
        self.driver_id = driver_id


class EmptyHeapError(MatchingError):
    """Read or extraction attempted on an empty heap."""

    pass

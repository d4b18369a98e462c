"""
Error taxonomy for restaurant, space and reservation operations.

Every error belongs to one category. The HTTP layer maps the category to a
status code (not found -> 404, validation -> 400, conflict -> 409); the
services never retry and never partially apply a rejected request.
"""
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Optional
from uuid import UUID


class ErrorCategory(str, Enum):
    """Client-facing error categories."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"


class PrivateDiningError(Exception):
    """Base class for all business errors raised by the services."""

    category: ErrorCategory = ErrorCategory.VALIDATION

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ============================================================================
# Not found
# ============================================================================

class NotFoundError(PrivateDiningError):
    """An identifier did not resolve."""

    category = ErrorCategory.NOT_FOUND


class RestaurantNotFoundError(NotFoundError):
    """Raised when a restaurant does not exist."""

    def __init__(self, restaurant_id: Any):
        super().__init__(f"Restaurant not found with ID: {restaurant_id}")
        self.restaurant_id = restaurant_id


class SpaceNotFoundError(NotFoundError):
    """Raised when a space is not part of the restaurant."""

    def __init__(self, space_id: Any, restaurant_id: Optional[Any] = None):
        if restaurant_id is None:
            message = f"Space not found with ID: {space_id}"
        else:
            message = f"Space not found with ID: {space_id} in restaurant: {restaurant_id}"
        super().__init__(message)
        self.space_id = space_id
        self.restaurant_id = restaurant_id


class ReservationNotFoundError(NotFoundError):
    """Raised when a reservation does not exist."""

    def __init__(self, reservation_id: Any):
        super().__init__(f"Reservation not found with ID: {reservation_id}")
        self.reservation_id = reservation_id


# ============================================================================
# Validation
# ============================================================================

class BusinessValidationError(PrivateDiningError):
    """A request violates a business rule."""

    category = ErrorCategory.VALIDATION


class MultiDayReservationError(BusinessValidationError):
    """Raised when start and end fall on different calendar dates."""

    def __init__(self, start_date: date, end_date: date):
        super().__init__(
            f"Multi-day reservations are not allowed. "
            f"Start date: {start_date}, End date: {end_date}"
        )
        self.start_date = start_date
        self.end_date = end_date


class InvalidReservationDurationError(BusinessValidationError):
    """Raised when the aligned window is shorter than one slot."""

    def __init__(self, slot_minutes: int, duration_minutes: Optional[int] = None):
        message = f"Reservation duration must be at least {slot_minutes} minutes"
        if duration_minutes is not None:
            message += f" (aligned duration was {duration_minutes} minutes)"
        super().__init__(message)
        self.slot_minutes = slot_minutes
        self.duration_minutes = duration_minutes


class OutsideOperatingHoursError(BusinessValidationError):
    """Raised when the aligned window leaves the space's operating hours."""

    def __init__(
        self,
        requested_start: time,
        requested_end: time,
        operating_start: time,
        operating_end: time,
    ):
        super().__init__(
            f"Reservation time {requested_start:%H:%M}-{requested_end:%H:%M} is outside "
            f"operating hours {operating_start:%H:%M}-{operating_end:%H:%M}"
        )
        self.requested_start = requested_start
        self.requested_end = requested_end
        self.operating_start = operating_start
        self.operating_end = operating_end


class InvalidPartySizeError(BusinessValidationError):
    """Raised when the party does not fit the space's per-reservation bounds."""

    def __init__(self, party_size: int, min_capacity: int, max_capacity: int):
        super().__init__(
            f"Party size {party_size} is outside the space capacity range "
            f"of {min_capacity}-{max_capacity}"
        )
        self.party_size = party_size
        self.min_capacity = min_capacity
        self.max_capacity = max_capacity


class InvalidDateRangeError(BusinessValidationError):
    """Raised for a missing, inverted or too long analytics window."""

    def __init__(
        self,
        message: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        max_range_days: Optional[int] = None,
    ):
        super().__init__(message)
        self.start = start
        self.end = end
        self.max_range_days = max_range_days

    @classmethod
    def missing_bounds(cls) -> "InvalidDateRangeError":
        return cls("Start time and end time are required")

    @classmethod
    def inverted(cls, start: datetime, end: datetime) -> "InvalidDateRangeError":
        return cls(
            f"Invalid date range from {start.isoformat()} to {end.isoformat()}: "
            f"End time must be after start time",
            start=start,
            end=end,
        )

    @classmethod
    def too_long(cls, start: datetime, end: datetime, max_range_days: int) -> "InvalidDateRangeError":
        return cls(
            f"Date range from {start.isoformat()} to {end.isoformat()} exceeds maximum "
            f"allowed range of {max_range_days} days",
            start=start,
            end=end,
            max_range_days=max_range_days,
        )


class InvalidPageRequestError(BusinessValidationError):
    """Raised for a negative page index or a non-positive page size."""

    def __init__(self, page: int, size: int):
        super().__init__(
            f"Invalid page request: page must be >= 0 and size >= 1 (got page={page}, size={size})"
        )
        self.page = page
        self.size = size


# ============================================================================
# Conflict
# ============================================================================

class ConflictError(PrivateDiningError):
    """A valid request is rejected by the aggregate state."""

    category = ErrorCategory.CONFLICT


class CapacityExceededError(ConflictError):
    """Raised when concurrent headcount would exceed the space's capacity."""

    def __init__(
        self,
        restaurant_id: Any,
        space_id: UUID,
        start: datetime,
        end: datetime,
        requested_party_size: int,
        current_occupancy: int,
        max_capacity: int,
    ):
        self.restaurant_id = restaurant_id
        self.space_id = space_id
        self.start = start
        self.end = end
        self.requested_party_size = requested_party_size
        self.current_occupancy = current_occupancy
        self.max_capacity = max_capacity
        super().__init__(
            f"Cannot accommodate party of {requested_party_size} for space {space_id} "
            f"in restaurant {restaurant_id} from {start.isoformat()} to {end.isoformat()}. "
            f"Current occupancy: {current_occupancy}, Max capacity: {max_capacity}, "
            f"Available: {self.available}"
        )

    @property
    def available(self) -> int:
        return max(0, self.max_capacity - self.current_occupancy)


class SpaceInUseError(ConflictError):
    """Raised when removing a space that reservations still reference."""

    def __init__(self, restaurant_id: Any, space_id: UUID, reservation_count: int):
        super().__init__(
            f"Space {space_id} in restaurant {restaurant_id} cannot be removed: "
            f"{reservation_count} reservation(s) reference it"
        )
        self.restaurant_id = restaurant_id
        self.space_id = space_id
        self.reservation_count = reservation_count

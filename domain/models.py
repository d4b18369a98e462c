"""Domain models using Pydantic v2 for the private dining service."""

from datetime import datetime, time
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from core.space_defaults import SpaceDefaults
from .enums import ReservationStatus


# Accepted in addition to ISO 8601 for reservation times
LEGACY_DATETIME_FORMAT = "%d-%m-%Y %H:%M"

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def parse_datetime_value(value):
    """Accept ``dd-MM-yyyy HH:mm`` strings, leave everything else to pydantic."""
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), LEGACY_DATETIME_FORMAT)
        except ValueError:
            return value
    return value


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


# ============================================================================
# Spaces
# ============================================================================

class SpaceCreate(CamelModel):
    """Space payload. A supplied id is only honoured to match an existing space on update."""

    id: Optional[UUID] = None
    name: str = Field(..., min_length=1, max_length=100, description="Name of the space")
    min_capacity: int = Field(..., gt=0, description="Smallest party accepted")
    max_capacity: int = Field(..., gt=0, description="Largest concurrent headcount")
    operating_start_time: Optional[time] = Field(None, description="Opening time, HH:MM")
    operating_end_time: Optional[time] = Field(None, description="Closing time, HH:MM")
    time_slot_duration_minutes: Optional[int] = Field(None, gt=0, description="Reservation slot length")


class SpaceRecord(CamelModel):
    """Space as returned to clients, with defaults resolved."""

    id: UUID
    name: str
    min_capacity: int
    max_capacity: int
    operating_start_time: time
    operating_end_time: time
    time_slot_duration_minutes: int

    @classmethod
    def from_space(cls, space, defaults: SpaceDefaults) -> "SpaceRecord":
        effective = defaults.resolve(space)
        return cls(
            id=space.id,
            name=space.name,
            min_capacity=space.min_capacity,
            max_capacity=space.max_capacity,
            operating_start_time=effective.operating_start,
            operating_end_time=effective.operating_end,
            time_slot_duration_minutes=effective.slot_minutes,
        )


# ============================================================================
# Restaurants
# ============================================================================

class RestaurantCreate(CamelModel):
    """Restaurant payload, used for creation and whole-document replacement."""

    name: Optional[str] = Field(None, max_length=200)
    address: Optional[str] = Field(None, max_length=500)
    cuisine_type: Optional[str] = Field(None, max_length=100)
    capacity: Optional[int] = Field(None, ge=0, description="Informational total capacity")
    spaces: List[SpaceCreate] = Field(default_factory=list)


class RestaurantRecord(CamelModel):
    """Restaurant as returned to clients."""

    id: UUID
    name: Optional[str] = None
    address: Optional[str] = None
    cuisine_type: Optional[str] = None
    capacity: Optional[int] = None
    spaces: List[SpaceRecord] = Field(default_factory=list)

    @classmethod
    def from_restaurant(cls, restaurant, defaults: SpaceDefaults) -> "RestaurantRecord":
        return cls(
            id=restaurant.id,
            name=restaurant.name,
            address=restaurant.address,
            cuisine_type=restaurant.cuisine_type,
            capacity=restaurant.capacity,
            spaces=[SpaceRecord.from_space(s, defaults) for s in restaurant.spaces],
        )


# ============================================================================
# Reservations
# ============================================================================

class ReservationCreate(CamelModel):
    """Reservation request. Times are aligned to the space's slot grid on creation."""

    restaurant_id: UUID
    space_id: UUID
    customer_email: str = Field(..., max_length=320, pattern=EMAIL_PATTERN)
    start_time: datetime
    end_time: datetime
    party_size: int = Field(..., gt=0, description="Number of guests")
    status: str = Field(default=ReservationStatus.CONFIRMED.value, max_length=50)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_legacy_datetime(cls, v):
        """Accept both ISO 8601 and dd-MM-yyyy HH:mm."""
        return parse_datetime_value(v)


class ReservationRecord(CamelModel):
    """Persisted reservation."""

    id: UUID
    restaurant_id: UUID
    space_id: UUID
    customer_email: str
    start_time: datetime
    end_time: datetime
    party_size: int
    status: Optional[str] = None
    created_at: Optional[datetime] = None


# ============================================================================
# Occupancy analytics
# ============================================================================

class TimeSlotOccupancy(CamelModel):
    """Occupancy of one space during one report slot."""

    slot_start: datetime
    slot_end: datetime
    reservation_count: int
    occupancy: int
    max_capacity: int
    utilization_percentage: float


class SpaceOccupancyReport(CamelModel):
    """Per-space aggregate over the report window."""

    space_id: UUID
    space_name: str
    max_capacity: int
    total_reservations: int
    peak_occupancy: int
    average_utilization: float
    hourly_breakdown: List[TimeSlotOccupancy] = Field(default_factory=list)


class OccupancySummary(CamelModel):
    """Cross-space summary of a report."""

    total_reservations: int
    total_guests: int
    peak_occupancy: int
    average_utilization: float
    overall_utilization_percentage: float


class OccupancyReportResponse(CamelModel):
    """Paginated occupancy report. Pagination applies to the space reports only."""

    restaurant_id: UUID
    report_start_time: datetime
    report_end_time: datetime
    summary: OccupancySummary
    space_reports: List[SpaceOccupancyReport] = Field(default_factory=list)
    page: int
    size: int
    total_elements: int
    total_pages: int

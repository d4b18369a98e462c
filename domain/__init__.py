"""Domain layer for the private dining service."""

from .enums import ReservationStatus
from .models import (
    SpaceCreate,
    SpaceRecord,
    RestaurantCreate,
    RestaurantRecord,
    ReservationCreate,
    ReservationRecord,
    TimeSlotOccupancy,
    SpaceOccupancyReport,
    OccupancySummary,
    OccupancyReportResponse,
)

__all__ = [
    # Enums
    "ReservationStatus",
    # Models
    "SpaceCreate",
    "SpaceRecord",
    "RestaurantCreate",
    "RestaurantRecord",
    "ReservationCreate",
    "ReservationRecord",
    "TimeSlotOccupancy",
    "SpaceOccupancyReport",
    "OccupancySummary",
    "OccupancyReportResponse",
]

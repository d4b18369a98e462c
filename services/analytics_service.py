"""
Occupancy analytics for private dining spaces.

Reservations overlapping a report window are bucketed into fixed-width time
slots per space. Per-slot utilization is aggregated into per-space figures and
a cross-space summary; the list of space reports is paginated.
"""
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from core.exceptions import (
    InvalidDateRangeError,
    InvalidPageRequestError,
    RestaurantNotFoundError,
    SpaceNotFoundError,
)
from core.utils_datetime import days_between, intervals_overlap, iter_time_slots, round_two
from db.models_sqlalchemy import Reservation, Space
from db.repositories import ReservationRepository, RestaurantRepository
from domain.models import (
    OccupancyReportResponse,
    OccupancySummary,
    SpaceOccupancyReport,
    TimeSlotOccupancy,
)
from services.report_cache import ReportCache, ReportCacheKey


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsConfig:
    """Report slot width and the longest window a report may cover."""
    slot_minutes: int = 60
    max_range_days: int = 31

    def __post_init__(self):
        if self.slot_minutes <= 0:
            raise ValueError("slot_minutes must be positive")
        if self.max_range_days < 1:
            raise ValueError("max_range_days must be at least 1")

    @classmethod
    def from_settings(cls, settings) -> "AnalyticsConfig":
        return cls(
            slot_minutes=settings.analytics_slot_minutes,
            max_range_days=settings.analytics_max_range_days,
        )


def utilization_percentage(occupancy: int, max_capacity: int) -> float:
    """Occupancy as a percentage of capacity, 0 for a zero-capacity space."""
    if max_capacity <= 0:
        return 0.0
    return round_two(occupancy / max_capacity * 100)


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return round_two(sum(values) / len(values))


class OccupancyAnalyticsService:
    """Builds paginated occupancy reports for a restaurant's spaces."""

    def __init__(
        self,
        db_session: Session,
        config: Optional[AnalyticsConfig] = None,
        report_cache: Optional[ReportCache] = None,
    ):
        """
        Initialize the analytics service.

        Args:
            db_session: SQLAlchemy database session
            config: Slot width and maximum window length
            report_cache: Cache consulted before any computation
        """
        self.db = db_session
        self.config = config or AnalyticsConfig()
        self.report_cache = report_cache
        self.restaurants = RestaurantRepository(db_session)
        self.reservations = ReservationRepository(db_session)

    def generate_report(
        self,
        restaurant_id: UUID,
        start: Optional[datetime],
        end: Optional[datetime],
        space_id: Optional[UUID] = None,
        page: int = 0,
        size: int = 10,
    ) -> OccupancyReportResponse:
        """
        Generate an occupancy report for a restaurant.

        Args:
            restaurant_id: Restaurant to report on
            start: Window start
            end: Window end (exclusive)
            space_id: Limit the report to one space when given
            page: Zero-based page of space reports
            size: Space reports per page

        Returns:
            Report with per-space breakdowns for the requested page and a
            summary over every in-scope space

        Raises:
            InvalidDateRangeError: Missing bounds, end not after start, or window too long
            InvalidPageRequestError: Negative page or non-positive size
            RestaurantNotFoundError: If the restaurant does not exist
            SpaceNotFoundError: If space_id is not part of the restaurant
        """
        key = None
        generation = None
        if start is not None and end is not None:
            key = ReportCacheKey(restaurant_id, start, end, space_id, page, size)
            if self.report_cache is not None:
                cached = self.report_cache.get(key)
                if cached is not None:
                    logger.debug(f"Occupancy report cache hit for {key}")
                    return cached
                generation = self.report_cache.generation(restaurant_id)

        self._validate_window(start, end)
        if page < 0 or size < 1:
            raise InvalidPageRequestError(page, size)

        restaurant = self.restaurants.find_by_id(restaurant_id)
        if restaurant is None:
            raise RestaurantNotFoundError(restaurant_id)

        if space_id is not None:
            space = restaurant.find_space(space_id)
            if space is None:
                raise SpaceNotFoundError(space_id, restaurant_id)
            spaces = [space]
        else:
            spaces = list(restaurant.spaces)

        logger.debug(
            f"Generating occupancy report for restaurant {restaurant_id}, "
            f"{start} - {end}, {len(spaces)} space(s)"
        )

        space_reports: List[SpaceOccupancyReport] = []
        reservation_sets: List[List[Reservation]] = []
        for space in spaces:
            reservations = self.reservations.find_overlapping(
                restaurant_id, start, end, space_id=space.id
            )
            reservation_sets.append(reservations)
            space_reports.append(self._space_report(space, reservations, start, end))

        summary = self._summary(spaces, space_reports, reservation_sets)

        total = len(space_reports)
        total_pages = math.ceil(total / size)
        from_index = min(page * size, total)
        to_index = min(from_index + size, total)

        report = OccupancyReportResponse(
            restaurant_id=restaurant_id,
            report_start_time=start,
            report_end_time=end,
            summary=summary,
            space_reports=space_reports[from_index:to_index],
            page=page,
            size=size,
            total_elements=total,
            total_pages=total_pages,
        )

        if self.report_cache is not None:
            self.report_cache.put(key, report, generation=generation)

        logger.info(
            f"Occupancy report for restaurant {restaurant_id}: {total} space(s), "
            f"{summary.total_reservations} reservation(s), peak {summary.peak_occupancy}"
        )
        return report

    def _validate_window(self, start: Optional[datetime], end: Optional[datetime]) -> None:
        if start is None or end is None:
            raise InvalidDateRangeError.missing_bounds()

        if end <= start:
            logger.warning(f"Occupancy report rejected: end {end} not after start {start}")
            raise InvalidDateRangeError.inverted(start, end)

        if days_between(start, end) > self.config.max_range_days:
            logger.warning(
                f"Occupancy report rejected: {start} - {end} exceeds "
                f"{self.config.max_range_days} days"
            )
            raise InvalidDateRangeError.too_long(start, end, self.config.max_range_days)

    def _space_report(
        self,
        space: Space,
        reservations: Sequence[Reservation],
        start: datetime,
        end: datetime,
    ) -> SpaceOccupancyReport:
        breakdown = [
            self._slot_occupancy(space, reservations, slot_start, slot_end)
            for slot_start, slot_end in iter_time_slots(start, end, self.config.slot_minutes)
        ]

        return SpaceOccupancyReport(
            space_id=space.id,
            space_name=space.name,
            max_capacity=space.max_capacity,
            total_reservations=len(reservations),
            peak_occupancy=max((slot.occupancy for slot in breakdown), default=0),
            average_utilization=_mean([slot.utilization_percentage for slot in breakdown]),
            hourly_breakdown=breakdown,
        )

    @staticmethod
    def _slot_occupancy(
        space: Space,
        reservations: Sequence[Reservation],
        slot_start: datetime,
        slot_end: datetime,
    ) -> TimeSlotOccupancy:
        in_slot = [
            r for r in reservations
            if intervals_overlap(r.start_time, r.end_time, slot_start, slot_end)
        ]
        occupancy = sum(r.party_size for r in in_slot)

        return TimeSlotOccupancy(
            slot_start=slot_start,
            slot_end=slot_end,
            reservation_count=len(in_slot),
            occupancy=occupancy,
            max_capacity=space.max_capacity,
            utilization_percentage=utilization_percentage(occupancy, space.max_capacity),
        )

    @staticmethod
    def _summary(
        spaces: Sequence[Space],
        space_reports: Sequence[SpaceOccupancyReport],
        reservation_sets: Sequence[Sequence[Reservation]],
    ) -> OccupancySummary:
        peak = max((report.peak_occupancy for report in space_reports), default=0)
        total_capacity = sum(space.max_capacity for space in spaces)

        # Cross-space peak over combined capacity, not a simultaneous peak
        return OccupancySummary(
            total_reservations=sum(len(rs) for rs in reservation_sets),
            total_guests=sum(r.party_size for rs in reservation_sets for r in rs),
            peak_occupancy=peak,
            average_utilization=_mean([report.average_utilization for report in space_reports]),
            overall_utilization_percentage=utilization_percentage(peak, total_capacity),
        )

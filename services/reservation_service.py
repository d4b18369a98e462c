"""
Reservation admission for private dining spaces.

A reservation request is checked against the restaurant and space it names,
aligned to the space's slot grid and admitted only if the combined headcount
of every overlapping reservation stays within the space's capacity.
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from core.exceptions import (
    CapacityExceededError,
    InvalidPartySizeError,
    InvalidReservationDurationError,
    MultiDayReservationError,
    OutsideOperatingHoursError,
    ReservationNotFoundError,
    RestaurantNotFoundError,
    SpaceNotFoundError,
)
from core.space_defaults import SpaceDefaults
from core.utils_datetime import (
    align_end_to_slot_ceiling,
    align_start_to_nearest_slot,
    duration_minutes,
)
from db.models_sqlalchemy import Reservation, Space
from db.repositories import ReservationRepository, RestaurantRepository
from domain.models import ReservationCreate
from services.capacity_service import CapacityService
from services.report_cache import ReportCache


logger = logging.getLogger(__name__)


class ReservationService:
    """Service for admitting, looking up and deleting reservations."""

    def __init__(
        self,
        db_session: Session,
        defaults: SpaceDefaults,
        capacity_service: Optional[CapacityService] = None,
        report_cache: Optional[ReportCache] = None,
    ):
        """
        Initialize the reservation service.

        Args:
            db_session: SQLAlchemy database session
            defaults: Fallback operating hours and slot length for spaces
            capacity_service: Capacity validator (built from the session if omitted)
            report_cache: Analytics cache evicted when reservations change
        """
        self.db = db_session
        self.defaults = defaults
        self.capacity = capacity_service or CapacityService(db_session)
        self.report_cache = report_cache
        self.restaurants = RestaurantRepository(db_session)
        self.reservations = ReservationRepository(db_session)

    def create_reservation(self, candidate: ReservationCreate) -> Reservation:
        """
        Validate and persist a new reservation.

        Checks run in a fixed order and the first failure aborts the request
        before anything is written: restaurant, space, single calendar day,
        slot alignment, minimum duration, operating hours, party size and
        finally concurrent capacity.

        Args:
            candidate: Reservation request

        Returns:
            Stored reservation with its id and aligned times

        Raises:
            RestaurantNotFoundError: If the restaurant does not exist
            SpaceNotFoundError: If the space is not part of the restaurant
            MultiDayReservationError: If start and end fall on different dates
            InvalidReservationDurationError: If the aligned window is shorter than a slot
            OutsideOperatingHoursError: If the aligned window leaves operating hours
            InvalidPartySizeError: If the party does not fit the space bounds
            CapacityExceededError: If the space would be over capacity
        """
        try:
            reservation = self._admit(candidate)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(reservation)
        self._evict(reservation.restaurant_id)

        logger.info(
            f"Reservation {reservation.id} accepted for space {reservation.space_id}: "
            f"{reservation.start_time} - {reservation.end_time}, party of {reservation.party_size}"
        )
        return reservation

    def _admit(self, candidate: ReservationCreate) -> Reservation:
        restaurant = self.restaurants.find_by_id(candidate.restaurant_id)
        if restaurant is None:
            logger.warning(f"Reservation rejected: restaurant {candidate.restaurant_id} not found")
            raise RestaurantNotFoundError(candidate.restaurant_id)

        if restaurant.find_space(candidate.space_id) is None:
            logger.warning(
                f"Reservation rejected: space {candidate.space_id} not in restaurant {restaurant.id}"
            )
            raise SpaceNotFoundError(candidate.space_id, restaurant.id)

        # Row lock held until commit so concurrent checks on this space queue up
        space = self.restaurants.lock_space(restaurant.id, candidate.space_id)
        if space is None:
            raise SpaceNotFoundError(candidate.space_id, restaurant.id)

        if candidate.start_time.date() != candidate.end_time.date():
            logger.warning(
                f"Reservation rejected: spans {candidate.start_time.date()} to {candidate.end_time.date()}"
            )
            raise MultiDayReservationError(candidate.start_time.date(), candidate.end_time.date())

        slot_minutes = self.defaults.slot_minutes_for(space)
        start = align_start_to_nearest_slot(candidate.start_time, slot_minutes)
        end = align_end_to_slot_ceiling(candidate.end_time, slot_minutes)
        logger.debug(
            f"Aligned {candidate.start_time} - {candidate.end_time} to {start} - {end} "
            f"({slot_minutes} minute slots)"
        )

        aligned_minutes = duration_minutes(start, end)
        if aligned_minutes < slot_minutes:
            logger.warning(
                f"Reservation rejected: aligned duration {aligned_minutes} < {slot_minutes} minutes"
            )
            raise InvalidReservationDurationError(slot_minutes, aligned_minutes)

        self._check_operating_hours(space, start, end)

        if not space.min_capacity <= candidate.party_size <= space.max_capacity:
            logger.warning(
                f"Reservation rejected: party of {candidate.party_size} outside "
                f"{space.min_capacity}-{space.max_capacity} for space {space.id}"
            )
            raise InvalidPartySizeError(candidate.party_size, space.min_capacity, space.max_capacity)

        reservation = Reservation(
            restaurant_id=restaurant.id,
            space_id=space.id,
            customer_email=candidate.customer_email,
            start_time=start,
            end_time=end,
            party_size=candidate.party_size,
            status=candidate.status,
        )

        try:
            self.capacity.validate(reservation, space)
        except CapacityExceededError as e:
            logger.warning(f"Reservation rejected: {e.message}")
            raise

        return self.reservations.add(reservation)

    def _check_operating_hours(self, space: Space, start, end) -> None:
        """Compare time-of-day only. Equality at either bound is allowed."""
        opening = self.defaults.operating_start_for(space)
        closing = self.defaults.operating_end_for(space)

        # Ceiling alignment can push the end past midnight onto the next date
        if start.time() < opening or end.time() > closing or end.date() != start.date():
            logger.warning(
                f"Reservation rejected: {start.time():%H:%M}-{end.time():%H:%M} outside "
                f"{opening:%H:%M}-{closing:%H:%M} for space {space.id}"
            )
            raise OutsideOperatingHoursError(start.time(), end.time(), opening, closing)

    def delete_reservation(self, reservation_id: UUID) -> bool:
        """
        Delete a reservation.

        Args:
            reservation_id: ID of the reservation to delete

        Returns:
            True if it was deleted, False if it did not exist
        """
        reservation = self.reservations.find_by_id(reservation_id)
        if reservation is None:
            return False

        restaurant_id = reservation.restaurant_id
        try:
            self.reservations.delete(reservation)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self._evict(restaurant_id)
        logger.info(f"Reservation {reservation_id} deleted")
        return True

    def get_all_reservations(self) -> List[Reservation]:
        return self.reservations.find_all()

    def get_reservation_by_id(self, reservation_id: UUID) -> Optional[Reservation]:
        return self.reservations.find_by_id(reservation_id)

    def get_reservation(self, reservation_id: UUID) -> Reservation:
        """
        Get a reservation by ID.

        Raises:
            ReservationNotFoundError: If reservation not found
        """
        reservation = self.reservations.find_by_id(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        return reservation

    def get_reservations_by_restaurant(self, restaurant_id: UUID) -> List[Reservation]:
        return self.reservations.find_by_restaurant(restaurant_id)

    def get_reservations_by_space(self, restaurant_id: UUID, space_id: UUID) -> List[Reservation]:
        return self.reservations.find_by_space(restaurant_id, space_id)

    def _evict(self, restaurant_id: UUID) -> None:
        if self.report_cache is not None:
            self.report_cache.evict_restaurant(restaurant_id)

"""
Capacity validation for private dining spaces.

Concurrent reservations in a space are allowed as long as the combined
headcount of every reservation overlapping a window stays within the
space's maximum capacity.
"""
import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from core.exceptions import CapacityExceededError
from db.models_sqlalchemy import Reservation, Space
from db.repositories import ReservationRepository


logger = logging.getLogger(__name__)


class CapacityService:
    """Computes concurrent occupancy and enforces the capacity ceiling."""

    def __init__(self, db_session: Session):
        """
        Initialize the capacity service.

        Args:
            db_session: SQLAlchemy database session
        """
        self.db = db_session
        self.reservations = ReservationRepository(db_session)

    def calculate_occupancy(
        self,
        restaurant_id: UUID,
        space_id: UUID,
        start: datetime,
        end: datetime,
        exclude_reservation_id: Optional[UUID] = None,
    ) -> int:
        """
        Sum party sizes of all reservations overlapping [start, end).

        Args:
            restaurant_id: Restaurant of the space
            space_id: Space to inspect
            start: Window start
            end: Window end (exclusive)
            exclude_reservation_id: Reservation left out of the sum (for updates)

        Returns:
            Combined headcount of overlapping reservations
        """
        overlapping = self.reservations.find_overlapping(
            restaurant_id,
            start,
            end,
            space_id=space_id,
            exclude_id=exclude_reservation_id,
        )
        return sum(r.party_size for r in overlapping)

    def validate(self, reservation: Reservation, space: Space) -> None:
        """
        Check that a candidate reservation fits the space.

        Raises:
            CapacityExceededError: If combined headcount would exceed max capacity
        """
        self._validate(reservation, space, exclude_reservation_id=None)

    def validate_excluding(
        self,
        reservation: Reservation,
        space: Space,
        exclude_reservation_id: UUID,
    ) -> None:
        """
        Same as validate, ignoring one stored reservation (its own prior state).

        Raises:
            CapacityExceededError: If combined headcount would exceed max capacity
        """
        self._validate(reservation, space, exclude_reservation_id=exclude_reservation_id)

    def available_capacity(
        self,
        restaurant_id: UUID,
        space_id: UUID,
        start: datetime,
        end: datetime,
        max_capacity: int,
    ) -> int:
        """Remaining headcount for a window, never negative."""
        occupancy = self.calculate_occupancy(restaurant_id, space_id, start, end)
        return max(0, max_capacity - occupancy)

    def _validate(
        self,
        reservation: Reservation,
        space: Space,
        exclude_reservation_id: Optional[UUID],
    ) -> None:
        current_occupancy = self.calculate_occupancy(
            reservation.restaurant_id,
            reservation.space_id,
            reservation.start_time,
            reservation.end_time,
            exclude_reservation_id=exclude_reservation_id,
        )
        new_total = current_occupancy + reservation.party_size

        logger.debug(
            f"Capacity check for space {space.id}: occupancy={current_occupancy}, "
            f"requested={reservation.party_size}, max={space.max_capacity}"
        )

        # Exactly at capacity is allowed
        if new_total > space.max_capacity:
            raise CapacityExceededError(
                restaurant_id=reservation.restaurant_id,
                space_id=reservation.space_id,
                start=reservation.start_time,
                end=reservation.end_time,
                requested_party_size=reservation.party_size,
                current_occupancy=current_occupancy,
                max_capacity=space.max_capacity,
            )

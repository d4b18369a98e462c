"""Persistence queries for restaurants and reservations."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from .models_sqlalchemy import Reservation, Restaurant, Space


class RestaurantRepository:
    """CRUD access to restaurants and their spaces."""

    def __init__(self, db_session: Session):
        self.db = db_session

    def find_all(self) -> List[Restaurant]:
        return list(self.db.scalars(select(Restaurant).order_by(Restaurant.name)))

    def find_by_id(self, restaurant_id: UUID) -> Optional[Restaurant]:
        return self.db.get(Restaurant, restaurant_id)

    def add(self, restaurant: Restaurant) -> Restaurant:
        self.db.add(restaurant)
        self.db.flush()
        return restaurant

    def delete(self, restaurant: Restaurant) -> None:
        self.db.delete(restaurant)
        self.db.flush()

    def count(self) -> int:
        return self.db.scalar(select(func.count()).select_from(Restaurant))

    def lock_space(self, restaurant_id: UUID, space_id: UUID) -> Optional[Space]:
        """
        Load a space row with a write lock held until the transaction ends.

        On PostgreSQL this serializes concurrent capacity checks for the same
        space. SQLite ignores FOR UPDATE and serializes writers per database.
        """
        stmt = (
            select(Space)
            .where(Space.restaurant_id == restaurant_id, Space.id == space_id)
            .with_for_update()
        )
        return self.db.scalars(stmt).first()


class ReservationRepository:
    """CRUD access to reservations plus the time-window overlap query."""

    def __init__(self, db_session: Session):
        self.db = db_session

    def find_all(self) -> List[Reservation]:
        stmt = select(Reservation).order_by(Reservation.start_time, Reservation.id)
        return list(self.db.scalars(stmt))

    def find_by_id(self, reservation_id: UUID) -> Optional[Reservation]:
        return self.db.get(Reservation, reservation_id)

    def find_by_restaurant(self, restaurant_id: UUID) -> List[Reservation]:
        stmt = (
            select(Reservation)
            .where(Reservation.restaurant_id == restaurant_id)
            .order_by(Reservation.start_time, Reservation.id)
        )
        return list(self.db.scalars(stmt))

    def find_by_space(self, restaurant_id: UUID, space_id: UUID) -> List[Reservation]:
        stmt = (
            select(Reservation)
            .where(
                Reservation.restaurant_id == restaurant_id,
                Reservation.space_id == space_id,
            )
            .order_by(Reservation.start_time, Reservation.id)
        )
        return list(self.db.scalars(stmt))

    def find_overlapping(
        self,
        restaurant_id: UUID,
        start: datetime,
        end: datetime,
        space_id: Optional[UUID] = None,
        exclude_id: Optional[UUID] = None,
    ) -> List[Reservation]:
        """
        Find reservations whose interval overlaps [start, end).

        Two half-open intervals overlap when
        ``existing.start < end AND existing.end > start``.

        Args:
            restaurant_id: Restaurant to search
            start: Start of the window
            end: End of the window (exclusive)
            space_id: Restrict to one space when given
            exclude_id: Reservation to leave out of the result

        Returns:
            Matching reservations ordered by start time
        """
        stmt = select(Reservation).where(
            Reservation.restaurant_id == restaurant_id,
            Reservation.start_time < end,
            Reservation.end_time > start,
        )

        if space_id is not None:
            stmt = stmt.where(Reservation.space_id == space_id)

        if exclude_id is not None:
            stmt = stmt.where(Reservation.id != exclude_id)

        stmt = stmt.order_by(Reservation.start_time, Reservation.id)
        return list(self.db.scalars(stmt))

    def count_for_space(self, restaurant_id: UUID, space_id: UUID) -> int:
        stmt = select(func.count()).select_from(Reservation).where(
            Reservation.restaurant_id == restaurant_id,
            Reservation.space_id == space_id,
        )
        return self.db.scalar(stmt)

    def count(self) -> int:
        return self.db.scalar(select(func.count()).select_from(Reservation))

    def add(self, reservation: Reservation) -> Reservation:
        self.db.add(reservation)
        self.db.flush()
        return reservation

    def delete(self, reservation: Reservation) -> None:
        self.db.delete(reservation)
        self.db.flush()

    def delete_by_restaurant(self, restaurant_id: UUID) -> int:
        result = self.db.execute(
            delete(Reservation).where(Reservation.restaurant_id == restaurant_id)
        )
        return result.rowcount

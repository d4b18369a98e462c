"""SQLAlchemy models for restaurants, their spaces and reservations."""

from datetime import datetime, time
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Time, Uuid
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class Restaurant(Base):
    """Restaurant table model. Owns its ordered list of spaces."""

    __tablename__ = "restaurants"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )

    name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, index=True)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    cuisine_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Informational only, never checked against the spaces
    capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    spaces: Mapped[List["Space"]] = relationship(
        back_populates="restaurant",
        order_by="Space.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def find_space(self, space_id: UUID) -> Optional["Space"]:
        """Return the space with the given id, or None."""
        return next((s for s in self.spaces if s.id == space_id), None)

    def __repr__(self) -> str:
        """String representation of Restaurant."""
        return f"<Restaurant(id={self.id}, name='{self.name}', spaces={len(self.spaces)})>"


class Space(Base):
    """Private dining space inside a restaurant."""

    __tablename__ = "spaces"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )

    restaurant_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    min_capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    max_capacity: Mapped[int] = mapped_column(Integer, nullable=False)

    # None means "use the process-wide default"
    operating_start_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    operating_end_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    time_slot_duration_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    restaurant: Mapped[Restaurant] = relationship(back_populates="spaces")

    def __repr__(self) -> str:
        """String representation of Space."""
        return (
            f"<Space(id={self.id}, name='{self.name}', "
            f"capacity={self.min_capacity}-{self.max_capacity})>"
        )


class Reservation(Base, TimestampMixin):
    """Reservation table model."""

    __tablename__ = "reservations"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )

    restaurant_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Not a foreign key: the space lives inside the restaurant document
    space_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)

    customer_email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)

    # Half-open interval [start_time, end_time)
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    party_size: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    __table_args__ = (
        Index(
            "ix_reservations_restaurant_space_window",
            "restaurant_id", "space_id", "start_time", "end_time",
        ),
        Index("ix_reservations_restaurant_window", "restaurant_id", "start_time", "end_time"),
    )

    def __repr__(self) -> str:
        """String representation of Reservation."""
        return (
            f"<Reservation(id={self.id}, space={self.space_id}, "
            f"start={self.start_time}, end={self.end_time}, party={self.party_size}, "
            f"status='{self.status}')>"
        )

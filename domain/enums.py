"""Domain enums for the private dining service."""

from enum import Enum


class ReservationStatus(str, Enum):
    """Well-known reservation statuses. The stored status is free text."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"

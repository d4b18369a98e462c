"""Database layer for the private dining service."""

from .base import Base, TimestampMixin
from .models_sqlalchemy import Restaurant, Space, Reservation
from .repositories import RestaurantRepository, ReservationRepository
from .session import (
    engine,
    SessionLocal,
    create_engine,
    create_session_factory,
    get_session,
    get_session_context,
    init_db,
    close_db,
    DatabaseConfig,
)

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Models
    "Restaurant",
    "Space",
    "Reservation",
    # Repositories
    "RestaurantRepository",
    "ReservationRepository",
    # Session
    "engine",
    "SessionLocal",
    "create_engine",
    "create_session_factory",
    "get_session",
    "get_session_context",
    "init_db",
    "close_db",
    "DatabaseConfig",
]

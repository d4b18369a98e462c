"""
Initial data loading.

Reads a JSON document of restaurants and reservations and inserts it as-is
into an empty database. Nothing is loaded once either table has rows.
"""
import json
import logging
from pathlib import Path
from typing import List, NamedTuple, Optional
from uuid import UUID, uuid4

from pydantic import Field
from sqlalchemy.orm import Session

from db.models_sqlalchemy import Reservation, Restaurant, Space
from db.repositories import ReservationRepository, RestaurantRepository
from domain.models import CamelModel, ReservationCreate, RestaurantCreate


logger = logging.getLogger(__name__)


class SeedRestaurant(RestaurantCreate):
    """Seeded restaurants may pin their id so reservations can reference it."""

    id: Optional[UUID] = None


class SeedReservation(ReservationCreate):
    id: Optional[UUID] = None


class SeedDocument(CamelModel):
    restaurants: List[SeedRestaurant] = Field(default_factory=list)
    reservations: List[SeedReservation] = Field(default_factory=list)


class SeedResult(NamedTuple):
    restaurants: int
    reservations: int


def load_seed_data(db_session: Session, file_path: str) -> SeedResult:
    """
    Load seed data from a JSON file into an empty database.

    Date-times may be ISO 8601 or ``dd-MM-yyyy HH:mm``; times are ``HH:MM``.
    Seeded rows bypass admission checks.

    Args:
        db_session: SQLAlchemy database session
        file_path: Path to the seed JSON file

    Returns:
        Number of restaurants and reservations inserted (zero when skipped)
    """
    seed_file = Path(file_path)

    if not seed_file.exists():
        raise FileNotFoundError(f"Seed file not found: {file_path}")

    restaurants = RestaurantRepository(db_session)
    reservations = ReservationRepository(db_session)

    if restaurants.count() > 0 or reservations.count() > 0:
        logger.info("Database already contains data, skipping seed")
        return SeedResult(0, 0)

    with open(seed_file, 'r', encoding='utf-8') as f:
        document = SeedDocument.model_validate(json.load(f))

    try:
        for item in document.restaurants:
            restaurant = Restaurant(
                id=item.id or uuid4(),
                name=item.name,
                address=item.address,
                cuisine_type=item.cuisine_type,
                capacity=item.capacity,
            )
            for space_data in item.spaces:
                restaurant.spaces.append(
                    Space(
                        id=space_data.id or uuid4(),
                        name=space_data.name,
                        min_capacity=space_data.min_capacity,
                        max_capacity=space_data.max_capacity,
                        operating_start_time=space_data.operating_start_time,
                        operating_end_time=space_data.operating_end_time,
                        time_slot_duration_minutes=space_data.time_slot_duration_minutes,
                    )
                )
            restaurants.add(restaurant)

        for item in document.reservations:
            reservations.add(
                Reservation(
                    id=item.id or uuid4(),
                    restaurant_id=item.restaurant_id,
                    space_id=item.space_id,
                    customer_email=item.customer_email,
                    start_time=item.start_time,
                    end_time=item.end_time,
                    party_size=item.party_size,
                    status=item.status,
                )
            )

        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    result = SeedResult(len(document.restaurants), len(document.reservations))
    logger.info(
        f"Seeded {result.restaurants} restaurant(s) and {result.reservations} reservation(s) "
        f"from {seed_file}"
    )
    return result

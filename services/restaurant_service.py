"""
Restaurant and space management.

A restaurant owns an ordered list of private dining spaces. Space ids are
always generated here; a supplied id is only used to keep an existing space
when a restaurant document is replaced.
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from core.exceptions import RestaurantNotFoundError, SpaceInUseError, SpaceNotFoundError
from db.models_sqlalchemy import Restaurant, Space
from db.repositories import ReservationRepository, RestaurantRepository
from domain.models import RestaurantCreate, SpaceCreate
from services.report_cache import ReportCache


logger = logging.getLogger(__name__)


def _space_from_payload(payload: SpaceCreate) -> Space:
    return Space(
        name=payload.name,
        min_capacity=payload.min_capacity,
        max_capacity=payload.max_capacity,
        operating_start_time=payload.operating_start_time,
        operating_end_time=payload.operating_end_time,
        time_slot_duration_minutes=payload.time_slot_duration_minutes,
    )


def _apply_space_payload(space: Space, payload: SpaceCreate) -> None:
    space.name = payload.name
    space.min_capacity = payload.min_capacity
    space.max_capacity = payload.max_capacity
    space.operating_start_time = payload.operating_start_time
    space.operating_end_time = payload.operating_end_time
    space.time_slot_duration_minutes = payload.time_slot_duration_minutes


class RestaurantService:
    """Service for managing restaurants and their private dining spaces."""

    def __init__(self, db_session: Session, report_cache: Optional[ReportCache] = None):
        """
        Initialize the restaurant service.

        Args:
            db_session: SQLAlchemy database session
            report_cache: Analytics cache evicted when a restaurant's spaces change
        """
        self.db = db_session
        self.report_cache = report_cache
        self.restaurants = RestaurantRepository(db_session)
        self.reservations = ReservationRepository(db_session)

    # ------------------------------------------------------------------
    # Restaurants
    # ------------------------------------------------------------------

    def list_restaurants(self) -> List[Restaurant]:
        return self.restaurants.find_all()

    def find_restaurant(self, restaurant_id: UUID) -> Optional[Restaurant]:
        return self.restaurants.find_by_id(restaurant_id)

    def get_restaurant(self, restaurant_id: UUID) -> Restaurant:
        """
        Get a restaurant by ID.

        Raises:
            RestaurantNotFoundError: If restaurant not found
        """
        restaurant = self.restaurants.find_by_id(restaurant_id)
        if restaurant is None:
            raise RestaurantNotFoundError(restaurant_id)
        return restaurant

    def create_restaurant(self, payload: RestaurantCreate) -> Restaurant:
        """
        Create a restaurant with its spaces.

        Args:
            payload: Restaurant document; space ids in it are ignored

        Returns:
            Stored restaurant with generated ids
        """
        restaurant = Restaurant(
            name=payload.name,
            address=payload.address,
            cuisine_type=payload.cuisine_type,
            capacity=payload.capacity,
        )
        for space_payload in payload.spaces:
            restaurant.spaces.append(_space_from_payload(space_payload))

        self._commit(lambda: self.restaurants.add(restaurant))

        logger.info(
            f"Restaurant {restaurant.id} created with {len(restaurant.spaces)} space(s)"
        )
        return restaurant

    def update_restaurant(self, restaurant_id: UUID, payload: RestaurantCreate) -> Optional[Restaurant]:
        """
        Replace a restaurant document.

        Spaces whose supplied id matches an existing space keep that id; every
        other space gets a fresh id. Existing spaces missing from the payload
        are removed, which fails while reservations still reference them.

        Args:
            restaurant_id: ID of the restaurant to replace
            payload: New restaurant document

        Returns:
            Updated restaurant, or None if it does not exist

        Raises:
            SpaceInUseError: If a dropped space still has reservations
        """
        restaurant = self.restaurants.find_by_id(restaurant_id)
        if restaurant is None:
            return None

        existing = {space.id: space for space in restaurant.spaces}
        kept_ids = {s.id for s in payload.spaces if s.id is not None and s.id in existing}

        for space_id in existing:
            if space_id not in kept_ids:
                self._ensure_space_unused(restaurant_id, space_id)

        spaces: List[Space] = []
        for space_payload in payload.spaces:
            space = existing.get(space_payload.id) if space_payload.id is not None else None
            if space is not None and space not in spaces:
                _apply_space_payload(space, space_payload)
            else:
                space = _space_from_payload(space_payload)
            spaces.append(space)

        def apply():
            restaurant.name = payload.name
            restaurant.address = payload.address
            restaurant.cuisine_type = payload.cuisine_type
            restaurant.capacity = payload.capacity
            restaurant.spaces = spaces
            # Kept spaces still carry their old position
            restaurant.spaces.reorder()
            self.db.flush()

        self._commit(apply)
        self._evict(restaurant_id)

        logger.info(f"Restaurant {restaurant_id} updated ({len(spaces)} space(s))")
        return restaurant

    def delete_restaurant(self, restaurant_id: UUID) -> bool:
        """
        Delete a restaurant together with its spaces and reservations.

        Returns:
            True if it was deleted, False if it did not exist
        """
        restaurant = self.restaurants.find_by_id(restaurant_id)
        if restaurant is None:
            return False

        def apply():
            removed = self.reservations.delete_by_restaurant(restaurant_id)
            self.restaurants.delete(restaurant)
            logger.info(f"Restaurant {restaurant_id} deleted with {removed} reservation(s)")

        self._commit(apply)
        self._evict(restaurant_id)
        return True

    # ------------------------------------------------------------------
    # Spaces
    # ------------------------------------------------------------------

    def add_space(self, restaurant_id: UUID, payload: SpaceCreate) -> Optional[Restaurant]:
        """
        Append a space to a restaurant. The space always gets a fresh id.

        Returns:
            Updated restaurant, or None if it does not exist
        """
        restaurant = self.restaurants.find_by_id(restaurant_id)
        if restaurant is None:
            return None

        space = _space_from_payload(payload)

        def apply():
            restaurant.spaces.append(space)
            self.db.flush()

        self._commit(apply)
        self._evict(restaurant_id)

        logger.info(f"Space {space.id} ({space.name}) added to restaurant {restaurant_id}")
        return restaurant

    def remove_space(self, restaurant_id: UUID, space_id: UUID) -> Optional[Restaurant]:
        """
        Remove a space from a restaurant.

        Returns:
            Updated restaurant, or None if the restaurant does not exist

        Raises:
            SpaceNotFoundError: If the space is not part of the restaurant
            SpaceInUseError: If reservations still reference the space
        """
        restaurant = self.restaurants.find_by_id(restaurant_id)
        if restaurant is None:
            return None

        space = restaurant.find_space(space_id)
        if space is None:
            raise SpaceNotFoundError(space_id, restaurant_id)

        self._ensure_space_unused(restaurant_id, space_id)

        def apply():
            restaurant.spaces.remove(space)
            self.db.flush()

        self._commit(apply)
        self._evict(restaurant_id)

        logger.info(f"Space {space_id} removed from restaurant {restaurant_id}")
        return restaurant

    def get_space(self, restaurant_id: UUID, space_id: UUID) -> Space:
        """
        Get one space of a restaurant.

        Raises:
            RestaurantNotFoundError: If restaurant not found
            SpaceNotFoundError: If the space is not part of the restaurant
        """
        space = self.get_restaurant(restaurant_id).find_space(space_id)
        if space is None:
            raise SpaceNotFoundError(space_id, restaurant_id)
        return space

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ensure_space_unused(self, restaurant_id: UUID, space_id: UUID) -> None:
        count = self.reservations.count_for_space(restaurant_id, space_id)
        if count > 0:
            logger.warning(
                f"Space {space_id} of restaurant {restaurant_id} still has {count} reservation(s)"
            )
            raise SpaceInUseError(restaurant_id, space_id, count)

    def _commit(self, apply) -> None:
        try:
            apply()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def _evict(self, restaurant_id: UUID) -> None:
        if self.report_cache is not None:
            self.report_cache.evict_restaurant(restaurant_id)

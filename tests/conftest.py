"""Pytest configuration and fixtures for private dining service tests."""
import pytest
from datetime import datetime, time
from fastapi.testclient import TestClient

from core.space_defaults import SpaceDefaults
from db.session import create_engine, create_session_factory, init_db
from domain.models import ReservationCreate, RestaurantCreate, SpaceCreate
from services.analytics_service import AnalyticsConfig, OccupancyAnalyticsService
from services.capacity_service import CapacityService
from services.report_cache import ReportCache
from services.reservation_service import ReservationService
from services.restaurant_service import RestaurantService


@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine("sqlite:///:memory:")
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a database session for testing."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(scope="function")
def space_defaults():
    """Defaults matching the shipped configuration."""
    return SpaceDefaults(
        operating_start=time(9, 0),
        operating_end=time(22, 0),
        slot_duration_minutes=60,
    )


@pytest.fixture(scope="function")
def report_cache():
    return ReportCache(ttl_seconds=600, max_size=100)


@pytest.fixture(scope="function")
def capacity_service(db_session):
    return CapacityService(db_session)


@pytest.fixture(scope="function")
def restaurant_service(db_session, report_cache):
    return RestaurantService(db_session, report_cache=report_cache)


@pytest.fixture(scope="function")
def reservation_service(db_session, space_defaults, capacity_service, report_cache):
    return ReservationService(
        db_session,
        space_defaults,
        capacity_service=capacity_service,
        report_cache=report_cache,
    )


@pytest.fixture(scope="function")
def analytics_service(db_session, report_cache):
    return OccupancyAnalyticsService(
        db_session,
        config=AnalyticsConfig(slot_minutes=60, max_range_days=31),
        report_cache=report_cache,
    )


@pytest.fixture(scope="function")
def base_time():
    """Provide a base datetime for consistent testing."""
    return datetime(2026, 1, 20, 12, 0)  # Noon on January 20, 2026


@pytest.fixture(scope="function")
def create_restaurant(restaurant_service):
    """Factory fixture to create a restaurant with spaces."""
    def _create(name="The Gilded Fork", spaces=None, **kwargs):
        if spaces is None:
            spaces = [SpaceCreate(name="Wine Cellar", min_capacity=2, max_capacity=10)]
        payload = RestaurantCreate(
            name=name,
            address=kwargs.get("address", "12 Harbour Street"),
            cuisine_type=kwargs.get("cuisine_type", "French"),
            capacity=kwargs.get("capacity", 120),
            spaces=spaces,
        )
        return restaurant_service.create_restaurant(payload)
    return _create


@pytest.fixture(scope="function")
def restaurant(create_restaurant):
    """
    Restaurant with two spaces:

    - Wine Cellar: default hours and 60 minute slots, capacity 2-10
    - Garden Room: 10:00-20:00, 30 minute slots, capacity 1-20
    """
    return create_restaurant(
        spaces=[
            SpaceCreate(name="Wine Cellar", min_capacity=2, max_capacity=10),
            SpaceCreate(
                name="Garden Room",
                min_capacity=1,
                max_capacity=20,
                operating_start_time=time(10, 0),
                operating_end_time=time(20, 0),
                time_slot_duration_minutes=30,
            ),
        ]
    )


@pytest.fixture(scope="function")
def wine_cellar(restaurant):
    return restaurant.spaces[0]


@pytest.fixture(scope="function")
def garden_room(restaurant):
    return restaurant.spaces[1]


@pytest.fixture(scope="function")
def make_request(restaurant, wine_cellar, base_time):
    """Factory fixture building a reservation request (not persisted)."""
    def _make(**kwargs):
        data = {
            "restaurant_id": restaurant.id,
            "space_id": wine_cellar.id,
            "customer_email": "guest@example.com",
            "start_time": base_time,
            "end_time": base_time.replace(hour=14),
            "party_size": 4,
        }
        data.update(kwargs)
        return ReservationCreate(**data)
    return _make


@pytest.fixture(scope="function")
def create_reservation(reservation_service, make_request):
    """Factory fixture to create and persist a reservation."""
    def _create(**kwargs):
        return reservation_service.create_reservation(make_request(**kwargs))
    return _create


@pytest.fixture(scope="function")
def client(session_factory, space_defaults, report_cache):
    """FastAPI test client bound to the in-memory database."""
    from apps.api.deps import get_db, get_report_cache, get_space_defaults
    from apps.api.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_report_cache] = lambda: report_cache
    app.dependency_overrides[get_space_defaults] = lambda: space_defaults

    # No context manager: the lifespan would touch the configured database
    yield TestClient(app)

    app.dependency_overrides.clear()

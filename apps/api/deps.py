"""FastAPI dependencies: database session and service wiring."""

from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from core.config import settings
from core.space_defaults import SpaceDefaults
from db.session import get_session
from services.analytics_service import AnalyticsConfig, OccupancyAnalyticsService
from services.report_cache import ReportCache
from services.reservation_service import ReservationService
from services.restaurant_service import RestaurantService


# Built once per process from settings
space_defaults = SpaceDefaults.from_settings(settings)
analytics_config = AnalyticsConfig.from_settings(settings)
report_cache = ReportCache.from_settings(settings)


def get_db() -> Generator[Session, None, None]:
    """Yield a request-scoped database session."""
    yield from get_session()


def get_space_defaults() -> SpaceDefaults:
    return space_defaults


def get_analytics_config() -> AnalyticsConfig:
    return analytics_config


def get_report_cache() -> ReportCache:
    return report_cache


def get_restaurant_service(
    db: Session = Depends(get_db),
    cache: ReportCache = Depends(get_report_cache),
) -> RestaurantService:
    return RestaurantService(db, report_cache=cache)


def get_reservation_service(
    db: Session = Depends(get_db),
    defaults: SpaceDefaults = Depends(get_space_defaults),
    cache: ReportCache = Depends(get_report_cache),
) -> ReservationService:
    return ReservationService(db, defaults, report_cache=cache)


def get_analytics_service(
    db: Session = Depends(get_db),
    config: AnalyticsConfig = Depends(get_analytics_config),
    cache: ReportCache = Depends(get_report_cache),
) -> OccupancyAnalyticsService:
    return OccupancyAnalyticsService(db, config=config, report_cache=cache)

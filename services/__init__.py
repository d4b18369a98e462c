"""Business services for the private dining service."""

from .report_cache import ReportCache, ReportCacheKey
from .capacity_service import CapacityService
from .reservation_service import ReservationService
from .restaurant_service import RestaurantService
from .analytics_service import AnalyticsConfig, OccupancyAnalyticsService
from .seed_loader import load_seed_data

__all__ = [
    "ReportCache",
    "ReportCacheKey",
    "CapacityService",
    "ReservationService",
    "RestaurantService",
    "AnalyticsConfig",
    "OccupancyAnalyticsService",
    "load_seed_data",
]

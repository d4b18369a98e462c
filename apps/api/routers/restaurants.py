"""Restaurant, space and occupancy analytics endpoints."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from apps.api.deps import (
    get_analytics_service,
    get_restaurant_service,
    get_space_defaults,
)
from core.config import settings
from core.exceptions import RestaurantNotFoundError
from core.space_defaults import SpaceDefaults
from domain.models import (
    OccupancyReportResponse,
    RestaurantCreate,
    RestaurantRecord,
    SpaceCreate,
    SpaceRecord,
)
from services.analytics_service import OccupancyAnalyticsService
from services.restaurant_service import RestaurantService


router = APIRouter(prefix="/restaurants", tags=["restaurants"])


@router.get("", response_model=List[RestaurantRecord])
def list_restaurants(
    service: RestaurantService = Depends(get_restaurant_service),
    defaults: SpaceDefaults = Depends(get_space_defaults),
):
    """List all restaurants with their spaces."""
    return [RestaurantRecord.from_restaurant(r, defaults) for r in service.list_restaurants()]


@router.get("/{restaurant_id}", response_model=RestaurantRecord)
def get_restaurant(
    restaurant_id: UUID,
    service: RestaurantService = Depends(get_restaurant_service),
    defaults: SpaceDefaults = Depends(get_space_defaults),
):
    """Get a restaurant by ID."""
    restaurant = service.find_restaurant(restaurant_id)
    if restaurant is None:
        raise RestaurantNotFoundError(restaurant_id)
    return RestaurantRecord.from_restaurant(restaurant, defaults)


@router.post("", response_model=RestaurantRecord, status_code=status.HTTP_201_CREATED)
def create_restaurant(
    payload: RestaurantCreate,
    service: RestaurantService = Depends(get_restaurant_service),
    defaults: SpaceDefaults = Depends(get_space_defaults),
):
    """
    Create a restaurant together with its spaces.

    Space ids are always generated by the server.
    """
    restaurant = service.create_restaurant(payload)
    return RestaurantRecord.from_restaurant(restaurant, defaults)


@router.put("/{restaurant_id}", response_model=RestaurantRecord)
def update_restaurant(
    restaurant_id: UUID,
    payload: RestaurantCreate,
    service: RestaurantService = Depends(get_restaurant_service),
    defaults: SpaceDefaults = Depends(get_space_defaults),
):
    """Replace a restaurant document."""
    restaurant = service.update_restaurant(restaurant_id, payload)
    if restaurant is None:
        raise RestaurantNotFoundError(restaurant_id)
    return RestaurantRecord.from_restaurant(restaurant, defaults)


@router.delete("/{restaurant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_restaurant(
    restaurant_id: UUID,
    service: RestaurantService = Depends(get_restaurant_service),
):
    """Delete a restaurant and its reservations."""
    if not service.delete_restaurant(restaurant_id):
        raise RestaurantNotFoundError(restaurant_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{restaurant_id}/spaces", response_model=RestaurantRecord)
def add_space(
    restaurant_id: UUID,
    payload: SpaceCreate,
    service: RestaurantService = Depends(get_restaurant_service),
    defaults: SpaceDefaults = Depends(get_space_defaults),
):
    """Add a private dining space to a restaurant."""
    restaurant = service.add_space(restaurant_id, payload)
    if restaurant is None:
        raise RestaurantNotFoundError(restaurant_id)
    return RestaurantRecord.from_restaurant(restaurant, defaults)


@router.get("/{restaurant_id}/spaces/{space_id}", response_model=SpaceRecord)
def get_space(
    restaurant_id: UUID,
    space_id: UUID,
    service: RestaurantService = Depends(get_restaurant_service),
    defaults: SpaceDefaults = Depends(get_space_defaults),
):
    """Get one space with its effective operating hours and slot length."""
    return SpaceRecord.from_space(service.get_space(restaurant_id, space_id), defaults)


@router.delete("/{restaurant_id}/spaces/{space_id}", response_model=RestaurantRecord)
def remove_space(
    restaurant_id: UUID,
    space_id: UUID,
    service: RestaurantService = Depends(get_restaurant_service),
    defaults: SpaceDefaults = Depends(get_space_defaults),
):
    """Remove a space that no reservation references."""
    restaurant = service.remove_space(restaurant_id, space_id)
    if restaurant is None:
        raise RestaurantNotFoundError(restaurant_id)
    return RestaurantRecord.from_restaurant(restaurant, defaults)


@router.get("/{restaurant_id}/analytics/occupancy", response_model=OccupancyReportResponse)
def get_occupancy_report(
    restaurant_id: UUID,
    start_time: datetime = Query(..., alias="startTime", description="Start of the report period"),
    end_time: datetime = Query(..., alias="endTime", description="End of the report period"),
    space_id: Optional[UUID] = Query(None, alias="spaceId", description="Limit the report to one space"),
    page: int = Query(0, ge=0, description="Page number (0-based)"),
    size: int = Query(settings.report_default_page_size, ge=1, description="Page size"),
    service: OccupancyAnalyticsService = Depends(get_analytics_service),
):
    """
    Get an occupancy report for a restaurant.

    Args:
        restaurant_id: Restaurant ID
        start_time: Start of the report period (ISO date-time)
        end_time: End of the report period (ISO date-time)
        space_id: Optional space to report on
        page: Page of space reports
        size: Space reports per page

    Returns:
        OccupancyReportResponse: Per-slot breakdown per space plus a summary
    """
    return service.generate_report(restaurant_id, start_time, end_time, space_id, page, size)

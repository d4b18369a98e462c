"""Reservation endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from apps.api.deps import get_reservation_service
from core.exceptions import ReservationNotFoundError
from domain.models import ReservationCreate, ReservationRecord
from services.reservation_service import ReservationService


router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.get("", response_model=List[ReservationRecord])
def list_reservations(service: ReservationService = Depends(get_reservation_service)):
    """List all reservations."""
    return [ReservationRecord.model_validate(r) for r in service.get_all_reservations()]


@router.get("/restaurant/{restaurant_id}", response_model=List[ReservationRecord])
def list_restaurant_reservations(
    restaurant_id: UUID,
    service: ReservationService = Depends(get_reservation_service),
):
    """List reservations of one restaurant."""
    reservations = service.get_reservations_by_restaurant(restaurant_id)
    return [ReservationRecord.model_validate(r) for r in reservations]


@router.get("/restaurant/{restaurant_id}/space/{space_id}", response_model=List[ReservationRecord])
def list_space_reservations(
    restaurant_id: UUID,
    space_id: UUID,
    service: ReservationService = Depends(get_reservation_service),
):
    """List reservations of one space."""
    reservations = service.get_reservations_by_space(restaurant_id, space_id)
    return [ReservationRecord.model_validate(r) for r in reservations]


@router.get("/{reservation_id}", response_model=ReservationRecord)
def get_reservation(
    reservation_id: UUID,
    service: ReservationService = Depends(get_reservation_service),
):
    """Get a specific reservation by ID."""
    return ReservationRecord.model_validate(service.get_reservation(reservation_id))


@router.post("", response_model=ReservationRecord, status_code=status.HTTP_201_CREATED)
def create_reservation(
    payload: ReservationCreate,
    service: ReservationService = Depends(get_reservation_service),
):
    """
    Create a reservation.

    Start and end are aligned to the space's slot grid before validation;
    the response carries the aligned times.
    """
    return ReservationRecord.model_validate(service.create_reservation(payload))


@router.delete("/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reservation(
    reservation_id: UUID,
    service: ReservationService = Depends(get_reservation_service),
):
    """Delete a reservation."""
    if not service.delete_reservation(reservation_id):
        raise ReservationNotFoundError(reservation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

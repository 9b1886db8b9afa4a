from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from cocheras.database import get_db
from cocheras.crud import reservation as crud
from cocheras.enums.reservation_status import ReservationStatus
from cocheras.schemas.reservation import (
    ReservationCreate,
    ReservationResponse,
    ReservationUpdate,
)
from cocheras.services import reservation_service
from cocheras.services.auth import get_current_user
from cocheras.models.user import User
from cocheras.utils.clock import Clock, get_clock

router = APIRouter()


@router.post("/", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
def create_reservation(
    reservation: ReservationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    return reservation_service.create_reservation(
        db,
        user_id=current_user.id,
        space_id=reservation.space_id,
        start=reservation.start_at,
        end=reservation.end_at,
        clock=clock,
    )


@router.get("/", response_model=List[ReservationResponse])
def read_my_reservations(
    status: Optional[ReservationStatus] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud.get_user_reservations(
        db, current_user.id, status=status, skip=skip, limit=limit
    )


@router.get("/owned", response_model=List[ReservationResponse])
def read_reservations_on_my_spaces(
    status: Optional[ReservationStatus] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud.get_owner_reservations(
        db, current_user.id, status=status, skip=skip, limit=limit
    )


@router.get("/{reservation_id}", response_model=ReservationResponse)
def read_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return reservation_service.get_visible_reservation(db, reservation_id, current_user.id)


@router.patch("/{reservation_id}", response_model=ReservationResponse)
def update_reservation(
    reservation_id: int,
    reservation: ReservationUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    """
    Actualiza el estado y/o el horario de una reserva.

    Disponible para quien hizo la reserva y para el dueño de la cochera; solo
    el dueño puede confirmarla o completarla. El horario solo puede cambiarse
    si el estado resultante no es completada ni cancelada. Ambos cambios se
    guardan juntos o ninguno.
    """
    return reservation_service.update_reservation(
        db,
        reservation_id,
        current_user.id,
        new_status=reservation.status,
        new_start=reservation.start_at,
        new_end=reservation.end_at,
        clock=clock,
    )


@router.delete("/{reservation_id}", response_model=ReservationResponse)
def cancel_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    """Cancela la reserva (no se elimina la fila)"""
    return reservation_service.cancel_reservation(
        db, reservation_id, current_user.id, clock=clock
    )

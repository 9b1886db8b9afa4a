"""
Flujo de reservas: alta, cambio de estado, cambio de horario y cancelación.
"""

import logging
from datetime import datetime
from typing import Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cocheras.crud import reservation as reservation_crud
from cocheras.crud import space as space_crud
from cocheras.enums.reservation_status import (
    OWNER_MANAGED_STATUSES,
    ReservationStatus,
    can_transition,
)
from cocheras.exceptions import (
    Conflict,
    InvalidArgument,
    InvalidState,
    NotFound,
    Unavailable,
)
from cocheras.models.reservation import Reservation
from cocheras.services.availability import is_available, validate_window
from cocheras.services.persistence import commit_or_not_found
from cocheras.utils.clock import Clock, utcnow
from cocheras.utils.permissions import (
    is_reservation_holder,
    is_reservation_party,
    owns_space,
    require,
)

logger = logging.getLogger(__name__)


def get_reservation_or_404(db: Session, reservation_id: int) -> Reservation:
    reservation = reservation_crud.get_reservation(db, reservation_id)
    if reservation is None:
        raise NotFound("Reserva no encontrada")
    return reservation


def get_visible_reservation(db: Session, reservation_id: int, caller_id: int) -> Reservation:
    reservation = get_reservation_or_404(db, reservation_id)
    require(is_reservation_party(caller_id, reservation))
    return reservation


def parse_status(value: Union[str, ReservationStatus]) -> ReservationStatus:
    try:
        return ReservationStatus(value)
    except ValueError:
        raise InvalidArgument("Estado de reserva no válido")


def create_reservation(
    db: Session,
    user_id: int,
    space_id: int,
    start: datetime,
    end: datetime,
    clock: Clock = utcnow,
) -> Reservation:
    # Bloquea la cochera para serializar reservas concurrentes sobre ella
    space = space_crud.get_space_for_update(db, space_id)
    if space is None:
        raise NotFound("La cochera no existe")

    if not space.is_available:
        raise Unavailable("La cochera no está disponible")

    validate_window(start, end)

    if not is_available(db, space_id, start, end):
        logger.warning(
            f"Reserva rechazada por solapamiento - cochera {space_id} | {start} - {end}"
        )
        raise Conflict("La cochera ya está reservada en el período seleccionado")

    now = clock()
    reservation = Reservation(
        user_id=user_id,
        space_id=space_id,
        start_at=start,
        end_at=end,
        status=ReservationStatus.PENDIENTE,
        created_at=now,
        updated_at=now,
    )
    db.add(reservation)

    try:
        db.commit()
    except IntegrityError:
        # La restricción de exclusión de PostgreSQL detectó una reserva concurrente
        db.rollback()
        raise Conflict("La cochera ya está reservada en el período seleccionado")

    db.refresh(reservation)
    logger.info(
        f"Reserva {reservation.id} creada - usuario {user_id} | cochera {space_id}"
    )
    return reservation


def _check_status_change(
    reservation: Reservation, caller_id: int, target: ReservationStatus
) -> None:
    if not can_transition(reservation.status, target):
        raise InvalidState(
            f"No se puede pasar una reserva {reservation.status.value} a {target.value}"
        )
    if target != reservation.status and target in OWNER_MANAGED_STATUSES:
        require(
            owns_space(caller_id, reservation.space),
            "Solo el dueño de la cochera puede confirmar o completar la reserva",
        )


def _check_window_change(
    db: Session,
    reservation: Reservation,
    status: ReservationStatus,
    new_start: datetime,
    new_end: datetime,
) -> None:
    if status in (ReservationStatus.COMPLETADA, ReservationStatus.CANCELADA):
        raise InvalidState(
            "No se pueden modificar las fechas de una reserva completada o cancelada"
        )

    space_crud.get_space_for_update(db, reservation.space_id)
    if not is_available(
        db,
        reservation.space_id,
        new_start,
        new_end,
        exclude_reservation_id=reservation.id,
    ):
        raise Conflict("La cochera ya está reservada en el nuevo período seleccionado")


def update_reservation(
    db: Session,
    reservation_id: int,
    caller_id: int,
    new_status: Optional[Union[str, ReservationStatus]] = None,
    new_start: Optional[datetime] = None,
    new_end: Optional[datetime] = None,
    clock: Clock = utcnow,
) -> Reservation:
    """
    Cambia el estado y/o el horario de una reserva en una sola transacción.

    Todas las validaciones corren antes de escribir: si el horario nuevo no es
    válido para el estado resultante, el estado tampoco cambia.
    """
    reservation = get_reservation_or_404(db, reservation_id)
    require(is_reservation_party(caller_id, reservation))

    target = reservation.status if new_status is None else parse_status(new_status)
    _check_status_change(reservation, caller_id, target)

    change_window = new_start is not None and new_end is not None
    if change_window:
        _check_window_change(db, reservation, target, new_start, new_end)

    if target == reservation.status and not change_window:
        return reservation

    if target != reservation.status:
        logger.info(
            f"Reserva {reservation.id}: {reservation.status.value} -> {target.value}"
        )
        reservation.status = target
    if change_window:
        reservation.start_at = new_start
        reservation.end_at = new_end
    reservation.updated_at = clock()

    try:
        commit_or_not_found(db, Reservation, reservation_id, "Reserva no encontrada")
    except IntegrityError:
        db.rollback()
        raise Conflict("La cochera ya está reservada en el nuevo período seleccionado")

    db.refresh(reservation)
    if change_window:
        logger.info(f"Reserva {reservation.id} reprogramada: {new_start} - {new_end}")
    return reservation


def update_reservation_status(
    db: Session,
    reservation_id: int,
    caller_id: int,
    new_status: Union[str, ReservationStatus],
    clock: Clock = utcnow,
) -> Reservation:
    return update_reservation(
        db, reservation_id, caller_id, new_status=new_status, clock=clock
    )


def update_reservation_window(
    db: Session,
    reservation_id: int,
    caller_id: int,
    new_start: datetime,
    new_end: datetime,
    clock: Clock = utcnow,
) -> Reservation:
    return update_reservation(
        db,
        reservation_id,
        caller_id,
        new_start=new_start,
        new_end=new_end,
        clock=clock,
    )


def cancel_reservation(
    db: Session,
    reservation_id: int,
    caller_id: int,
    clock: Clock = utcnow,
) -> Reservation:
    reservation = get_reservation_or_404(db, reservation_id)
    require(
        is_reservation_holder(caller_id, reservation),
        "Solo quien hizo la reserva puede cancelarla",
    )

    now = clock()
    if reservation.start_at <= now:
        raise InvalidState("No se puede cancelar una reserva que ya ha comenzado")

    if reservation.status == ReservationStatus.CANCELADA:
        return reservation

    if not can_transition(reservation.status, ReservationStatus.CANCELADA):
        raise InvalidState(
            f"No se puede cancelar una reserva {reservation.status.value}"
        )

    reservation.status = ReservationStatus.CANCELADA
    reservation.updated_at = now
    commit_or_not_found(db, Reservation, reservation_id, "Reserva no encontrada")
    db.refresh(reservation)

    logger.info(f"Reserva {reservation.id} cancelada por el usuario {caller_id}")
    return reservation

"""
Chequeo de disponibilidad de una cochera.

Dos reservas se solapan si a.start <= b.end y b.start <= a.end (intervalo
cerrado: compartir un extremo también cuenta como solapamiento). Las reservas
canceladas no ocupan la cochera.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session

from cocheras.enums.reservation_status import ReservationStatus
from cocheras.exceptions import InvalidArgument
from cocheras.models.reservation import Reservation


def validate_window(start: datetime, end: datetime) -> None:
    if start >= end:
        raise InvalidArgument("La fecha de inicio debe ser anterior a la fecha de fin")


def overlaps(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> bool:
    return other_start <= end and other_end >= start


def overlapping_reservation_clause(start: datetime, end: datetime):
    """Condición SQL de reserva activa que se solapa con [start, end]"""
    return and_(
        Reservation.status != ReservationStatus.CANCELADA,
        Reservation.start_at <= end,
        Reservation.end_at >= start,
    )


def is_available(
    db: Session,
    space_id: int,
    start: datetime,
    end: datetime,
    exclude_reservation_id: Optional[int] = None,
) -> bool:
    validate_window(start, end)

    query = db.query(Reservation.id).filter(
        Reservation.space_id == space_id,
        overlapping_reservation_clause(start, end),
    )
    if exclude_reservation_id is not None:
        query = query.filter(Reservation.id != exclude_reservation_id)

    return query.first() is None

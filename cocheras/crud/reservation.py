from sqlalchemy.orm import Session
from typing import List, Optional

from cocheras.models.reservation import Reservation
from cocheras.models.space import Space
from cocheras.enums.reservation_status import ReservationStatus


def get_reservation(db: Session, reservation_id: int) -> Optional[Reservation]:
    return db.query(Reservation).filter(Reservation.id == reservation_id).first()


def get_user_reservations(
    db: Session,
    user_id: int,
    status: Optional[ReservationStatus] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Reservation]:
    query = db.query(Reservation).filter(Reservation.user_id == user_id)
    if status:
        query = query.filter(Reservation.status == status)
    return query.order_by(Reservation.start_at.desc()).offset(skip).limit(limit).all()


def get_owner_reservations(
    db: Session,
    owner_id: int,
    status: Optional[ReservationStatus] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Reservation]:
    """Reservas hechas sobre las cocheras de un dueño"""
    query = (
        db.query(Reservation)
        .join(Space, Reservation.space_id == Space.id)
        .filter(Space.owner_id == owner_id)
    )
    if status:
        query = query.filter(Reservation.status == status)
    return query.order_by(Reservation.start_at.desc()).offset(skip).limit(limit).all()


def has_completed_reservation(db: Session, user_id: int, space_id: int) -> bool:
    return (
        db.query(Reservation.id)
        .filter(
            Reservation.user_id == user_id,
            Reservation.space_id == space_id,
            Reservation.status == ReservationStatus.COMPLETADA,
        )
        .first()
        is not None
    )

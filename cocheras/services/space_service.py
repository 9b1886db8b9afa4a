"""
Gestión y búsqueda de cocheras.
"""

import logging
import math
from datetime import datetime
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from cocheras.crud import district as district_crud
from cocheras.crud import review as review_crud
from cocheras.crud import space as space_crud
from cocheras.enums.reservation_status import PAYABLE_STATUSES
from cocheras.exceptions import InvalidState, NotFound
from cocheras.models.reservation import Reservation
from cocheras.models.review import Review
from cocheras.models.space import Space
from cocheras.schemas.space import (
    SpaceCreate,
    SpaceSearchParams,
    SpaceSort,
    SpaceUpdate,
)
from cocheras.services.availability import (
    is_available,
    overlapping_reservation_clause,
    validate_window,
)
from cocheras.services.persistence import commit_or_not_found
from cocheras.utils.clock import Clock, utcnow
from cocheras.utils.permissions import owns_space, require

logger = logging.getLogger(__name__)


def get_space_or_404(db: Session, space_id: int) -> Space:
    space = space_crud.get_space(db, space_id)
    if space is None or space.deleted_at is not None:
        raise NotFound("Cochera no encontrada")
    return space


def _check_district(db: Session, district_id) -> None:
    if district_id is not None and district_crud.get_district(db, district_id) is None:
        raise NotFound("El distrito no existe")


def has_active_reservations(db: Session, space_id: int, now: datetime) -> bool:
    """Reservas pendientes o confirmadas que todavía no terminaron"""
    return (
        db.query(Reservation.id)
        .filter(
            Reservation.space_id == space_id,
            Reservation.status.in_(PAYABLE_STATUSES),
            Reservation.end_at >= now,
        )
        .first()
        is not None
    )


def create_space(
    db: Session, space: SpaceCreate, owner_id: int, clock: Clock = utcnow
) -> Space:
    _check_district(db, space.district_id)

    now = clock()
    db_space = Space(**space.model_dump(), owner_id=owner_id, created_at=now, updated_at=now)
    db.add(db_space)
    db.commit()
    db.refresh(db_space)

    logger.info(f"Cochera {db_space.id} creada por el usuario {owner_id}")
    return db_space


def update_space(
    db: Session,
    space_id: int,
    space: SpaceUpdate,
    caller_id: int,
    clock: Clock = utcnow,
) -> Space:
    db_space = get_space_or_404(db, space_id)
    require(owns_space(caller_id, db_space), "Solo el dueño puede modificar la cochera")

    update_data = space.model_dump(exclude_unset=True)
    if "district_id" in update_data:
        _check_district(db, update_data["district_id"])

    for field, value in update_data.items():
        setattr(db_space, field, value)
    db_space.updated_at = clock()

    commit_or_not_found(db, Space, space_id, "Cochera no encontrada")
    db.refresh(db_space)
    return db_space


def set_availability(
    db: Session,
    space_id: int,
    is_available_flag: bool,
    caller_id: int,
    clock: Clock = utcnow,
) -> Space:
    return update_space(
        db,
        space_id,
        SpaceUpdate(is_available=is_available_flag),
        caller_id,
        clock=clock,
    )


def delete_space(
    db: Session, space_id: int, caller_id: int, clock: Clock = utcnow
) -> None:
    db_space = get_space_or_404(db, space_id)
    require(owns_space(caller_id, db_space), "Solo el dueño puede eliminar la cochera")

    if has_active_reservations(db, space_id, clock()):
        raise InvalidState("La cochera tiene reservas activas")

    if db_space.reservations or db_space.reviews:
        # Con historial se da de baja en lugar de borrarla
        now = clock()
        db_space.is_available = False
        db_space.deleted_at = now
        db_space.updated_at = now
        logger.info(f"Cochera {space_id} dada de baja (tiene historial)")
    else:
        for assignment in db_space.owner_assignments:
            db.delete(assignment)
        db.delete(db_space)
        logger.info(f"Cochera {space_id} eliminada")

    db.commit()


def get_space_detail(db: Session, space_id: int) -> Tuple[Space, float, int]:
    space = get_space_or_404(db, space_id)
    average, count = review_crud.get_rating_summary(db, space_id)
    return space, average, count


def check_availability(
    db: Session, space_id: int, start: datetime, end: datetime
) -> bool:
    space = get_space_or_404(db, space_id)
    return space.is_available and is_available(db, space_id, start, end)


def search_spaces(db: Session, params: SpaceSearchParams) -> Tuple[List[Space], int, int]:
    """
    Búsqueda pública de cocheras disponibles.

    Returns:
        Tuple: (cocheras de la página, total de resultados, total de páginas)
    """
    query = (
        db.query(Space)
        .options(joinedload(Space.district))
        .filter(Space.is_available == True, Space.deleted_at.is_(None))
    )

    if params.district_id is not None:
        query = query.filter(Space.district_id == params.district_id)
    if params.max_price is not None:
        query = query.filter(Space.hourly_price <= params.max_price)
    if params.min_price is not None:
        query = query.filter(Space.hourly_price >= params.min_price)
    if params.capacity is not None:
        query = query.filter(Space.capacity >= params.capacity)
    if params.open_from is not None:
        query = query.filter(Space.opening_time <= params.open_from)
    if params.open_until is not None:
        query = query.filter(Space.closing_time >= params.open_until)

    if params.start is not None and params.end is not None:
        validate_window(params.start, params.end)
        busy = (
            db.query(Reservation.id)
            .filter(
                Reservation.space_id == Space.id,
                overlapping_reservation_clause(params.start, params.end),
            )
            .exists()
        )
        query = query.filter(~busy)

    if params.sort == SpaceSort.PRECIO_DESC:
        query = query.order_by(Space.hourly_price.desc(), Space.id)
    elif params.sort == SpaceSort.CALIFICACION:
        ratings = (
            db.query(Review.space_id, func.avg(Review.rating).label("avg_rating"))
            .group_by(Review.space_id)
            .subquery()
        )
        query = query.outerjoin(ratings, ratings.c.space_id == Space.id).order_by(
            func.coalesce(ratings.c.avg_rating, 0).desc(), Space.id
        )
    else:
        query = query.order_by(Space.hourly_price.asc(), Space.id)

    total = query.count()
    results = (
        query.offset((params.page - 1) * params.per_page).limit(params.per_page).all()
    )
    total_pages = math.ceil(total / params.per_page) if total else 0
    return results, total, total_pages

import logging
from typing import Optional

from sqlalchemy.orm import Session

from cocheras.crud import reservation as reservation_crud
from cocheras.crud import review as review_crud
from cocheras.enums.reservation_status import ReservationStatus
from cocheras.exceptions import Conflict, InvalidArgument, InvalidState, NotFound
from cocheras.models.review import Review
from cocheras.schemas.review import ReviewCreate, ReviewUpdate
from cocheras.services.persistence import commit_or_not_found
from cocheras.services.space_service import get_space_or_404
from cocheras.utils.clock import Clock, utcnow
from cocheras.utils.permissions import is_review_author, owns_space, require

logger = logging.getLogger(__name__)


def validate_rating(rating: Optional[int]) -> None:
    if rating is None or not 1 <= rating <= 5:
        raise InvalidArgument("La calificación debe estar entre 1 y 5")


def get_review_or_404(db: Session, review_id: int) -> Review:
    review = review_crud.get_review(db, review_id)
    if review is None:
        raise NotFound("Reseña no encontrada")
    return review


def create_review(
    db: Session, review: ReviewCreate, user_id: int, clock: Clock = utcnow
) -> Review:
    get_space_or_404(db, review.space_id)
    validate_rating(review.rating)

    if review.reservation_id is not None:
        reservation = reservation_crud.get_reservation(db, review.reservation_id)
        if (
            reservation is None
            or reservation.user_id != user_id
            or reservation.space_id != review.space_id
        ):
            raise InvalidArgument(
                "La reserva no existe o no pertenece al usuario o no corresponde a la cochera"
            )
        if reservation.status != ReservationStatus.COMPLETADA:
            raise InvalidState("Solo se pueden dejar reseñas para reservas completadas")
    elif not reservation_crud.has_completed_reservation(db, user_id, review.space_id):
        raise InvalidState("Solo se pueden dejar reseñas para cocheras que has usado")

    if review_crud.find_user_review(db, user_id, review.space_id, review.reservation_id):
        if review.reservation_id is not None:
            raise Conflict("Ya has dejado una reseña para esta reserva")
        raise Conflict("Ya has dejado una reseña para esta cochera")

    now = clock()
    db_review = Review(
        user_id=user_id,
        space_id=review.space_id,
        reservation_id=review.reservation_id,
        rating=review.rating,
        comment=review.comment,
        created_at=now,
        updated_at=now,
    )
    db.add(db_review)
    db.commit()
    db.refresh(db_review)

    logger.info(f"Reseña {db_review.id} creada para la cochera {review.space_id}")
    return db_review


def update_review(
    db: Session,
    review_id: int,
    review: ReviewUpdate,
    caller_id: int,
    clock: Clock = utcnow,
) -> Review:
    db_review = get_review_or_404(db, review_id)
    require(is_review_author(caller_id, db_review), "Solo el autor puede editar la reseña")

    update_data = review.model_dump(exclude_unset=True)
    if "rating" in update_data:
        validate_rating(update_data["rating"])

    for field, value in update_data.items():
        setattr(db_review, field, value)
    db_review.updated_at = clock()

    commit_or_not_found(db, Review, review_id, "Reseña no encontrada")
    db.refresh(db_review)
    return db_review


def delete_review(db: Session, review_id: int, caller_id: int) -> None:
    db_review = get_review_or_404(db, review_id)
    require(
        is_review_author(caller_id, db_review) or owns_space(caller_id, db_review.space),
        "Solo el autor de la reseña o el dueño de la cochera pueden eliminar esta reseña",
    )
    db.delete(db_review)
    db.commit()

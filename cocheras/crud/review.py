from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional, Tuple

from cocheras.models.review import Review


def get_review(db: Session, review_id: int) -> Optional[Review]:
    return db.query(Review).filter(Review.id == review_id).first()


def get_reviews(
    db: Session,
    space_id: Optional[int] = None,
    user_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Review]:
    query = db.query(Review)

    if space_id:
        query = query.filter(Review.space_id == space_id)
    if user_id:
        query = query.filter(Review.user_id == user_id)

    return query.order_by(Review.created_at.desc()).offset(skip).limit(limit).all()


def find_user_review(
    db: Session,
    user_id: int,
    space_id: int,
    reservation_id: Optional[int] = None,
) -> Optional[Review]:
    """Reseña previa del usuario para la reserva indicada o, sin reserva, para la cochera"""
    query = db.query(Review).filter(Review.user_id == user_id)
    if reservation_id is not None:
        query = query.filter(Review.reservation_id == reservation_id)
    else:
        query = query.filter(Review.space_id == space_id)
    return query.first()


def get_rating_summary(db: Session, space_id: int) -> Tuple[Optional[float], int]:
    average, count = (
        db.query(func.avg(Review.rating), func.count(Review.id))
        .filter(Review.space_id == space_id)
        .one()
    )
    return (float(average) if average is not None else None, count)

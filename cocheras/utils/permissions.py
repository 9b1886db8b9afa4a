"""
Predicados de autorización compartidos por todos los flujos.
"""

from cocheras.exceptions import Forbidden


def owns_space(user_id: int, space) -> bool:
    return space is not None and space.owner_id is not None and space.owner_id == user_id


def is_reservation_holder(user_id: int, reservation) -> bool:
    return reservation.user_id == user_id


def is_reservation_party(user_id: int, reservation) -> bool:
    """El que reservó o el dueño de la cochera reservada"""
    return is_reservation_holder(user_id, reservation) or owns_space(
        user_id, reservation.space
    )


def is_payer(user_id: int, payment) -> bool:
    return payment.user_id == user_id


def is_recipient(user_id: int, notification) -> bool:
    return notification.user_id == user_id


def is_review_author(user_id: int, review) -> bool:
    return review.user_id == user_id


def require(allowed: bool, detail: str = "No tienes permisos para esta acción"):
    if not allowed:
        raise Forbidden(detail)

"""
Notificaciones en base de datos de cada usuario.

La entrega push/email queda fuera de este servicio: aquí solo se escriben y
consultan las filas de la tabla notifications.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from cocheras.crud import notification as notification_crud
from cocheras.exceptions import NotFound
from cocheras.models.notification import Notification
from cocheras.schemas.notification import NotificationCreate
from cocheras.utils.clock import Clock, utcnow
from cocheras.utils.permissions import is_recipient, require

logger = logging.getLogger(__name__)


def notify(
    db: Session,
    user_id: int,
    title: str,
    message: str,
    notification_type: str,
    data: Optional[dict] = None,
    clock: Clock = utcnow,
) -> Notification:
    """
    Agrega una notificación para el usuario dentro de la transacción en curso.

    Args:
        db: Sesión de base de datos
        user_id: ID del usuario que recibirá la notificación
        title: Título de la notificación
        message: Mensaje de la notificación
        notification_type: Tipo de notificación (pago, reserva, sistema)
        data: Datos adicionales en formato JSON

    Returns:
        Notification: La notificación agregada (sin commit)
    """
    notification = notification_crud.add_notification(
        db,
        NotificationCreate(
            user_id=user_id,
            title=title,
            message=message,
            type=notification_type,
            data=data,
        ),
    )
    now = clock()
    notification.created_at = now
    notification.updated_at = now
    logger.info(f"Notification created for user {user_id}: {notification_type}")
    return notification


def list_notifications(db: Session, user_id: int) -> Tuple[List[Notification], int]:
    """Notificaciones del usuario, más recientes primero, y cantidad sin leer"""
    notifications = notification_crud.get_user_notifications(db, user_id)
    unread_count = notification_crud.get_unread_notifications_count(db, user_id)
    return notifications, unread_count


def _get_owned_notification(db: Session, notification_id: int, caller_id: int) -> Notification:
    notification = notification_crud.get_notification(db, notification_id)
    if notification is None:
        raise NotFound("Notificación no encontrada")
    require(
        is_recipient(caller_id, notification),
        "La notificación pertenece a otro usuario",
    )
    return notification


def mark_read(
    db: Session, notification_id: int, caller_id: int, clock: Clock = utcnow
) -> Notification:
    notification = _get_owned_notification(db, notification_id, caller_id)
    if not notification.is_read:
        notification.is_read = True
        notification.updated_at = clock()
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_read(db: Session, user_id: int, clock: Clock = utcnow) -> int:
    """Marca como leídas todas las notificaciones del usuario y devuelve cuántas cambiaron"""
    updated_count = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read == False)
        .update({"is_read": True, "updated_at": clock()}, synchronize_session="fetch")
    )
    db.commit()
    return updated_count


def delete_notification(db: Session, notification_id: int, caller_id: int) -> None:
    notification = _get_owned_notification(db, notification_id, caller_id)
    db.delete(notification)
    db.commit()

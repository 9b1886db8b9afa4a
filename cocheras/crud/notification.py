from sqlalchemy.orm import Session
from sqlalchemy import and_
from typing import List, Optional

from cocheras.models.notification import Notification
from cocheras.schemas.notification import NotificationCreate


def add_notification(db: Session, notification: NotificationCreate) -> Notification:
    """Agrega la notificación a la sesión sin confirmar la transacción"""
    db_notification = Notification(
        user_id=notification.user_id,
        title=notification.title,
        message=notification.message,
        type=notification.type,
        data=notification.data,
    )
    db.add(db_notification)
    return db_notification


def get_notification(db: Session, notification_id: int) -> Optional[Notification]:
    return db.query(Notification).filter(Notification.id == notification_id).first()


def get_user_notifications(
    db: Session, user_id: int, skip: int = 0, limit: int = 100
) -> List[Notification]:
    """Obtener todas las notificaciones de un usuario"""
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_unread_notifications_count(db: Session, user_id: int) -> int:
    """Obtener el conteo de notificaciones no leídas de un usuario"""
    return (
        db.query(Notification)
        .filter(and_(Notification.user_id == user_id, Notification.is_read == False))
        .count()
    )

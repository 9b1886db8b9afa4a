from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from cocheras.database import get_db
from cocheras.services import notification_service
from cocheras.services.auth import get_current_user
from cocheras.models.user import User
from cocheras.schemas.notification import (
    NotificationsListResponse,
    NotificationActionResponse,
)
from cocheras.utils.clock import Clock, get_clock

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=NotificationsListResponse)
def get_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Obtener todas las notificaciones del usuario actual.

    Retorna:
    - Lista de notificaciones ordenadas por fecha (más recientes primero)
    - Contador de notificaciones no leídas
    """
    notifications, unread_count = notification_service.list_notifications(
        db, current_user.id
    )
    return NotificationsListResponse(
        success=True, notifications=notifications, unread_count=unread_count
    )


@router.put("/read-all", response_model=NotificationActionResponse)
def mark_all_notifications_as_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    """
    Marcar todas las notificaciones del usuario como leídas.
    """
    updated_count = notification_service.mark_all_read(db, current_user.id, clock=clock)
    return NotificationActionResponse(
        success=True,
        message=f"Todas las notificaciones marcadas como leídas ({updated_count} actualizadas)",
    )


@router.put("/{notification_id}/read", response_model=NotificationActionResponse)
def mark_notification_as_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    """
    Marcar una notificación específica como leída.
    """
    notification_service.mark_read(db, notification_id, current_user.id, clock=clock)
    return NotificationActionResponse(
        success=True, message="Notificación marcada como leída"
    )


@router.delete("/{notification_id}", response_model=NotificationActionResponse)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Eliminar una notificación específica.
    """
    notification_service.delete_notification(db, notification_id, current_user.id)
    return NotificationActionResponse(success=True, message="Notificación eliminada")

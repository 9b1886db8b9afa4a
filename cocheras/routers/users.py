from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from cocheras.database import get_db
from cocheras.crud import user as crud
from cocheras.enums.user_status import UserStatus
from cocheras.schemas.user import UserResponse, UserUpdate, UserPublic
from cocheras.services.auth import get_current_user
from cocheras.models.user import User
from cocheras.utils.clock import Clock, get_clock

router = APIRouter()

logger = logging.getLogger(__name__)


@router.put("/me", response_model=UserResponse)
def update_me(
    user: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud.update_user(db, current_user, user)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_me(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    """Da de baja la cuenta: el usuario queda inactivo y no puede volver a loguearse"""
    current_user.status = UserStatus.INACTIVO
    current_user.updated_at = clock()
    db.commit()
    logger.info(f"Usuario {current_user.id} dado de baja")


@router.get("/{user_id}", response_model=UserPublic)
def read_user(user_id: int, db: Session = Depends(get_db)):
    db_user = crud.get_user(db, user_id)
    if db_user is None or not db_user.is_active:
        raise HTTPException(status_code=404, detail="Usuario no encontrado")
    return db_user

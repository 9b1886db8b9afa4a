from datetime import timedelta
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from cocheras.database import get_db
from cocheras.schemas.user import (
    UserCreate,
    UserResponse,
    UserChangePassword,
    UserLogin,
    Token,
    LoginResponse,
)
from cocheras.services.auth import (
    authenticate_user,
    create_access_token,
    get_password_hash,
    register_login,
    ACCESS_TOKEN_EXPIRE_MINUTES,
    get_current_user,
)
from cocheras.crud.user import get_user_by_email
from cocheras.models.user import User
from cocheras.utils.clock import Clock, get_clock
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


def _issue_token(user: User) -> str:
    access_token_expires = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    return create_access_token(
        data={"sub": user.email}, expires_delta=access_token_expires
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    user: UserCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    if get_user_by_email(db, user.email):
        raise HTTPException(status_code=400, detail="El email ya está registrado")

    now = clock()
    db_user = User(
        name=user.name,
        last_name=user.last_name,
        email=user.email,
        phone=user.phone,
        hashed_password=get_password_hash(user.password),
        created_at=now,
        updated_at=now,
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="El email ya está registrado")
    db.refresh(db_user)

    logger.info(f"Usuario {db_user.id} registrado")
    return db_user


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    user = authenticate_user(db, form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    register_login(db, user, clock())
    return {"access_token": _issue_token(user), "token_type": "bearer"}


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: UserLogin,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Login con JSON: devuelve el token y los datos básicos del usuario"""
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciales incorrectas",
            headers={"WWW-Authenticate": "Bearer"},
        )
    register_login(db, user, clock())
    return LoginResponse(
        access_token=_issue_token(user),
        user_id=user.id,
        name=user.name,
        last_name=user.last_name,
        email=user.email,
    )


@router.get("/me", response_model=UserResponse)
def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/change-password", response_model=dict)
def change_password(
    password_data: UserChangePassword,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Change user password. Requires authentication.
    The user must provide the current password for security verification.
    """
    user = authenticate_user(db, current_user.email, password_data.current_password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password is incorrect",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user.hashed_password = get_password_hash(password_data.new_password)
    db.commit()

    return {"message": "Password updated successfully"}

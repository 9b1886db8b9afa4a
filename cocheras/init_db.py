from sqlalchemy.orm import Session
from cocheras.models.district import District
from cocheras.models.user import User
from cocheras.enums.user_status import UserStatus
from cocheras.services.auth import get_password_hash
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_DISTRICTS = [
    {"name": "Palermo", "postal_code": "C1425", "city": "Buenos Aires"},
    {"name": "Belgrano", "postal_code": "C1426", "city": "Buenos Aires"},
    {"name": "Recoleta", "postal_code": "C1113", "city": "Buenos Aires"},
    {"name": "Caballito", "postal_code": "C1405", "city": "Buenos Aires"},
    {"name": "San Telmo", "postal_code": "C1065", "city": "Buenos Aires"},
]


def create_initial_districts(db: Session):
    """
    Carga los distritos por defecto si la tabla está vacía.
    """
    if db.query(District).count() > 0:
        logger.info("Ya existen distritos, no se cargan los iniciales.")
        return

    for district in DEFAULT_DISTRICTS:
        db.add(
            District(
                name=district["name"],
                postal_code=district["postal_code"],
                city=district["city"],
                province="Buenos Aires",
                country="Argentina",
            )
        )
        logger.info(f"Distrito creado: {district['name']}")

    db.commit()


def create_initial_admin(db: Session):
    """
    Crea el usuario admin definido en ADMIN_EMAIL / ADMIN_PASSWORD si no existe.
    """
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        logger.info("ADMIN_EMAIL/ADMIN_PASSWORD no configurados, no se crea admin.")
        return

    if db.query(User).filter(User.email == email).first():
        logger.info(f"El admin {email} ya existe.")
        return

    db_user = User(
        name="Admin",
        last_name="Cocheras",
        email=email,
        phone=None,
        hashed_password=get_password_hash(password),
        status=UserStatus.ACTIVO,
        is_admin=True,
    )
    db.add(db_user)
    db.commit()
    logger.info(f"Admin creado: {email}")

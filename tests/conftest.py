"""
Configuración compartida para tests pytest
"""
import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import datetime, time, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cocheras.database import Base

# Importar todos los modelos para que SQLAlchemy pueda resolver las relaciones
from cocheras.models.user import User
from cocheras.models.district import District
from cocheras.models.space import Space
from cocheras.models.reservation import Reservation
from cocheras.enums.reservation_status import ReservationStatus
import cocheras.models  # noqa: F401


# Base de datos en memoria para tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Hora fija de los tests: todas las reservas de ejemplo son posteriores
NOW = datetime(2030, 1, 1, 8, 0)


def at(hour: int, minute: int = 0, day: int = 1) -> datetime:
    """Fecha del 2030-01-<day> a la hora indicada"""
    return datetime(2030, 1, day, hour, minute)


@pytest.fixture
def db():
    """Crear base de datos de test y limpiarla después"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def override_get_db(db):
    """Override de get_db para tests"""
    def _get_db():
        try:
            yield db
        finally:
            pass
    return _get_db


@pytest.fixture
def clock():
    """Reloj fijo"""
    return lambda: NOW


def _make_user(db, user_id, name, email, is_admin=False):
    user = User(
        id=user_id,
        name=name,
        last_name="Test",
        email=email,
        hashed_password="hashed",
        is_admin=is_admin,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def owner(db):
    """Dueño de la cochera de prueba"""
    return _make_user(db, 1, "Dueño", "owner@example.com")


@pytest.fixture
def renter(db):
    """Usuario que reserva"""
    return _make_user(db, 2, "Inquilino", "renter@example.com")


@pytest.fixture
def other_user(db):
    """Usuario sin relación con la cochera ni las reservas"""
    return _make_user(db, 3, "Otro", "other@example.com")


@pytest.fixture
def admin(db):
    return _make_user(db, 4, "Admin", "admin@example.com", is_admin=True)


@pytest.fixture
def district(db):
    district = District(id=1, name="Palermo", postal_code="C1425", city="Buenos Aires")
    db.add(district)
    db.commit()
    db.refresh(district)
    return district


@pytest.fixture
def space(db, owner, district):
    """Cochera abierta todo el día a 10 por hora"""
    space = Space(
        id=1,
        owner_id=owner.id,
        district_id=district.id,
        address="Av. Santa Fe 1234",
        capacity=1,
        hourly_price=Decimal("10.00"),
        is_available=True,
        opening_time=time(0, 0),
        closing_time=time(23, 59),
    )
    db.add(space)
    db.commit()
    db.refresh(space)
    return space


@pytest.fixture
def make_reservation(db):
    """Inserta una reserva directamente, sin pasar por el flujo de alta"""
    def _make(user, space, start, end, status=ReservationStatus.PENDIENTE):
        reservation = Reservation(
            user_id=user.id,
            space_id=space.id,
            start_at=start,
            end_at=end,
            status=status,
            created_at=NOW - timedelta(days=1),
            updated_at=NOW - timedelta(days=1),
        )
        db.add(reservation)
        db.commit()
        db.refresh(reservation)
        return reservation
    return _make

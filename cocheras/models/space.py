from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    DateTime,
    Numeric,
    Time,
    ForeignKey,
)
from sqlalchemy.orm import relationship

from cocheras.database import Base
from cocheras.utils.clock import utcnow


class Space(Base):
    """Cochera publicada para alquilar por hora"""

    __tablename__ = "spaces"

    id = Column(Integer, primary_key=True, index=True)
    # None mientras la cochera no tenga dueño asignado
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    district_id = Column(Integer, ForeignKey("districts.id"), nullable=True)
    address = Column(String(255), nullable=False)
    capacity = Column(Integer, default=1, nullable=False)
    hourly_price = Column(Numeric(10, 2), nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)
    description = Column(Text, nullable=True)
    opening_time = Column(Time, nullable=True)
    closing_time = Column(Time, nullable=True)
    # Baja lógica de una cochera con historial; no vuelve a publicarse
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    owner = relationship("User", back_populates="spaces")
    district = relationship("District", back_populates="spaces")
    reservations = relationship("Reservation", back_populates="space")
    reviews = relationship("Review", back_populates="space")
    owner_assignments = relationship("SpaceOwner", back_populates="space")

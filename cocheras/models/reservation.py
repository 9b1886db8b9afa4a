from sqlalchemy import Column, Integer, DateTime, ForeignKey, Enum, Index
from sqlalchemy.orm import relationship

from cocheras.database import Base
from cocheras.enums.reservation_status import ReservationStatus
from cocheras.utils.clock import utcnow


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        Index("ix_reservations_space_window", "space_id", "start_at", "end_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    space_id = Column(Integer, ForeignKey("spaces.id"), nullable=False)
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)
    status = Column(
        Enum(
            ReservationStatus,
            name="reservation_status",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=ReservationStatus.PENDIENTE,
        nullable=False,
    )
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    user = relationship("User", back_populates="reservations")
    space = relationship("Space", back_populates="reservations")
    payments = relationship("Payment", back_populates="reservation")
    reviews = relationship("Review", back_populates="reservation")

from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey, Enum
from sqlalchemy.orm import relationship

from cocheras.database import Base
from cocheras.enums.payment_status import PaymentStatus
from cocheras.utils.clock import utcnow


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    reservation_id = Column(
        Integer, ForeignKey("reservations.id"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    method = Column(String(50), nullable=False)  # tarjeta, transferencia, efectivo
    reference = Column(String(255), unique=True, index=True, nullable=False)
    status = Column(
        Enum(
            PaymentStatus,
            name="payment_status",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=PaymentStatus.PENDIENTE,
        nullable=False,
    )
    paid_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    reservation = relationship("Reservation", back_populates="payments")
    user = relationship("User", back_populates="payments")

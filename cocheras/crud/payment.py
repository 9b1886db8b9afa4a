from sqlalchemy.orm import Session
from typing import List, Optional

from cocheras.models.payment import Payment


def get_payment(db: Session, payment_id: int) -> Optional[Payment]:
    return db.query(Payment).filter(Payment.id == payment_id).first()


def get_payment_by_reference_for_update(db: Session, reference: str) -> Optional[Payment]:
    """Obtiene el pago bloqueando la fila hasta el fin de la transacción"""
    return (
        db.query(Payment)
        .filter(Payment.reference == reference)
        .with_for_update(nowait=False)
        .populate_existing()
        .first()
    )


def get_user_payments(
    db: Session, user_id: int, skip: int = 0, limit: int = 100
) -> List[Payment]:
    return (
        db.query(Payment)
        .filter(Payment.user_id == user_id)
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )

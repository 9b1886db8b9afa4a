from sqlalchemy.orm import Session
from typing import List, Optional

from cocheras.models.space import Space


def get_space(db: Session, space_id: int) -> Optional[Space]:
    return db.query(Space).filter(Space.id == space_id).first()


def get_space_for_update(db: Session, space_id: int) -> Optional[Space]:
    """Obtiene la cochera bloqueando la fila hasta el fin de la transacción"""
    return (
        db.query(Space)
        .filter(Space.id == space_id)
        .with_for_update(nowait=False)
        .first()
    )


def get_spaces_by_owner(db: Session, owner_id: int) -> List[Space]:
    return (
        db.query(Space)
        .filter(Space.owner_id == owner_id, Space.deleted_at.is_(None))
        .order_by(Space.id)
        .all()
    )

from sqlalchemy.orm import Session
from typing import List, Optional

from cocheras.models.space_owner import SpaceOwner


def get_assignment(db: Session, assignment_id: int) -> Optional[SpaceOwner]:
    return db.query(SpaceOwner).filter(SpaceOwner.id == assignment_id).first()


def find_assignment(db: Session, user_id: int, space_id: int) -> Optional[SpaceOwner]:
    return (
        db.query(SpaceOwner)
        .filter(SpaceOwner.user_id == user_id, SpaceOwner.space_id == space_id)
        .first()
    )


def get_space_assignments(db: Session, space_id: int) -> List[SpaceOwner]:
    return db.query(SpaceOwner).filter(SpaceOwner.space_id == space_id).all()

from sqlalchemy.orm import Session
from typing import List, Optional

from cocheras.models.district import District
from cocheras.schemas.district import DistrictCreate, DistrictUpdate


def get_district(db: Session, district_id: int) -> Optional[District]:
    return db.query(District).filter(District.id == district_id).first()


def get_districts(db: Session, skip: int = 0, limit: int = 100) -> List[District]:
    return db.query(District).order_by(District.name).offset(skip).limit(limit).all()


def create_district(db: Session, district: DistrictCreate) -> District:
    db_district = District(**district.model_dump())
    db.add(db_district)
    db.commit()
    db.refresh(db_district)
    return db_district


def update_district(
    db: Session, district_id: int, district: DistrictUpdate
) -> Optional[District]:
    db_district = get_district(db, district_id)
    if not db_district:
        return None

    update_data = district.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_district, field, value)

    db.commit()
    db.refresh(db_district)
    return db_district


def delete_district(db: Session, db_district: District) -> None:
    db.delete(db_district)
    db.commit()

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from cocheras.database import get_db
from cocheras.exceptions import InvalidState
from cocheras.crud import district as crud
from cocheras.schemas.district import DistrictResponse, DistrictCreate, DistrictUpdate
from cocheras.services.auth import get_current_admin
from cocheras.models.user import User

router = APIRouter()


@router.get("/", response_model=List[DistrictResponse])
def read_districts(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return crud.get_districts(db, skip=skip, limit=limit)


@router.get("/{district_id}", response_model=DistrictResponse)
def read_district(district_id: int, db: Session = Depends(get_db)):
    db_district = crud.get_district(db, district_id)
    if db_district is None:
        raise HTTPException(status_code=404, detail="Distrito no encontrado")
    return db_district


@router.post("/", response_model=DistrictResponse, status_code=status.HTTP_201_CREATED)
def create_district(
    district: DistrictCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    return crud.create_district(db, district)


@router.put("/{district_id}", response_model=DistrictResponse)
def update_district(
    district_id: int,
    district: DistrictUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    db_district = crud.update_district(db, district_id, district)
    if db_district is None:
        raise HTTPException(status_code=404, detail="Distrito no encontrado")
    return db_district


@router.delete("/{district_id}")
def delete_district(
    district_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    db_district = crud.get_district(db, district_id)
    if db_district is None:
        raise HTTPException(status_code=404, detail="Distrito no encontrado")
    if db_district.spaces:
        raise InvalidState("El distrito tiene cocheras asociadas")
    crud.delete_district(db, db_district)
    return {"message": "Distrito eliminado"}

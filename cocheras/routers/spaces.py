from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime, time
from decimal import Decimal

from cocheras.database import get_db
from cocheras.crud import space as crud
from cocheras.schemas.space import (
    AvailabilityResponse,
    SpaceAvailabilityUpdate,
    SpaceCreate,
    SpaceDetailResponse,
    SpaceOwnerCreate,
    SpaceOwnerResponse,
    SpaceResponse,
    SpaceSearchParams,
    SpaceSort,
    SpaceUpdate,
)
from cocheras.services import space_owner_service, space_service
from cocheras.services.auth import get_current_user
from cocheras.models.user import User
from cocheras.utils.clock import Clock, get_clock, to_naive_utc

router = APIRouter()


@router.get("/search", response_model=List[SpaceResponse])
def search_spaces(
    response: Response,
    district_id: Optional[int] = None,
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    capacity: Optional[int] = Query(None, ge=1, le=100),
    open_from: Optional[time] = None,
    open_until: Optional[time] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    sort: SpaceSort = SpaceSort.PRECIO_ASC,
    page: int = Query(1, ge=1, le=100),
    per_page: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """
    Búsqueda pública de cocheras disponibles.

    Si se envían start y end solo se devuelven cocheras libres en ese período.
    El total de resultados y de páginas viaja en las cabeceras
    X-Total-Count y X-Total-Pages.
    """
    params = SpaceSearchParams(
        district_id=district_id,
        min_price=min_price,
        max_price=max_price,
        capacity=capacity,
        open_from=open_from,
        open_until=open_until,
        start=start,
        end=end,
        sort=sort,
        page=page,
        per_page=per_page,
    )
    spaces, total, total_pages = space_service.search_spaces(db, params)
    response.headers["X-Total-Count"] = str(total)
    response.headers["X-Total-Pages"] = str(total_pages)
    return spaces


@router.get("/mine", response_model=List[SpaceResponse])
def read_my_spaces(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud.get_spaces_by_owner(db, current_user.id)


@router.post("/", response_model=SpaceResponse, status_code=status.HTTP_201_CREATED)
def create_space(
    space: SpaceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    return space_service.create_space(db, space, current_user.id, clock=clock)


@router.get("/{space_id}", response_model=SpaceDetailResponse)
def read_space(space_id: int, db: Session = Depends(get_db)):
    space, average_rating, review_count = space_service.get_space_detail(db, space_id)
    detail = SpaceDetailResponse.model_validate(space)
    detail.average_rating = average_rating
    detail.review_count = review_count
    return detail


@router.get("/{space_id}/availability", response_model=AvailabilityResponse)
def read_space_availability(
    space_id: int,
    start: datetime,
    end: datetime,
    db: Session = Depends(get_db),
):
    start, end = to_naive_utc(start), to_naive_utc(end)
    available = space_service.check_availability(db, space_id, start, end)
    return AvailabilityResponse(
        space_id=space_id, start=start, end=end, available=available
    )


@router.patch("/{space_id}", response_model=SpaceResponse)
def update_space(
    space_id: int,
    space: SpaceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    return space_service.update_space(db, space_id, space, current_user.id, clock=clock)


@router.put("/{space_id}/availability", response_model=SpaceResponse)
def update_space_availability(
    space_id: int,
    availability: SpaceAvailabilityUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    return space_service.set_availability(
        db, space_id, availability.is_available, current_user.id, clock=clock
    )


@router.delete("/{space_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_space(
    space_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    space_service.delete_space(db, space_id, current_user.id, clock=clock)


@router.get("/{space_id}/owners", response_model=List[SpaceOwnerResponse])
def read_space_owners(space_id: int, db: Session = Depends(get_db)):
    return space_owner_service.list_space_owners(db, space_id)


@router.post(
    "/{space_id}/owners",
    response_model=SpaceOwnerResponse,
    status_code=status.HTTP_201_CREATED,
)
def assign_space_owner(
    space_id: int,
    owner: SpaceOwnerCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    return space_owner_service.assign_owner(
        db, space_id, owner.user_id, current_user, clock=clock
    )


@router.delete("/owners/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_space_owner(
    assignment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    space_owner_service.remove_assignment(db, assignment_id, current_user, clock=clock)

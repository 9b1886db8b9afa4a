from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from cocheras.database import get_db
from cocheras.crud import review as crud
from cocheras.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate
from cocheras.services import review_service
from cocheras.services.auth import get_current_user
from cocheras.models.user import User
from cocheras.utils.clock import Clock, get_clock

router = APIRouter()


@router.get("/", response_model=List[ReviewResponse])
def read_reviews(
    space_id: Optional[int] = None,
    user_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    return crud.get_reviews(
        db, space_id=space_id, user_id=user_id, skip=skip, limit=limit
    )


@router.post("/", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    review: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    return review_service.create_review(db, review, current_user.id, clock=clock)


@router.patch("/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: int,
    review: ReviewUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    return review_service.update_review(
        db, review_id, review, current_user.id, clock=clock
    )


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
    review_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    review_service.delete_review(db, review_id, current_user.id)

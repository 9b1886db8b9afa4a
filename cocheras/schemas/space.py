from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime, time
from decimal import Decimal
from enum import Enum

from cocheras.schemas.district import DistrictResponse
from cocheras.utils.clock import to_naive_utc


class SpaceSort(str, Enum):
    PRECIO_ASC = "precio_asc"
    PRECIO_DESC = "precio_desc"
    CALIFICACION = "calificacion"


class SpaceBase(BaseModel):
    address: str = Field(..., max_length=255)
    hourly_price: Decimal = Field(..., gt=0, le=Decimal("999999.99"))
    capacity: int = Field(1, ge=1, le=100)
    description: Optional[str] = None
    opening_time: Optional[time] = None  # Hora de apertura (ej: "08:00")
    closing_time: Optional[time] = None  # Hora de cierre (ej: "22:00")
    district_id: Optional[int] = None
    is_available: bool = True


class SpaceCreate(SpaceBase):
    pass


class SpaceUpdate(BaseModel):
    address: Optional[str] = Field(None, max_length=255)
    hourly_price: Optional[Decimal] = Field(None, gt=0, le=Decimal("999999.99"))
    capacity: Optional[int] = Field(None, ge=1, le=100)
    description: Optional[str] = None
    opening_time: Optional[time] = None
    closing_time: Optional[time] = None
    district_id: Optional[int] = None
    is_available: Optional[bool] = None


class SpaceAvailabilityUpdate(BaseModel):
    is_available: bool


class SpaceResponse(SpaceBase):
    id: int
    owner_id: Optional[int] = None
    district: Optional[DistrictResponse] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SpaceDetailResponse(SpaceResponse):
    average_rating: Optional[float] = None
    review_count: int = 0


class SpaceSearchParams(BaseModel):
    district_id: Optional[int] = None
    min_price: Optional[Decimal] = Field(None, ge=0)
    max_price: Optional[Decimal] = Field(None, ge=0)
    capacity: Optional[int] = Field(None, ge=1, le=100)
    open_from: Optional[time] = None
    open_until: Optional[time] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    sort: SpaceSort = SpaceSort.PRECIO_ASC
    page: int = Field(1, ge=1, le=100)
    per_page: int = Field(10, ge=1, le=100)

    @field_validator("start", "end")
    @classmethod
    def normalize_timezone(cls, value):
        return to_naive_utc(value)


class AvailabilityResponse(BaseModel):
    space_id: int
    start: datetime
    end: datetime
    available: bool


class SpaceOwnerCreate(BaseModel):
    user_id: int


class SpaceOwnerResponse(BaseModel):
    id: int
    user_id: int
    space_id: int
    assigned_at: datetime

    class Config:
        from_attributes = True

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class DistrictBase(BaseModel):
    name: str = Field(..., max_length=100)
    postal_code: Optional[str] = Field(None, max_length=10)
    city: Optional[str] = Field(None, max_length=100)
    province: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)


class DistrictCreate(DistrictBase):
    pass


class DistrictUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=10)
    city: Optional[str] = Field(None, max_length=100)
    province: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)


class DistrictResponse(DistrictBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True

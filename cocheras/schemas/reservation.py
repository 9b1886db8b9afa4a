from pydantic import BaseModel, field_validator, model_validator
from typing import Optional
from datetime import datetime

from cocheras.enums.reservation_status import ReservationStatus
from cocheras.utils.clock import to_naive_utc


class ReservationCreate(BaseModel):
    space_id: int
    start_at: datetime
    end_at: datetime

    @field_validator("start_at", "end_at")
    @classmethod
    def normalize_timezone(cls, value):
        return to_naive_utc(value)


class ReservationUpdate(BaseModel):
    # Se acepta texto libre para poder responder 400 con un mensaje propio
    status: Optional[str] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None

    @field_validator("start_at", "end_at")
    @classmethod
    def normalize_timezone(cls, value):
        return to_naive_utc(value)

    @model_validator(mode="after")
    def window_fields_together(self):
        if (self.start_at is None) != (self.end_at is None):
            raise ValueError("start_at y end_at deben enviarse juntos")
        return self


class ReservationResponse(BaseModel):
    id: int
    user_id: int
    space_id: int
    start_at: datetime
    end_at: datetime
    status: ReservationStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

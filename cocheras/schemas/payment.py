from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

from cocheras.enums.payment_status import PaymentMethod, PaymentStatus


class PaymentInitiate(BaseModel):
    reservation_id: int
    method: PaymentMethod


class PaymentConfirm(BaseModel):
    reference: str = Field(..., max_length=255)


class PaymentResponse(BaseModel):
    id: int
    reservation_id: int
    user_id: int
    amount: Decimal
    method: str
    reference: str
    status: PaymentStatus
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PaymentIntentResponse(BaseModel):
    payment_id: int
    amount: Decimal
    reference: str
    client_secret: str
    checkout_url: str


class PaymentConfirmResponse(BaseModel):
    payment_id: int
    status: PaymentStatus
    message: str

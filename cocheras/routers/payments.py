from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from cocheras.database import get_db
from cocheras.crud import payment as crud
from cocheras.schemas.payment import (
    PaymentConfirm,
    PaymentConfirmResponse,
    PaymentInitiate,
    PaymentIntentResponse,
    PaymentResponse,
)
from cocheras.services import payment_service
from cocheras.services.auth import get_current_user
from cocheras.models.user import User
from cocheras.utils.clock import Clock, get_clock

router = APIRouter()


@router.post("/", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def pay_reservation(
    payment: PaymentInitiate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    """Pago directo: registra el pago como completado y confirma la reserva"""
    return payment_service.pay_reservation(
        db, payment.reservation_id, current_user.id, payment.method, clock=clock
    )


@router.post("/initiate", response_model=PaymentIntentResponse)
def initiate_payment(
    payment: PaymentInitiate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    intent = payment_service.initiate_payment(
        db, payment.reservation_id, current_user.id, payment.method, clock=clock
    )
    return PaymentIntentResponse(
        payment_id=intent.payment.id,
        amount=intent.payment.amount,
        reference=intent.payment.reference,
        client_secret=intent.client_secret,
        checkout_url=intent.checkout_url,
    )


@router.post("/confirm", response_model=PaymentConfirmResponse)
def confirm_payment(
    confirmation: PaymentConfirm,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    payment = payment_service.confirm_payment(
        db, confirmation.reference, current_user.id, clock=clock
    )
    return PaymentConfirmResponse(
        payment_id=payment.id,
        status=payment.status,
        message="Pago confirmado correctamente",
    )


@router.get("/", response_model=List[PaymentResponse])
def read_my_payments(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud.get_user_payments(db, current_user.id, skip=skip, limit=limit)


@router.get("/{payment_id}", response_model=PaymentResponse)
def read_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return payment_service.get_payment_for_party(db, payment_id, current_user.id)

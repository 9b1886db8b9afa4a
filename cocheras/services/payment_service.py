"""
Flujo de pagos de reservas.

    pendiente --(confirm_payment)--> completado
    pendiente --(rechazo del proveedor)--> fallido
    completado --(reembolso)--> reembolsado

Confirmar un pago deja la reserva en "confirmada" y notifica al que pagó y al
dueño de la cochera en la misma transacción.
"""

import logging
import os
import uuid
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from dotenv import load_dotenv
from sqlalchemy.orm import Session

from cocheras.crud import payment as payment_crud
from cocheras.enums.payment_status import PaymentStatus
from cocheras.enums.payment_status import can_transition as payment_can_transition
from cocheras.enums.reservation_status import (
    PAYABLE_STATUSES,
    ReservationStatus,
)
from cocheras.exceptions import InvalidState, NotFound
from cocheras.models.payment import Payment
from cocheras.models.reservation import Reservation
from cocheras.services import notification_service
from cocheras.services.persistence import commit_or_not_found
from cocheras.services.reservation_service import get_reservation_or_404
from cocheras.utils.clock import Clock, utcnow
from cocheras.utils.permissions import (
    is_payer,
    is_reservation_holder,
    owns_space,
    require,
)

load_dotenv()

logger = logging.getLogger(__name__)

PAYMENT_CHECKOUT_BASE_URL = os.getenv(
    "PAYMENT_CHECKOUT_BASE_URL", "https://api.example.com/checkout"
)

CENTS = Decimal("0.01")


@dataclass
class PaymentIntent:
    payment: Payment
    client_secret: str
    checkout_url: str


def calculate_amount(reservation: Reservation) -> Decimal:
    """Horas reservadas por precio por hora de la cochera, redondeado a centavos"""
    seconds = Decimal(int((reservation.end_at - reservation.start_at).total_seconds()))
    hours = seconds / Decimal(3600)
    price = Decimal(reservation.space.hourly_price)
    return (hours * price).quantize(CENTS, rounding=ROUND_HALF_UP)


def get_payment_for_party(db: Session, payment_id: int, caller_id: int) -> Payment:
    payment = payment_crud.get_payment(db, payment_id)
    if payment is None:
        raise NotFound("Pago no encontrado")
    require(
        is_payer(caller_id, payment) or owns_space(caller_id, payment.reservation.space)
    )
    return payment


def initiate_payment(
    db: Session,
    reservation_id: int,
    caller_id: int,
    method: str,
    clock: Clock = utcnow,
    commit: bool = True,
) -> PaymentIntent:
    reservation = get_reservation_or_404(db, reservation_id)
    require(
        is_reservation_holder(caller_id, reservation),
        "Solo quien hizo la reserva puede pagarla",
    )

    if reservation.status not in PAYABLE_STATUSES:
        raise InvalidState("La reserva no está en un estado válido para el pago")

    amount = calculate_amount(reservation)
    reference = f"pi_{uuid.uuid4().hex}"
    now = clock()

    payment = Payment(
        reservation_id=reservation.id,
        user_id=caller_id,
        amount=amount,
        method=getattr(method, "value", method),
        reference=reference,
        status=PaymentStatus.PENDIENTE,
        created_at=now,
        updated_at=now,
    )
    db.add(payment)

    if commit:
        db.commit()
        db.refresh(payment)
    else:
        db.flush()

    logger.info(
        f"Pago {payment.id} iniciado - reserva {reservation.id} | monto {amount} | ref {reference}"
    )
    return PaymentIntent(
        payment=payment,
        client_secret=f"cs_{uuid.uuid4().hex}",
        checkout_url=f"{PAYMENT_CHECKOUT_BASE_URL.rstrip('/')}/{reference}",
    )


def _complete(db: Session, payment: Payment, clock: Clock) -> Payment:
    reservation = payment.reservation
    space = reservation.space

    if reservation.status not in PAYABLE_STATUSES:
        raise InvalidState("La reserva no está en un estado válido para el pago")

    now = clock()
    payment.status = PaymentStatus.COMPLETADO
    payment.paid_at = now
    payment.updated_at = now

    if reservation.status != ReservationStatus.CONFIRMADA:
        reservation.status = ReservationStatus.CONFIRMADA
        reservation.updated_at = now

    notification_service.notify(
        db,
        user_id=payment.user_id,
        title="Pago confirmado",
        message=(
            f"Tu pago de ${payment.amount} para la reserva #{reservation.id} "
            "ha sido confirmado."
        ),
        notification_type="pago",
        data={"payment_id": payment.id, "reservation_id": reservation.id},
        clock=clock,
    )
    if space.owner_id is not None:
        notification_service.notify(
            db,
            user_id=space.owner_id,
            title="Nueva reserva confirmada",
            message=f"Una reserva para tu cochera {space.address} ha sido confirmada.",
            notification_type="reserva",
            data={"reservation_id": reservation.id, "space_id": space.id},
            clock=clock,
        )

    commit_or_not_found(db, Payment, payment.id, "Pago no encontrado")
    db.refresh(payment)
    logger.info(f"Pago {payment.id} confirmado - reserva {reservation.id} confirmada")
    return payment


def confirm_payment(
    db: Session, reference: str, caller_id: int, clock: Clock = utcnow
) -> Payment:
    # Bloquea el pago: una confirmación concurrente espera y ve el estado final
    payment = payment_crud.get_payment_by_reference_for_update(db, reference)
    if payment is None:
        raise NotFound("Pago no encontrado")

    require(is_payer(caller_id, payment), "El pago pertenece a otro usuario")

    if payment.status == PaymentStatus.COMPLETADO:
        # Referencia ya confirmada: no se repiten efectos
        return payment

    if not payment_can_transition(payment.status, PaymentStatus.COMPLETADO):
        raise InvalidState(f"No se puede confirmar un pago {payment.status.value}")

    return _complete(db, payment, clock)


def pay_reservation(
    db: Session,
    reservation_id: int,
    caller_id: int,
    method: str,
    clock: Clock = utcnow,
) -> Payment:
    """Pago directo: inicia y confirma en una sola transacción"""
    intent = initiate_payment(
        db, reservation_id, caller_id, method, clock=clock, commit=False
    )
    try:
        return _complete(db, intent.payment, clock)
    except Exception:
        db.rollback()
        raise

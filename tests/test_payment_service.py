"""
Tests del flujo de pagos
"""
from decimal import Decimal

import pytest
from sqlalchemy import event
from sqlalchemy.dialects import postgresql

from conftest import NOW, at
from cocheras.enums.payment_status import PaymentMethod, PaymentStatus
from cocheras.enums.reservation_status import ReservationStatus
from cocheras.exceptions import Forbidden, InvalidState, NotFound
from cocheras.models.notification import Notification
from cocheras.models.payment import Payment
from cocheras.services import payment_service


def test_calculate_amount_uses_hours_and_price(db, space, renter, make_reservation):
    reservation = make_reservation(renter, space, at(10), at(12))

    assert payment_service.calculate_amount(reservation) == Decimal("20.00")


def test_calculate_amount_rounds_to_cents(db, space, renter, make_reservation):
    space.hourly_price = Decimal("12.35")
    db.commit()
    reservation = make_reservation(renter, space, at(10), at(11, 30))

    # 1.5 h x 12.35 = 18.525
    assert payment_service.calculate_amount(reservation) == Decimal("18.53")


def test_initiate_payment_creates_pending_payment(db, space, renter, make_reservation, clock):
    reservation = make_reservation(renter, space, at(10), at(12))

    intent = payment_service.initiate_payment(
        db, reservation.id, renter.id, PaymentMethod.TARJETA, clock=clock
    )

    payment = intent.payment
    assert payment.status == PaymentStatus.PENDIENTE
    assert payment.amount == Decimal("20.00")
    assert payment.method == "tarjeta"
    assert payment.reference.startswith("pi_")
    assert intent.client_secret.startswith("cs_")
    assert intent.checkout_url.endswith(payment.reference)
    assert payment.created_at == NOW


def test_initiate_payment_references_are_unique(db, space, renter, make_reservation, clock):
    reservation = make_reservation(renter, space, at(10), at(12))

    first = payment_service.initiate_payment(db, reservation.id, renter.id, "tarjeta", clock=clock)
    second = payment_service.initiate_payment(db, reservation.id, renter.id, "tarjeta", clock=clock)

    assert first.payment.reference != second.payment.reference


def test_initiate_payment_missing_reservation(db, renter, clock):
    with pytest.raises(NotFound):
        payment_service.initiate_payment(db, 999, renter.id, "tarjeta", clock=clock)


def test_initiate_payment_only_holder(db, space, owner, renter, make_reservation, clock):
    reservation = make_reservation(renter, space, at(10), at(12))

    with pytest.raises(Forbidden):
        payment_service.initiate_payment(db, reservation.id, owner.id, "tarjeta", clock=clock)


@pytest.mark.parametrize(
    "status", [ReservationStatus.CANCELADA, ReservationStatus.COMPLETADA]
)
def test_initiate_payment_not_payable(db, space, renter, make_reservation, clock, status):
    reservation = make_reservation(renter, space, at(10), at(12), status=status)

    with pytest.raises(InvalidState):
        payment_service.initiate_payment(db, reservation.id, renter.id, "tarjeta", clock=clock)


def test_confirm_payment_confirms_reservation_and_notifies(
    db, space, owner, renter, make_reservation, clock
):
    reservation = make_reservation(renter, space, at(10), at(12))
    intent = payment_service.initiate_payment(
        db, reservation.id, renter.id, "tarjeta", clock=clock
    )

    payment = payment_service.confirm_payment(
        db, intent.payment.reference, renter.id, clock=clock
    )

    assert payment.status == PaymentStatus.COMPLETADO
    assert payment.paid_at == NOW
    db.refresh(reservation)
    assert reservation.status == ReservationStatus.CONFIRMADA

    notifications = db.query(Notification).order_by(Notification.id).all()
    assert len(notifications) == 2
    assert {(n.user_id, n.type) for n in notifications} == {
        (renter.id, "pago"),
        (owner.id, "reserva"),
    }


def test_confirm_payment_twice_has_no_new_effects(
    db, space, renter, make_reservation, clock
):
    reservation = make_reservation(renter, space, at(10), at(12))
    intent = payment_service.initiate_payment(
        db, reservation.id, renter.id, "tarjeta", clock=clock
    )
    payment_service.confirm_payment(db, intent.payment.reference, renter.id, clock=clock)

    again = payment_service.confirm_payment(
        db, intent.payment.reference, renter.id, clock=lambda: at(9)
    )

    assert again.status == PaymentStatus.COMPLETADO
    assert again.paid_at == NOW
    assert db.query(Notification).count() == 2


def test_confirm_payment_unknown_reference(db, renter, clock):
    with pytest.raises(NotFound):
        payment_service.confirm_payment(db, "pi_nope", renter.id, clock=clock)


def test_confirm_payment_other_user(db, space, renter, other_user, make_reservation, clock):
    reservation = make_reservation(renter, space, at(10), at(12))
    intent = payment_service.initiate_payment(
        db, reservation.id, renter.id, "tarjeta", clock=clock
    )

    with pytest.raises(Forbidden):
        payment_service.confirm_payment(
            db, intent.payment.reference, other_user.id, clock=clock
        )


def test_confirm_failed_payment(db, space, renter, make_reservation, clock):
    reservation = make_reservation(renter, space, at(10), at(12))
    intent = payment_service.initiate_payment(
        db, reservation.id, renter.id, "tarjeta", clock=clock
    )
    intent.payment.status = PaymentStatus.FALLIDO
    db.commit()

    with pytest.raises(InvalidState):
        payment_service.confirm_payment(
            db, intent.payment.reference, renter.id, clock=clock
        )


def test_confirm_payment_of_cancelled_reservation(
    db, space, renter, make_reservation, clock
):
    reservation = make_reservation(renter, space, at(10), at(12))
    intent = payment_service.initiate_payment(
        db, reservation.id, renter.id, "tarjeta", clock=clock
    )
    reservation.status = ReservationStatus.CANCELADA
    db.commit()

    with pytest.raises(InvalidState):
        payment_service.confirm_payment(
            db, intent.payment.reference, renter.id, clock=clock
        )
    assert db.query(Notification).count() == 0


def test_pay_reservation_in_one_step(db, space, renter, make_reservation, clock):
    reservation = make_reservation(renter, space, at(10), at(12))

    payment = payment_service.pay_reservation(
        db, reservation.id, renter.id, PaymentMethod.EFECTIVO, clock=clock
    )

    assert payment.status == PaymentStatus.COMPLETADO
    assert payment.method == "efectivo"
    db.refresh(reservation)
    assert reservation.status == ReservationStatus.CONFIRMADA
    assert db.query(Payment).count() == 1
    assert db.query(Notification).count() == 2


def test_payment_visible_to_payer_and_owner(
    db, space, owner, renter, other_user, make_reservation, clock
):
    reservation = make_reservation(renter, space, at(10), at(12))
    payment = payment_service.pay_reservation(
        db, reservation.id, renter.id, "tarjeta", clock=clock
    )

    assert payment_service.get_payment_for_party(db, payment.id, renter.id).id == payment.id
    assert payment_service.get_payment_for_party(db, payment.id, owner.id).id == payment.id
    with pytest.raises(Forbidden):
        payment_service.get_payment_for_party(db, payment.id, other_user.id)
    with pytest.raises(NotFound):
        payment_service.get_payment_for_party(db, 999, renter.id)


def test_confirm_payment_locks_payment_row(db, space, renter, make_reservation, clock):
    reservation = make_reservation(renter, space, at(10), at(12))
    intent = payment_service.initiate_payment(
        db, reservation.id, renter.id, "tarjeta", clock=clock
    )
    statements = []

    def _capture(orm_execute_state):
        if orm_execute_state.is_select:
            statements.append(orm_execute_state.statement)

    event.listen(db, "do_orm_execute", _capture)
    try:
        payment_service.confirm_payment(
            db, intent.payment.reference, renter.id, clock=clock
        )
    finally:
        event.remove(db, "do_orm_execute", _capture)

    # SQLite ignora FOR UPDATE; se compila con el dialecto de producción
    compiled = [str(s.compile(dialect=postgresql.dialect())) for s in statements]
    assert any("FROM payments" in sql and "FOR UPDATE" in sql for sql in compiled)

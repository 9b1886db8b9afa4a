from enum import Enum


class PaymentStatus(str, Enum):
    """Estados de un pago"""

    PENDIENTE = "pendiente"
    COMPLETADO = "completado"
    FALLIDO = "fallido"
    REEMBOLSADO = "reembolsado"


PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDIENTE: frozenset(
        {PaymentStatus.COMPLETADO, PaymentStatus.FALLIDO}
    ),
    PaymentStatus.COMPLETADO: frozenset({PaymentStatus.REEMBOLSADO}),
    PaymentStatus.FALLIDO: frozenset(),
    PaymentStatus.REEMBOLSADO: frozenset(),
}


def can_transition(current: PaymentStatus, target: PaymentStatus) -> bool:
    return target in PAYMENT_TRANSITIONS[current]


class PaymentMethod(str, Enum):
    TARJETA = "tarjeta"
    TRANSFERENCIA = "transferencia"
    EFECTIVO = "efectivo"

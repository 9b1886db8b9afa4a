from enum import Enum


class ReservationStatus(str, Enum):
    """Estados de una reserva de cochera"""

    PENDIENTE = "pendiente"
    CONFIRMADA = "confirmada"
    CANCELADA = "cancelada"
    COMPLETADA = "completada"


# Destinos permitidos desde cada estado. Repetir el estado actual siempre es válido.
RESERVATION_TRANSITIONS = {
    ReservationStatus.PENDIENTE: frozenset(
        {
            ReservationStatus.PENDIENTE,
            ReservationStatus.CONFIRMADA,
            ReservationStatus.CANCELADA,
            ReservationStatus.COMPLETADA,
        }
    ),
    ReservationStatus.CONFIRMADA: frozenset(
        {
            ReservationStatus.CONFIRMADA,
            ReservationStatus.CANCELADA,
            ReservationStatus.COMPLETADA,
        }
    ),
    ReservationStatus.CANCELADA: frozenset({ReservationStatus.CANCELADA}),
    ReservationStatus.COMPLETADA: frozenset({ReservationStatus.COMPLETADA}),
}

# Estados sobre los que todavía se puede pagar
PAYABLE_STATUSES = (ReservationStatus.PENDIENTE, ReservationStatus.CONFIRMADA)

# Estados que solo el dueño de la cochera fija a mano; quien reserva confirma pagando
OWNER_MANAGED_STATUSES = (ReservationStatus.CONFIRMADA, ReservationStatus.COMPLETADA)


def can_transition(current: ReservationStatus, target: ReservationStatus) -> bool:
    return target in RESERVATION_TRANSITIONS[current]

"""
Errores de dominio de los flujos de reservas, pagos y notificaciones.

Cada error lleva el código HTTP con el que se devuelve al cliente; el handler
registrado en main.py los traduce a una respuesta JSON {"detail": ...}.
"""

from fastapi import status


class CocheraError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(CocheraError):
    status_code = status.HTTP_404_NOT_FOUND


class Forbidden(CocheraError):
    status_code = status.HTTP_403_FORBIDDEN


class Conflict(CocheraError):
    status_code = status.HTTP_409_CONFLICT


class InvalidArgument(CocheraError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidState(CocheraError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unavailable(CocheraError):
    status_code = status.HTTP_400_BAD_REQUEST

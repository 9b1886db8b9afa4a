from enum import Enum


class UserStatus(str, Enum):
    ACTIVO = "activo"
    INACTIVO = "inactivo"

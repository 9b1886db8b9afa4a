"""
Reloj inyectable. Los flujos reciben un callable sin argumentos que devuelve
la hora actual (UTC, sin tzinfo, igual que las columnas DateTime).
"""

from datetime import datetime, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_clock() -> Clock:
    """Dependencia FastAPI; los tests la sobreescriben con un reloj fijo."""
    return utcnow


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Pasa una fecha con zona horaria a UTC sin tzinfo; las naive ya se toman como UTC"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

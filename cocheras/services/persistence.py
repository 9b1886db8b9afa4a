import logging

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from cocheras.exceptions import NotFound

logger = logging.getLogger(__name__)


def commit_or_not_found(db: Session, model, row_id: int, detail: str) -> None:
    """
    Confirma la transacción. Si la fila desapareció mientras se actualizaba
    se responde NotFound; cualquier otro conflicto se relanza.
    """
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        if db.get(model, row_id) is None:
            logger.warning(f"{model.__name__} {row_id} eliminado durante la actualización")
            raise NotFound(detail)
        raise

"""
Asignaciones de dueños a cocheras.

Space.owner_id es la fuente que usan los chequeos de permisos; la tabla
space_owners registra además cada asignación. Si la cochera no tiene dueño,
el primer usuario asignado pasa a serlo.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from cocheras.crud import space_owner as space_owner_crud
from cocheras.crud import user as user_crud
from cocheras.exceptions import InvalidState, NotFound
from cocheras.models.space_owner import SpaceOwner
from cocheras.models.user import User
from cocheras.services.space_service import get_space_or_404, has_active_reservations
from cocheras.utils.clock import Clock, utcnow
from cocheras.utils.permissions import owns_space, require

logger = logging.getLogger(__name__)


def _can_manage(caller: User, space) -> bool:
    if caller.is_admin:
        return True
    return owns_space(caller.id, space)


def list_space_owners(db: Session, space_id: int) -> List[SpaceOwner]:
    get_space_or_404(db, space_id)
    return space_owner_crud.get_space_assignments(db, space_id)


def assign_owner(
    db: Session,
    space_id: int,
    user_id: int,
    caller: User,
    clock: Clock = utcnow,
) -> SpaceOwner:
    space = get_space_or_404(db, space_id)
    # Una cochera sin dueño puede ser reclamada por cualquier usuario autenticado
    if space.owner_id is not None:
        require(_can_manage(caller, space), "Solo el dueño puede asignar dueños")

    user = user_crud.get_user(db, user_id)
    if user is None:
        raise NotFound(f"Usuario con ID {user_id} no encontrado")
    if not user.is_active:
        raise InvalidState("El usuario no está activo")

    existing = space_owner_crud.find_assignment(db, user_id, space_id)
    if existing is not None:
        return existing

    now = clock()
    assignment = SpaceOwner(user_id=user_id, space_id=space_id, assigned_at=now)
    db.add(assignment)

    if space.owner_id is None:
        space.owner_id = user_id
        space.updated_at = now
        logger.info(f"Cochera {space_id} sin dueño: asignada al usuario {user_id}")

    db.commit()
    db.refresh(assignment)
    return assignment


def remove_assignment(
    db: Session, assignment_id: int, caller: User, clock: Clock = utcnow
) -> None:
    assignment = space_owner_crud.get_assignment(db, assignment_id)
    if assignment is None:
        raise NotFound("Asignación no encontrada")

    require(_can_manage(caller, assignment.space), "Solo el dueño puede quitar dueños")

    if has_active_reservations(db, assignment.space_id, clock()):
        raise InvalidState("La cochera tiene reservas activas")

    db.delete(assignment)
    db.commit()

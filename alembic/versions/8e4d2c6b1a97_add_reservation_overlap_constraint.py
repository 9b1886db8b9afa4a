"""add_reservation_overlap_constraint

Revision ID: 8e4d2c6b1a97
Revises: 3b7c1e9a2f40
Create Date: 2026-10-03 18:42:07.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8e4d2c6b1a97'
down_revision: Union[str, None] = '3b7c1e9a2f40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Upgrade schema.

    NOTA: Además del SELECT FOR UPDATE sobre la cochera en
    cocheras/services/reservation_service.py, la base rechaza dos reservas
    no canceladas de la misma cochera cuyos períodos se toquen. Los períodos
    son cerrados en ambos extremos ('[]'): una reserva que termina a las 12:00
    choca con otra que empieza a las 12:00.
    """
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    op.execute(
        """
        ALTER TABLE reservations
        ADD CONSTRAINT ex_reservations_space_window
        EXCLUDE USING gist (
            space_id WITH =,
            tsrange(start_at, end_at, '[]') WITH &&
        )
        WHERE (status <> 'cancelada')
        """
    )
    op.create_check_constraint(
        "ck_reservations_window_order", "reservations", sa.text("start_at < end_at")
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_constraint("ck_reservations_window_order", "reservations", type_="check")
    op.execute(
        "ALTER TABLE reservations DROP CONSTRAINT IF EXISTS ex_reservations_space_window"
    )

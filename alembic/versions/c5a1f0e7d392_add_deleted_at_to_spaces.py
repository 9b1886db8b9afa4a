"""add_deleted_at_to_spaces

Revision ID: c5a1f0e7d392
Revises: 8e4d2c6b1a97
Create Date: 2026-10-19 10:12:31.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'c5a1f0e7d392'
down_revision: Union[str, None] = '8e4d2c6b1a97'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Baja lógica de cocheras con historial de reservas o reseñas
    op.add_column(
        "spaces",
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_column("spaces", "deleted_at")

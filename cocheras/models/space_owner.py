from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from cocheras.database import Base
from cocheras.utils.clock import utcnow


class SpaceOwner(Base):
    """Asignación de un usuario como dueño de una cochera"""

    __tablename__ = "space_owners"
    __table_args__ = (
        UniqueConstraint("user_id", "space_id", name="uq_space_owner_user_space"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    space_id = Column(Integer, ForeignKey("spaces.id"), nullable=False, index=True)
    assigned_at = Column(DateTime, default=utcnow)

    user = relationship("User")
    space = relationship("Space", back_populates="owner_assignments")

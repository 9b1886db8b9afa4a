from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from cocheras.database import Base
from cocheras.utils.clock import utcnow


class District(Base):
    __tablename__ = "districts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    postal_code = Column(String(10), nullable=True)
    city = Column(String(100), nullable=True)
    province = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    spaces = relationship("Space", back_populates="district")

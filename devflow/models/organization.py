from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import relationship
from devflow.database.base import Base
from .common import utcnow

class Organization(Base):
    __tablename__ = "organizations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    teams = relationship("Team", back_populates="organization", cascade="all, delete", passive_deletes=True)

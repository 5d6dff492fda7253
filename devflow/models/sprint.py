from datetime import date
from typing import Optional

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from devflow.database.base import Base
from devflow.enums import SprintStatus
from .common import utcnow


def compute_sprint_status(start_date: date, end_date: date, today: Optional[date] = None) -> SprintStatus:
    """
    Derives the sprint status from its bounds.
    Both bounds are inclusive: a sprint is active on its first and last day.
    """
    today = today or date.today()
    if today < start_date:
        return SprintStatus.PLANNED
    if today <= end_date:
        return SprintStatus.ACTIVE
    return SprintStatus.COMPLETED


class Sprint(Base):
    __tablename__ = "sprints"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    goal = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    project = relationship("Project", back_populates="sprints")
    tasks = relationship("Task", back_populates="sprint", cascade="all, delete", passive_deletes=True)

    @property
    def status(self) -> str:
        # Never stored, so it cannot drift from the dates
        return compute_sprint_status(self.start_date, self.end_date).value

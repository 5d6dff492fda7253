from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from devflow.database.base import Base
from devflow.enums import TaskStatus, Priority
from .common import utcnow

class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    sprint_id = Column(Integer, ForeignKey("sprints.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=TaskStatus.TODO.value, index=True)
    priority = Column(String(20), nullable=False, default=Priority.MEDIUM.value, index=True)
    story_points = Column(Float, nullable=True)

    assignee_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    github_pr_url = Column(String(500), nullable=True)
    github_pr_status = Column(String(20), nullable=True)

    # Bumped on every write; status changes compare-and-swap on it
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    sprint = relationship("Sprint", back_populates="tasks")
    assignee = relationship("User", foreign_keys=[assignee_id])
    creator = relationship("User", foreign_keys=[creator_id])
    history = relationship(
        "TaskStatusHistory",
        back_populates="task",
        order_by="TaskStatusHistory.id",
        cascade="all, delete",
        passive_deletes=True,
    )
    comments = relationship("Comment", back_populates="task", cascade="all, delete", passive_deletes=True)

class TaskStatusHistory(Base):
    """
    Append-only audit row for a task status change.
    from_status is null only for the row written when the task is created.
    """
    __tablename__ = "task_status_history"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    from_status = Column(String(20), nullable=True)
    to_status = Column(String(20), nullable=False)
    changed_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    changed_at = Column(DateTime(timezone=True), default=utcnow, index=True)

    task = relationship("Task", back_populates="history")
    user = relationship("User")

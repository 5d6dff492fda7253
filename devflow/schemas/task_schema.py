from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

from devflow.enums import TaskStatus, Priority, PullRequestStatus, TaskSortField
from devflow.constants import DEFAULT_PAGE_SIZE
from devflow.schemas.common_schema import reject_null

class TaskCreate(BaseModel):
    sprint_id: int
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    story_points: Optional[float] = Field(None, ge=0)
    assignee_id: Optional[int] = None
    # Ignored: new tasks always start in todo
    status: Optional[str] = None

class TaskUpdate(BaseModel):
    """
    Partial field patch.
    status is a raw overwrite here; the workflow graph is only enforced by
    the dedicated status endpoint.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    story_points: Optional[float] = Field(None, ge=0)
    assignee_id: Optional[int] = None
    github_pr_url: Optional[str] = None
    github_pr_status: Optional[PullRequestStatus] = None

    @field_validator("title", "status", "priority")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)

class TaskStatusChange(BaseModel):
    status: TaskStatus

class TaskAssign(BaseModel):
    assignee_id: int

class TaskFilters(BaseModel):
    sprint_id: Optional[int] = None
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    assignee_id: Optional[int] = None
    search: Optional[str] = None
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort_by: TaskSortField = TaskSortField.CREATED_AT

class TaskResponse(BaseModel):
    id: int
    sprint_id: int
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    story_points: Optional[float] = None
    assignee_id: Optional[int] = None
    creator_id: int
    github_pr_url: Optional[str] = None
    github_pr_status: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class TaskStatusHistoryResponse(BaseModel):
    id: int
    task_id: int
    from_status: Optional[str] = None
    to_status: str
    changed_by: Optional[int] = None
    changed_at: datetime

    class Config:
        from_attributes = True

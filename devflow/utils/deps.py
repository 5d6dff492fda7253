from fastapi import Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from devflow.database.session import get_db
from devflow.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from devflow.enums import TaskStatus, Priority, TaskSortField
from devflow.schemas.task_schema import TaskFilters
from devflow.utils.task_service import TaskService
from devflow.utils.notification_service import NotificationService
from devflow.utils.team_service import TeamService
from devflow.utils.comment_service import CommentService

class PaginationParams:
    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    ):
        self.page = page
        self.limit = limit

def get_task_filters(
    sprint_id: Optional[int] = Query(None),
    status: Optional[TaskStatus] = Query(None),
    priority: Optional[Priority] = Query(None),
    assignee_id: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    sort_by: TaskSortField = Query(TaskSortField.CREATED_AT, alias="sortBy"),
) -> TaskFilters:
    return TaskFilters(
        sprint_id=sprint_id,
        status=status,
        priority=priority,
        assignee_id=assignee_id,
        search=search,
        page=page,
        limit=limit,
        sort_by=sort_by,
    )

# Service providers, one per request session

def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    return TaskService(db)

def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)

def get_team_service(db: Session = Depends(get_db)) -> TeamService:
    return TeamService(db)

def get_comment_service(db: Session = Depends(get_db)) -> CommentService:
    return CommentService(db)

from typing import List, Optional, Any, Dict, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import or_, case

from devflow.models import Task, TaskStatusHistory
from devflow.models.common import utcnow
from devflow.enums import Priority, TaskStatus, TaskSortField
from devflow.utils.common import paginate

PRIORITY_RANK = {
    Priority.LOW.value: 1,
    Priority.MEDIUM.value: 2,
    Priority.HIGH.value: 3,
    Priority.CRITICAL.value: 4,
}

STATUS_RANK = {
    TaskStatus.TODO.value: 1,
    TaskStatus.IN_PROGRESS.value: 2,
    TaskStatus.IN_REVIEW.value: 3,
    TaskStatus.DONE.value: 4,
}

def _sort_column(sort_by: TaskSortField):
    if sort_by == TaskSortField.PRIORITY:
        return case(PRIORITY_RANK, value=Task.priority, else_=0)
    if sort_by == TaskSortField.STATUS:
        return case(STATUS_RANK, value=Task.status, else_=0)
    return getattr(Task, sort_by.value)

def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"

def create_task_record(db: Session, task_data: Dict[str, Any]) -> Task:
    new_task = Task(**task_data)
    db.add(new_task)
    db.flush()
    db.refresh(new_task)
    return new_task

def get_task_by_id_db(db: Session, task_id: int, for_update: bool = False) -> Optional[Task]:
    query = db.query(Task).filter(Task.id == task_id)
    if for_update:
        # Row lock on backends that support it, ignored by SQLite
        query = query.with_for_update()
    return query.first()

def update_task_record(db: Session, task: Task) -> Task:
    task.version = (task.version or 0) + 1
    db.add(task)
    db.flush()
    db.refresh(task)
    return task

def delete_task_record(db: Session, task: Task):
    db.delete(task)
    db.flush()

def compare_and_swap_status(db: Session, task_id: int, expected_version: int, new_status: str) -> bool:
    """
    Writes the new status only if nobody else wrote the task since it was read.
    """
    updated = db.query(Task).filter(
        Task.id == task_id,
        Task.version == expected_version,
    ).update(
        {
            Task.status: new_status,
            Task.version: Task.version + 1,
            Task.updated_at: utcnow(),
        },
        synchronize_session=False,
    )
    return updated == 1

def record_status_change(
    db: Session,
    task_id: int,
    from_status: Optional[str],
    to_status: str,
    changed_by: Optional[int],
) -> TaskStatusHistory:
    entry = TaskStatusHistory(
        task_id=task_id,
        from_status=from_status,
        to_status=to_status,
        changed_by=changed_by,
    )
    db.add(entry)
    db.flush()
    return entry

def get_status_history_db(db: Session, task_id: int) -> List[TaskStatusHistory]:
    return db.query(TaskStatusHistory)\
        .filter(TaskStatusHistory.task_id == task_id)\
        .order_by(TaskStatusHistory.changed_at.asc(), TaskStatusHistory.id.asc())\
        .all()

def search_tasks_db(
    db: Session,
    sprint_id: Optional[int] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    assignee_id: Optional[int] = None,
    search: Optional[str] = None,
    sort_by: TaskSortField = TaskSortField.CREATED_AT,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[Task], int]:
    query = db.query(Task)

    if sprint_id is not None:
        query = query.filter(Task.sprint_id == sprint_id)
    if status:
        query = query.filter(Task.status == status)
    if priority:
        query = query.filter(Task.priority == priority)
    if assignee_id is not None:
        query = query.filter(Task.assignee_id == assignee_id)
    if search:
        pattern = _like_pattern(search)
        query = query.filter(
            or_(
                Task.title.ilike(pattern, escape="\\"),
                Task.description.ilike(pattern, escape="\\"),
            )
        )

    query = query.order_by(_sort_column(sort_by).desc(), Task.id.desc())
    return paginate(query, page, limit)

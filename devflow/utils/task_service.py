from typing import List, Optional, Any, Dict, Tuple
from sqlalchemy.orm import Session

from devflow.models import User, Task, Sprint, TaskStatusHistory
from devflow.enums import TaskStatus
from devflow.constants import ErrorMessages, STATUS_CHANGE_MAX_ATTEMPTS
from devflow.exceptions import raise_sprint_not_found, raise_user_not_found, raise_conflict
from devflow.schemas.task_schema import TaskCreate, TaskFilters
from devflow.utils.common import exists, clamp_pagination
from devflow.utils.task_validation import coerce_status, validate_status_transition
from devflow.utils.task_repo import (
    create_task_record,
    get_task_by_id_db,
    update_task_record,
    delete_task_record,
    compare_and_swap_status,
    record_status_change,
    get_status_history_db,
    search_tasks_db,
)
from devflow.utils.logger import get_logger

logger = get_logger(__name__)

# Fields a partial update may touch. status is a raw overwrite on this path.
UPDATABLE_FIELDS = (
    "title",
    "description",
    "status",
    "priority",
    "story_points",
    "assignee_id",
    "github_pr_url",
    "github_pr_status",
)


def _enum_value(value):
    return getattr(value, "value", value)


class TaskService:
    """
    Task lifecycle: CRUD, filtering, the status workflow and its audit trail.

    Notifications are not sent from here. Callers compose them with the
    returned task so a delivery failure can never undo the task write.
    """

    def __init__(self, db: Session):
        self.db = db

    def _ensure_user(self, user_id: Optional[int]):
        if user_id is not None and not exists(self.db, User, user_id):
            raise_user_not_found()

    def create_task(self, task_in: TaskCreate, creator: User) -> Task:
        if not exists(self.db, Sprint, task_in.sprint_id):
            raise_sprint_not_found()
        self._ensure_user(task_in.assignee_id)

        task = create_task_record(self.db, {
            "sprint_id": task_in.sprint_id,
            "title": task_in.title,
            "description": task_in.description,
            "priority": _enum_value(task_in.priority),
            "story_points": task_in.story_points,
            "assignee_id": task_in.assignee_id,
            "creator_id": creator.id,
            # Whatever the client sent, every task starts in todo
            "status": TaskStatus.TODO.value,
        })
        record_status_change(self.db, task.id, None, TaskStatus.TODO.value, creator.id)

        logger.info(f"Task {task.id} created in sprint {task.sprint_id} by user {creator.id}")
        return task

    def list_tasks(self, filters: TaskFilters) -> Tuple[List[Task], int]:
        page, limit = clamp_pagination(filters.page, filters.limit)
        return search_tasks_db(
            self.db,
            sprint_id=filters.sprint_id,
            status=_enum_value(filters.status),
            priority=_enum_value(filters.priority),
            assignee_id=filters.assignee_id,
            search=filters.search,
            sort_by=filters.sort_by,
            page=page,
            limit=limit,
        )

    def get_task(self, task_id: int) -> Optional[Task]:
        return get_task_by_id_db(self.db, task_id)

    def update_task(self, task_id: int, updates: Dict[str, Any], actor: User) -> Optional[Task]:
        task = get_task_by_id_db(self.db, task_id, for_update=True)
        if not task:
            return None

        updates = {k: _enum_value(v) for k, v in updates.items() if k in UPDATABLE_FIELDS}

        if updates.get("assignee_id") is not None:
            self._ensure_user(updates["assignee_id"])

        if "status" in updates:
            if updates["status"] is None:
                del updates["status"]
            else:
                new_status = coerce_status(updates["status"]).value
                updates["status"] = new_status
                if new_status != task.status:
                    # Audit row goes in first so it reflects the status being replaced
                    record_status_change(self.db, task.id, task.status, new_status, actor.id)

        for field, value in updates.items():
            setattr(task, field, value)

        return update_task_record(self.db, task)

    def change_status(self, task_id: int, new_status, actor: User) -> Optional[Task]:
        """
        Moves a task along the workflow graph.

        The read-check-write runs under a row lock where the backend has one,
        and the write itself is a compare-and-swap on the task version. A lost
        race re-reads and re-validates against the fresh status.

        Returns:
            Task: The updated task, or None if it does not exist

        Raises:
            InvalidTransitionError: If the move is not in the workflow graph
            ConflictError: If the task kept changing underneath us
        """
        for attempt in range(1, STATUS_CHANGE_MAX_ATTEMPTS + 1):
            task = get_task_by_id_db(self.db, task_id, for_update=True)
            if not task:
                return None

            current_status = task.status
            target = validate_status_transition(current_status, new_status)

            if compare_and_swap_status(self.db, task.id, task.version, target.value):
                record_status_change(self.db, task.id, current_status, target.value, actor.id)
                self.db.refresh(task)
                logger.info(f"Task {task.id} moved {current_status} -> {target.value} by user {actor.id}")
                return task

            logger.warning(f"Concurrent update on task {task_id}, attempt {attempt} lost the race")
            self.db.expire(task)

        raise_conflict(ErrorMessages.CONCURRENT_STATUS_CHANGE)

    def assign_task(self, task_id: int, assignee_id: int) -> Optional[Task]:
        task = get_task_by_id_db(self.db, task_id, for_update=True)
        if not task:
            return None
        self._ensure_user(assignee_id)

        task.assignee_id = assignee_id
        return update_task_record(self.db, task)

    def delete_task(self, task_id: int) -> bool:
        task = get_task_by_id_db(self.db, task_id)
        if not task:
            return False
        delete_task_record(self.db, task)
        logger.info(f"Task {task_id} deleted")
        return True

    def get_status_history(self, task_id: int) -> Optional[List[TaskStatusHistory]]:
        if not exists(self.db, Task, task_id):
            return None
        return get_status_history_db(self.db, task_id)

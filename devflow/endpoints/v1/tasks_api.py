from fastapi import APIRouter, Depends

from devflow.models import User
from devflow.schemas import (
    TaskCreate,
    TaskUpdate,
    TaskStatusChange,
    TaskAssign,
    TaskFilters,
    TaskResponse,
    TaskStatusHistoryResponse,
)
from devflow.auth.dependencies import get_current_user
from devflow.constants import SuccessMessages
from devflow.exceptions import raise_task_not_found
from devflow.utils.deps import get_task_filters, get_task_service, get_notification_service
from devflow.utils.task_service import TaskService
from devflow.utils.notification_service import NotificationService
from devflow.utils.responses import success_response, paginated_response

router = APIRouter(prefix="/tasks", tags=["Tasks"])

@router.post("", status_code=201)
def create_task(
    task_in: TaskCreate,
    service: TaskService = Depends(get_task_service),
    notifications: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user)
):
    """
    Creates a task in a sprint. New tasks always start in todo.
    The assignee, if any, is notified.
    """
    task = service.create_task(task_in, current_user)
    if task.assignee_id:
        notifications.deliver_best_effort(notifications.notify_task_assigned, task, task.assignee_id)
    return success_response(TaskResponse.model_validate(task), SuccessMessages.TASK_CREATED)

@router.get("")
def list_tasks(
    filters: TaskFilters = Depends(get_task_filters),
    service: TaskService = Depends(get_task_service),
    current_user: User = Depends(get_current_user)
):
    """
    Lists tasks matching every given filter.
    search matches title or description, case-insensitively.
    """
    tasks, total = service.list_tasks(filters)
    return paginated_response(
        [TaskResponse.model_validate(t) for t in tasks],
        filters.page,
        filters.limit,
        total,
    )

@router.get("/{task_id}")
def get_task(
    task_id: int,
    service: TaskService = Depends(get_task_service),
    current_user: User = Depends(get_current_user)
):
    task = service.get_task(task_id)
    if not task:
        raise_task_not_found()
    return success_response(TaskResponse.model_validate(task))

@router.patch("/{task_id}")
def update_task(
    task_id: int,
    task_in: TaskUpdate,
    service: TaskService = Depends(get_task_service),
    current_user: User = Depends(get_current_user)
):
    """
    Partial update.
    A status sent here replaces the current one without workflow checks;
    use PATCH /tasks/{id}/status to move a task through the workflow.
    """
    task = service.update_task(task_id, task_in.model_dump(exclude_unset=True), current_user)
    if not task:
        raise_task_not_found()
    return success_response(TaskResponse.model_validate(task), SuccessMessages.TASK_UPDATED)

@router.delete("/{task_id}")
def delete_task(
    task_id: int,
    service: TaskService = Depends(get_task_service),
    current_user: User = Depends(get_current_user)
):
    if not service.delete_task(task_id):
        raise_task_not_found()
    return success_response(message=SuccessMessages.TASK_DELETED)

@router.patch("/{task_id}/status")
def change_task_status(
    task_id: int,
    status_in: TaskStatusChange,
    service: TaskService = Depends(get_task_service),
    notifications: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user)
):
    """
    Moves a task along the workflow:
    todo -> in_progress -> in_review -> done, with the backward steps
    in_progress -> todo, in_review -> in_progress and done -> in_review.
    """
    task = service.change_status(task_id, status_in.status, current_user)
    if not task:
        raise_task_not_found()
    if task.assignee_id:
        notifications.deliver_best_effort(
            notifications.notify_task_status_changed, task, task.assignee_id, task.status
        )
    return success_response(TaskResponse.model_validate(task), SuccessMessages.TASK_STATUS_UPDATED)

@router.post("/{task_id}/assign")
def assign_task(
    task_id: int,
    assign_in: TaskAssign,
    service: TaskService = Depends(get_task_service),
    notifications: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user)
):
    task = service.assign_task(task_id, assign_in.assignee_id)
    if not task:
        raise_task_not_found()
    notifications.deliver_best_effort(notifications.notify_task_assigned, task, assign_in.assignee_id)
    return success_response(TaskResponse.model_validate(task), SuccessMessages.TASK_ASSIGNED)

@router.get("/{task_id}/history")
def get_task_history(
    task_id: int,
    service: TaskService = Depends(get_task_service),
    current_user: User = Depends(get_current_user)
):
    """
    Status history, oldest first.
    """
    history = service.get_status_history(task_id)
    if history is None:
        raise_task_not_found()
    return success_response([TaskStatusHistoryResponse.model_validate(h) for h in history])

from fastapi import APIRouter, Depends

from devflow.models import User
from devflow.schemas import CommentCreate, CommentUpdate, CommentResponse
from devflow.auth.dependencies import get_current_user
from devflow.constants import SuccessMessages
from devflow.exceptions import raise_comment_not_found
from devflow.utils.deps import get_comment_service, get_notification_service
from devflow.utils.comment_service import CommentService
from devflow.utils.notification_service import NotificationService
from devflow.utils.responses import success_response

router = APIRouter(tags=["Comments"])

@router.post("/tasks/{task_id}/comments", status_code=201)
def create_comment(
    task_id: int,
    comment_in: CommentCreate,
    service: CommentService = Depends(get_comment_service),
    notifications: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user)
):
    """
    Adds a comment to a task and notifies the assignee,
    unless the assignee wrote it.
    """
    comment = service.create_comment(task_id, current_user, comment_in.content)
    task = comment.task
    if task.assignee_id and task.assignee_id != current_user.id:
        notifications.deliver_best_effort(
            notifications.notify_new_comment, task, task.assignee_id, current_user.name
        )
    return success_response(CommentResponse.model_validate(comment), SuccessMessages.COMMENT_CREATED)

@router.get("/tasks/{task_id}/comments")
def list_comments(
    task_id: int,
    service: CommentService = Depends(get_comment_service),
    current_user: User = Depends(get_current_user)
):
    comments = service.list_by_task(task_id)
    return success_response([CommentResponse.model_validate(c) for c in comments])

@router.patch("/comments/{comment_id}")
def update_comment(
    comment_id: int,
    comment_in: CommentUpdate,
    service: CommentService = Depends(get_comment_service),
    current_user: User = Depends(get_current_user)
):
    """
    Edits a comment. Only its author or an admin may do so.
    """
    comment = service.update_comment(comment_id, comment_in.content, current_user)
    if not comment:
        raise_comment_not_found()
    return success_response(CommentResponse.model_validate(comment), SuccessMessages.COMMENT_UPDATED)

@router.delete("/comments/{comment_id}")
def delete_comment(
    comment_id: int,
    service: CommentService = Depends(get_comment_service),
    current_user: User = Depends(get_current_user)
):
    if not service.delete_comment(comment_id, current_user):
        raise_comment_not_found()
    return success_response(message=SuccessMessages.COMMENT_DELETED)

from fastapi import APIRouter, Depends, Query
from typing import Optional

from devflow.models import User
from devflow.schemas import NotificationResponse, NotificationCount
from devflow.auth.dependencies import get_current_user
from devflow.constants import SuccessMessages
from devflow.exceptions import raise_notification_not_found
from devflow.utils.deps import PaginationParams, get_notification_service
from devflow.utils.notification_service import NotificationService
from devflow.utils.responses import success_response, paginated_response

router = APIRouter(prefix="/notifications", tags=["Notifications"])

@router.get("")
def list_notifications(
    is_read: Optional[bool] = Query(None),
    pagination: PaginationParams = Depends(),
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user)
):
    """
    The current user's notifications, newest first.
    """
    items, total = service.list_notifications(current_user.id, is_read, pagination.page, pagination.limit)
    return paginated_response(
        [NotificationResponse.model_validate(n) for n in items],
        pagination.page,
        pagination.limit,
        total,
    )

@router.get("/unread-count")
def get_unread_count(
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user)
):
    return success_response(NotificationCount(unread_count=service.unread_count(current_user.id)))

@router.patch("/read-all")
def mark_all_notifications_read(
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user)
):
    service.mark_all_read(current_user.id)
    return success_response(message=SuccessMessages.NOTIFICATIONS_READ)

@router.patch("/{notification_id}/read")
def mark_notification_read(
    notification_id: int,
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user)
):
    """
    Marks one of the current user's notifications as read.
    Repeating the call on a read notification changes nothing.
    """
    if not service.mark_read(notification_id, current_user.id):
        raise_notification_not_found()
    return success_response(message=SuccessMessages.NOTIFICATION_READ)

@router.delete("/{notification_id}")
def delete_notification(
    notification_id: int,
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user)
):
    if not service.delete_notification(notification_id, current_user.id):
        raise_notification_not_found()
    return success_response(message=SuccessMessages.NOTIFICATION_DELETED)

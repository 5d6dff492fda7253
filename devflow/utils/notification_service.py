from typing import Callable, List, Optional, Tuple
from sqlalchemy import event
from sqlalchemy.orm import Session

from devflow.models import Notification, Task
from devflow.enums import NotificationType
from devflow.utils.common import clamp_pagination
from devflow.utils.notification_hub import notification_hub
from devflow.utils.notification_repo import (
    create_notification_record,
    find_by_user_db,
    count_unread_db,
    mark_read_db,
    mark_all_read_db,
    delete_notification_db,
)
from devflow.utils.logger import get_logger

logger = get_logger(__name__)

# Session.info key holding pushes that wait for the outer commit
PENDING_PUSHES = "pending_pushes"


def task_link(task_id: int) -> str:
    return f"/tasks/{task_id}"


def notification_payload(notification: Notification) -> dict:
    return {
        "event": "notification",
        "data": {
            "id": notification.id,
            "user_id": notification.user_id,
            "type": notification.type,
            "title": notification.title,
            "message": notification.message,
            "link": notification.link,
            "is_read": notification.is_read,
            "created_at": notification.created_at.isoformat() if notification.created_at else None,
        },
    }


def _push(publisher, user_id: int, payload: dict):
    try:
        publisher.publish(user_id, payload)
    except Exception:
        logger.exception(f"Push for notification {payload['data']['id']} failed")


@event.listens_for(Session, "after_commit")
def _publish_committed(session: Session):
    # Also fired when a savepoint is released; only the outer commit counts
    if session.in_nested_transaction():
        return
    for publisher, user_id, payload in session.info.pop(PENDING_PUSHES, []):
        _push(publisher, user_id, payload)


@event.listens_for(Session, "after_rollback")
def _drop_uncommitted(session: Session):
    if not session.in_nested_transaction():
        session.info.pop(PENDING_PUSHES, None)


class NotificationService:
    """
    Persists notifications and publishes a push event for each one.

    The stored row is the durable record. Its push is queued on the session
    and handed to the injected publisher (the process-wide hub by default)
    only once the surrounding transaction commits; a rollback discards it.
    Publisher failures are logged, never raised.
    """

    def __init__(self, db: Session, publisher=None):
        self.db = db
        self.publisher = publisher if publisher is not None else notification_hub

    def notify(
        self,
        user_id: int,
        type: NotificationType,
        title: str,
        message: str,
        link: Optional[str] = None,
    ) -> Notification:
        notification = create_notification_record(
            self.db,
            user_id=user_id,
            type=getattr(type, "value", type),
            title=title,
            message=message,
            link=link,
        )
        self.db.info.setdefault(PENDING_PUSHES, []).append(
            (self.publisher, notification.user_id, notification_payload(notification))
        )
        return notification

    def deliver_best_effort(self, send: Callable, *args, **kwargs) -> Optional[Notification]:
        """
        Runs one of the notify helpers inside a savepoint.
        A failure rolls back only the notification and is logged, so the
        task or comment write that triggered it is kept.
        """
        try:
            with self.db.begin_nested():
                return send(*args, **kwargs)
        except Exception:
            logger.exception(f"Notification via {getattr(send, '__name__', send)} failed")
            return None

    # Task lifecycle helpers

    def notify_task_assigned(self, task: Task, assignee_id: int) -> Notification:
        return self.notify(
            assignee_id,
            NotificationType.TASK_ASSIGNED,
            "New Task Assigned",
            f"You have been assigned to task: {task.title}",
            task_link(task.id),
        )

    def notify_task_status_changed(self, task: Task, user_id: int, new_status: str) -> Notification:
        return self.notify(
            user_id,
            NotificationType.TASK_UPDATED,
            "Task Status Updated",
            f'Task "{task.title}" status changed to {getattr(new_status, "value", new_status)}',
            task_link(task.id),
        )

    def notify_new_comment(self, task: Task, user_id: int, commenter_name: str) -> Notification:
        return self.notify(
            user_id,
            NotificationType.COMMENT_ADDED,
            "New Comment",
            f"{commenter_name} commented on task: {task.title}",
            task_link(task.id),
        )

    # Inbox

    def list_notifications(
        self,
        user_id: int,
        is_read: Optional[bool] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Notification], int]:
        page, limit = clamp_pagination(page, limit)
        return find_by_user_db(self.db, user_id, is_read=is_read, page=page, limit=limit)

    def unread_count(self, user_id: int) -> int:
        return count_unread_db(self.db, user_id)

    def mark_read(self, notification_id: int, user_id: Optional[int] = None) -> bool:
        return mark_read_db(self.db, notification_id, user_id)

    def mark_all_read(self, user_id: int) -> bool:
        return mark_all_read_db(self.db, user_id)

    def delete_notification(self, notification_id: int, user_id: Optional[int] = None) -> bool:
        return delete_notification_db(self.db, notification_id, user_id)

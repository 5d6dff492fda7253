from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from devflow.models import Notification
from devflow.utils.common import paginate

def create_notification_record(
    db: Session,
    user_id: int,
    type: str,
    title: str,
    message: str,
    link: Optional[str] = None,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        link=link,
    )
    db.add(notification)
    db.flush()
    db.refresh(notification)
    return notification

def find_by_user_db(
    db: Session,
    user_id: int,
    is_read: Optional[bool] = None,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[Notification], int]:
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if is_read is not None:
        query = query.filter(Notification.is_read == is_read)
    query = query.order_by(Notification.created_at.desc(), Notification.id.desc())
    return paginate(query, page, limit)

def count_unread_db(db: Session, user_id: int) -> int:
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read.is_(False),
    ).count()

def mark_read_db(db: Session, notification_id: int, user_id: Optional[int] = None) -> bool:
    query = db.query(Notification).filter(Notification.id == notification_id)
    if user_id is not None:
        query = query.filter(Notification.user_id == user_id)
    notification = query.first()
    if not notification:
        return False
    if not notification.is_read:
        notification.is_read = True
        db.flush()
    return True

def mark_all_read_db(db: Session, user_id: int) -> bool:
    updated = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read.is_(False),
    ).update({Notification.is_read: True}, synchronize_session="fetch")
    return updated > 0

def delete_notification_db(db: Session, notification_id: int, user_id: Optional[int] = None) -> bool:
    query = db.query(Notification).filter(Notification.id == notification_id)
    if user_id is not None:
        query = query.filter(Notification.user_id == user_id)
    return query.delete(synchronize_session="fetch") > 0

from typing import List, Optional
from sqlalchemy.orm import Session

from devflow.models import User, Task, Comment
from devflow.enums import Capability
from devflow.exceptions import raise_task_not_found
from devflow.auth.permissions import authorize
from devflow.utils.common import exists
from devflow.utils.logger import get_logger

logger = get_logger(__name__)


class CommentService:
    """
    Task comments. Deletion is soft, and a deleted comment is treated as
    absent by every read and write below.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_comment(self, comment_id: int) -> Optional[Comment]:
        return (
            self.db.query(Comment)
            .filter(Comment.id == comment_id, Comment.is_deleted.is_(False))
            .first()
        )

    def create_comment(self, task_id: int, author: User, content: str) -> Comment:
        if not exists(self.db, Task, task_id):
            raise_task_not_found()

        comment = Comment(task_id=task_id, user_id=author.id, content=content)
        self.db.add(comment)
        self.db.flush()
        self.db.refresh(comment)
        logger.info(f"Comment {comment.id} added to task {task_id} by user {author.id}")
        return comment

    def list_by_task(self, task_id: int) -> List[Comment]:
        return (
            self.db.query(Comment)
            .filter(Comment.task_id == task_id, Comment.is_deleted.is_(False))
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .all()
        )

    def update_comment(self, comment_id: int, content: str, actor: User) -> Optional[Comment]:
        comment = self.get_comment(comment_id)
        if not comment:
            return None
        authorize(actor, Capability.EDIT_COMMENT, comment)

        comment.content = content
        comment.is_edited = True
        self.db.flush()
        self.db.refresh(comment)
        return comment

    def delete_comment(self, comment_id: int, actor: User) -> bool:
        comment = self.get_comment(comment_id)
        if not comment:
            return False
        authorize(actor, Capability.DELETE_COMMENT, comment)

        comment.is_deleted = True
        self.db.flush()
        logger.info(f"Comment {comment_id} deleted by user {actor.id}")
        return True

from sqlalchemy.orm import Session, Query
from typing import Type, TypeVar, Any, List, Optional, Tuple
from devflow.enums import ErrorCode
from devflow.exceptions import raise_not_found
from devflow.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

T = TypeVar("T")

def get_object_or_404(
    db: Session,
    model: Type[T],
    obj_id: Any,
    msg: str = "Object not found",
    reason: Optional[ErrorCode] = None,
) -> T:
    """
    Retrieves an object by ID or raises a 404 NotFoundError.
    """
    obj = db.query(model).filter(model.id == obj_id).first()
    if not obj:
        raise_not_found(msg, reason)
    return obj

def exists(db: Session, model: Type[T], obj_id: Any) -> bool:
    return db.query(model.id).filter(model.id == obj_id).first() is not None

def clamp_pagination(page: int, limit: int) -> Tuple[int, int]:
    page = max(page or 1, 1)
    limit = min(max(limit or DEFAULT_PAGE_SIZE, 1), MAX_PAGE_SIZE)
    return page, limit

def paginate(query: Query, page: int, limit: int) -> Tuple[List[Any], int]:
    """
    Counts the full filtered set, then fetches one page of it.
    The query must already carry its ordering.
    """
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, total

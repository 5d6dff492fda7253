from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from devflow.database.session import get_db
from devflow.models import User
from devflow.schemas import UserCreate, UserUpdate, UserResponse
from devflow.enums import Capability, ErrorCode
from devflow.auth.permissions import require_capability
from devflow.constants import ErrorMessages, SuccessMessages
from devflow.exceptions import raise_user_not_found
from devflow.utils import user_service
from devflow.utils.common import get_object_or_404
from devflow.utils.deps import PaginationParams
from devflow.utils.responses import success_response, paginated_response

router = APIRouter(prefix="/users", tags=["Users"])

# Every route here is admin only
admin_only = require_capability(Capability.MANAGE_USERS)

@router.get("")
def list_users(
    pagination: PaginationParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only)
):
    users, total, page, limit = user_service.list_users(db, pagination.page, pagination.limit)
    return paginated_response([UserResponse.model_validate(u) for u in users], page, limit, total)

@router.get("/{user_id}")
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only)
):
    user = get_object_or_404(db, User, user_id, ErrorMessages.USER_NOT_FOUND, ErrorCode.USER_NOT_FOUND)
    return success_response(UserResponse.model_validate(user))

@router.post("", status_code=201)
def create_user(
    user_in: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only)
):
    """
    Creates a team lead or developer account.
    """
    user = user_service.create_user(db, user_in)
    return success_response(UserResponse.model_validate(user), SuccessMessages.USER_CREATED)

@router.patch("/{user_id}")
def update_user(
    user_id: int,
    user_in: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only)
):
    user = user_service.update_user(db, user_id, user_in, current_user)
    if not user:
        raise_user_not_found()
    return success_response(UserResponse.model_validate(user), SuccessMessages.USER_UPDATED)

@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only)
):
    if not user_service.delete_user(db, user_id, current_user):
        raise_user_not_found()
    return success_response(message=SuccessMessages.USER_DELETED)

@router.post("/{user_id}/promote")
def promote_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only)
):
    """
    Promotes a developer to team lead.
    """
    user = user_service.promote_user(db, user_id)
    if not user:
        raise_user_not_found()
    return success_response(UserResponse.model_validate(user), SuccessMessages.USER_PROMOTED)

@router.post("/{user_id}/demote")
def demote_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only)
):
    """
    Demotes a team lead to developer. Admins cannot demote themselves.
    """
    user = user_service.demote_user(db, user_id, current_user)
    if not user:
        raise_user_not_found()
    return success_response(UserResponse.model_validate(user), SuccessMessages.USER_DEMOTED)

from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from devflow.models import User
from devflow.enums import UserRole, ErrorCode, TokenType
from devflow.constants import ErrorMessages
from devflow.exceptions import (
    raise_bad_request,
    raise_unauthorized,
    raise_forbidden,
    raise_email_exists,
)
from devflow.schemas.auth_schema import SignupRequest, LoginRequest
from devflow.schemas.user_schema import UserCreate, UserUpdate, UserResponse
from devflow.auth.auth_utils import (
    hash_password,
    verify_password,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from devflow.utils.common import clamp_pagination, paginate
from devflow.utils.logger import get_logger

logger = get_logger(__name__)

# Roles an admin may hand out when creating an account
CREATABLE_ROLES = {UserRole.TEAM_LEAD, UserRole.DEVELOPER}


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def _ensure_email_free(db: Session, email: str):
    if get_user_by_email(db, email):
        raise_email_exists()


def _new_user(db: Session, email: str, password: str, name: str, role: UserRole, avatar_url=None) -> User:
    user = User(
        email=email,
        hashed_password=hash_password(password),
        name=name,
        role=role.value,
        avatar_url=avatar_url,
    )
    db.add(user)
    db.flush()
    db.refresh(user)
    return user


def build_auth_payload(user: User) -> dict:
    return {
        "user": UserResponse.model_validate(user),
        "token": create_access_token(user),
        "refreshToken": create_refresh_token(user),
    }


# --------------------------------------------------
# AUTHENTICATION
# --------------------------------------------------

def signup(db: Session, signup_in: SignupRequest) -> User:
    """
    Public registration. The requested role is ignored: only admins hand out
    elevated roles.
    """
    _ensure_email_free(db, signup_in.email)
    user = _new_user(
        db,
        email=signup_in.email,
        password=signup_in.password,
        name=signup_in.name,
        role=UserRole.DEVELOPER,
        avatar_url=signup_in.avatar_url,
    )
    logger.info(f"User {user.id} signed up")
    return user


def login(db: Session, login_in: LoginRequest) -> User:
    user = get_user_by_email(db, login_in.email)
    if not user or not verify_password(login_in.password, user.hashed_password):
        logger.info(f"Failed login for {login_in.email}")
        raise_unauthorized(ErrorMessages.INVALID_CREDENTIALS, ErrorCode.INVALID_CREDENTIALS)
    return user


def refresh(db: Session, refresh_token: str) -> User:
    payload = decode_token(refresh_token, TokenType.REFRESH)
    if not payload:
        raise_unauthorized(ErrorMessages.INVALID_REFRESH_TOKEN)

    user = get_user(db, payload["user_id"])
    if not user:
        raise_unauthorized(ErrorMessages.INVALID_REFRESH_TOKEN)
    return user


# --------------------------------------------------
# ADMINISTRATION
# --------------------------------------------------

def list_users(db: Session, page: int = 1, limit: int = 50) -> Tuple[List[User], int, int, int]:
    page, limit = clamp_pagination(page, limit)
    query = db.query(User).order_by(User.created_at.desc(), User.id.desc())
    items, total = paginate(query, page, limit)
    return items, total, page, limit


def create_user(db: Session, user_in: UserCreate) -> User:
    if user_in.role not in CREATABLE_ROLES:
        raise_bad_request(ErrorMessages.CREATABLE_ROLES_ONLY, {"role": user_in.role.value})
    _ensure_email_free(db, user_in.email)

    user = _new_user(
        db,
        email=user_in.email,
        password=user_in.password,
        name=user_in.name,
        role=user_in.role,
        avatar_url=user_in.avatar_url,
    )
    logger.info(f"User {user.id} created as {user.role}")
    return user


def update_user(db: Session, user_id: int, user_in: UserUpdate, actor: User) -> Optional[User]:
    user = get_user(db, user_id)
    if not user:
        return None

    changes = user_in.model_dump(exclude_unset=True, exclude_none=True)

    if "role" in changes:
        changes["role"] = changes["role"].value
        if user.id == actor.id and changes["role"] != user.role:
            raise_forbidden(ErrorMessages.CANNOT_CHANGE_OWN_ROLE)

    if "email" in changes and changes["email"] != user.email:
        _ensure_email_free(db, changes["email"])

    if "password" in changes:
        changes["hashed_password"] = hash_password(changes.pop("password"))

    for field, value in changes.items():
        setattr(user, field, value)
    db.flush()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int, actor: User) -> bool:
    if user_id == actor.id:
        raise_forbidden(ErrorMessages.CANNOT_MODIFY_SELF)

    user = get_user(db, user_id)
    if not user:
        return False
    db.delete(user)
    db.flush()
    logger.info(f"User {user_id} deleted by admin {actor.id}")
    return True


def _change_role(db: Session, user: User, new_role: UserRole, already_message: str) -> User:
    if user.role == UserRole.ADMIN.value:
        raise_forbidden(ErrorMessages.CANNOT_CHANGE_ADMIN_ROLE)
    if user.role == new_role.value:
        raise_bad_request(already_message)

    user.role = new_role.value
    db.flush()
    db.refresh(user)
    logger.info(f"User {user.id} is now {user.role}")
    return user


def promote_user(db: Session, user_id: int) -> Optional[User]:
    user = get_user(db, user_id)
    if not user:
        return None
    return _change_role(db, user, UserRole.TEAM_LEAD, ErrorMessages.ALREADY_TEAM_LEAD)


def demote_user(db: Session, user_id: int, actor: User) -> Optional[User]:
    if user_id == actor.id:
        raise_forbidden(ErrorMessages.CANNOT_MODIFY_SELF)

    user = get_user(db, user_id)
    if not user:
        return None
    return _change_role(db, user, UserRole.DEVELOPER, ErrorMessages.ALREADY_DEVELOPER)

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from devflow.database.session import get_db
from devflow.models import User
from devflow.constants import ErrorMessages
from devflow.exceptions import raise_unauthorized
from devflow.auth.auth_utils import decode_token
from devflow.utils.logger import get_logger

logger = get_logger(__name__)

# auto_error=False so a missing header is reported as 401 in our envelope
security = HTTPBearer(auto_error=False)


def get_user_from_token(db: Session, token: str) -> Optional[User]:
    payload = decode_token(token)
    if not payload:
        return None
    return db.query(User).filter(User.id == payload["user_id"]).first()


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
):
    """
    Dependency to get the current authenticated user from JWT token.

    Args:
        credentials: Bearer token credentials
        db: Database session

    Returns:
        User: The authenticated user instance

    Raises:
        UnauthorizedError: If the token is missing, invalid or the user no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise_unauthorized(ErrorMessages.NO_TOKEN)

    user = get_user_from_token(db, credentials.credentials)
    if not user:
        logger.info("Rejected bearer token")
        raise_unauthorized()

    return user

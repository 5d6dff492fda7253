from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from devflow.database.session import get_db
from devflow.models import User
from devflow.schemas import LoginRequest, SignupRequest, RefreshRequest, UserResponse
from devflow.auth.dependencies import get_current_user
from devflow.constants import SuccessMessages
from devflow.utils import user_service
from devflow.utils.responses import success_response

router = APIRouter(prefix="/auth", tags=["Authentication"])

@router.post("/signup", status_code=201)
def signup(
    signup_in: SignupRequest,
    db: Session = Depends(get_db)
):
    """
    Registers a new developer account and logs it in.
    """
    user = user_service.signup(db, signup_in)
    return success_response(user_service.build_auth_payload(user), SuccessMessages.SIGNUP)

@router.post("/login")
def login(
    login_in: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticates a user and returns an access and a refresh token.
    """
    user = user_service.login(db, login_in)
    return success_response(user_service.build_auth_payload(user), SuccessMessages.LOGIN)

@router.post("/refresh")
def refresh_token(
    refresh_in: RefreshRequest,
    db: Session = Depends(get_db)
):
    user = user_service.refresh(db, refresh_in.refreshToken)
    return success_response(user_service.build_auth_payload(user), SuccessMessages.TOKEN_REFRESHED)

@router.get("/me")
def read_current_user(current_user: User = Depends(get_current_user)):
    return success_response(UserResponse.model_validate(current_user))

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from devflow.config.settings import settings
from devflow.constants import ErrorMessages
from devflow.enums import ErrorCode
from devflow.utils.logger import get_logger

logger = get_logger(__name__)


class BaseAPIException(HTTPException):
    """
    Base exception for all API errors.
    Enforces a consistent, frontend-friendly response structure.
    """

    status_code_default = 500
    error_code_default = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        error_code: ErrorCode | None = None,
        details: dict | None = None,
        status_code: int | None = None,
        reason: ErrorCode | None = None,
    ):
        super().__init__(status_code=status_code or self.status_code_default, detail=message)
        self.message = message
        self.error_code = error_code or self.error_code_default
        self.reason = reason
        if reason is not None:
            details = {**(details or {}), "reason": reason.value}
        self.details = details


class ValidationError(BaseAPIException):
    status_code_default = 400
    error_code_default = ErrorCode.VALIDATION_ERROR


class UnauthorizedError(BaseAPIException):
    status_code_default = 401
    error_code_default = ErrorCode.UNAUTHORIZED


class ForbiddenError(BaseAPIException):
    status_code_default = 403
    error_code_default = ErrorCode.FORBIDDEN


class NotFoundError(BaseAPIException):
    status_code_default = 404
    error_code_default = ErrorCode.NOT_FOUND


class ConflictError(BaseAPIException):
    status_code_default = 409
    error_code_default = ErrorCode.CONFLICT


class InvalidTransitionError(BaseAPIException):
    """
    A status change outside the task workflow graph.
    Kept distinct from ValidationError so clients can tell a domain rule
    violation from a malformed request.
    """
    status_code_default = 400
    error_code_default = ErrorCode.INVALID_TRANSITION

    def __init__(self, current_status: str, attempted_status: str):
        super().__init__(
            f"Invalid status transition from {current_status} to {attempted_status}",
            details={"current_status": current_status, "attempted_status": attempted_status},
        )
        self.current_status = current_status
        self.attempted_status = attempted_status


class InternalError(BaseAPIException):
    status_code_default = 500
    error_code_default = ErrorCode.INTERNAL_ERROR


# --------------------------------------------------
# GLOBAL EXCEPTION HANDLERS
# --------------------------------------------------

def error_body(message: str, code, details=None) -> dict:
    error = {"message": message, "code": code}
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error}


async def base_api_exception_handler(request: Request, exc: BaseAPIException):
    logger.warning(f"{exc.error_code.value}: {exc.message} ({request.method} {request.url.path})")
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(error_body(exc.message, exc.error_code, exc.details)),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details: dict = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body") or "request"
        details.setdefault(field, []).append(err.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=400,
        content=error_body(ErrorMessages.VALIDATION_FAILED, ErrorCode.VALIDATION_ERROR, details),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    codes = {
        400: ErrorCode.BAD_REQUEST,
        401: ErrorCode.UNAUTHORIZED,
        403: ErrorCode.FORBIDDEN,
        404: ErrorCode.NOT_FOUND,
        409: ErrorCode.CONFLICT,
    }
    code = codes.get(exc.status_code, ErrorCode.BAD_REQUEST if exc.status_code < 500 else ErrorCode.INTERNAL_ERROR)
    message = ErrorMessages.ROUTE_NOT_FOUND if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content=error_body(message, code))


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning(f"Database conflict on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=409,
        content=error_body(ErrorMessages.RESOURCE_EXISTS, ErrorCode.CONFLICT),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.method} {request.url.path}")
    message = str(exc) if settings.is_development else ErrorMessages.INTERNAL
    return JSONResponse(
        status_code=500,
        content=error_body(message, ErrorCode.INTERNAL_ERROR),
    )


def register_exception_handlers(app):
    app.add_exception_handler(BaseAPIException, base_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


# --------------------------------------------------
# GENERIC HTTP HELPERS
# --------------------------------------------------

def raise_bad_request(message: str, details: dict | None = None):
    raise ValidationError(message, details=details)


def raise_unauthorized(
    message: str = ErrorMessages.INVALID_TOKEN,
    reason: ErrorCode | None = None,
):
    raise UnauthorizedError(message, reason=reason)


def raise_forbidden(
    message: str = ErrorMessages.ACCESS_DENIED,
):
    raise ForbiddenError(message)


def raise_not_found(
    message: str,
    reason: ErrorCode | None = None,
):
    raise NotFoundError(message, reason=reason)


def raise_conflict(
    message: str,
    reason: ErrorCode | None = None,
):
    raise ConflictError(message, reason=reason)


# --------------------------------------------------
# DOMAIN-SPECIFIC HELPERS
# --------------------------------------------------

def raise_user_not_found():
    raise_not_found(ErrorMessages.USER_NOT_FOUND, ErrorCode.USER_NOT_FOUND)


def raise_organization_not_found():
    raise_not_found(ErrorMessages.ORGANIZATION_NOT_FOUND, ErrorCode.ORGANIZATION_NOT_FOUND)


def raise_team_not_found():
    raise_not_found(ErrorMessages.TEAM_NOT_FOUND, ErrorCode.TEAM_NOT_FOUND)


def raise_project_not_found():
    raise_not_found(ErrorMessages.PROJECT_NOT_FOUND, ErrorCode.PROJECT_NOT_FOUND)


def raise_sprint_not_found():
    raise_not_found(ErrorMessages.SPRINT_NOT_FOUND, ErrorCode.SPRINT_NOT_FOUND)


def raise_task_not_found():
    raise_not_found(ErrorMessages.TASK_NOT_FOUND, ErrorCode.TASK_NOT_FOUND)


def raise_comment_not_found():
    raise_not_found(ErrorMessages.COMMENT_NOT_FOUND, ErrorCode.COMMENT_NOT_FOUND)


def raise_notification_not_found():
    raise_not_found(ErrorMessages.NOTIFICATION_NOT_FOUND, ErrorCode.NOTIFICATION_NOT_FOUND)


def raise_already_member():
    raise_conflict(ErrorMessages.ALREADY_MEMBER, ErrorCode.ALREADY_MEMBER)


def raise_email_exists():
    raise_conflict(ErrorMessages.EMAIL_EXISTS, ErrorCode.EMAIL_EXISTS)


def raise_invalid_transition(current_status: str, attempted_status: str):
    raise InvalidTransitionError(current_status, attempted_status)

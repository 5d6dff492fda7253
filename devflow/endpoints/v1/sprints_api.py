from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from devflow.database.session import get_db
from devflow.models import User, Sprint
from devflow.schemas import SprintCreate, SprintUpdate, SprintResponse
from devflow.enums import Capability, ErrorCode
from devflow.auth.dependencies import get_current_user
from devflow.auth.permissions import require_capability
from devflow.constants import ErrorMessages, SuccessMessages
from devflow.exceptions import raise_sprint_not_found
from devflow.utils import hierarchy_service
from devflow.utils.common import get_object_or_404
from devflow.utils.responses import success_response

router = APIRouter(prefix="/sprints", tags=["Sprints"])

@router.post("", status_code=201)
def create_sprint(
    sprint_in: SprintCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.MANAGE_SPRINTS))
):
    """
    Creates a sprint. Its status is derived from the dates on every read.
    """
    sprint = hierarchy_service.create_sprint(db, sprint_in)
    return success_response(SprintResponse.model_validate(sprint), SuccessMessages.SPRINT_CREATED)

@router.get("")
def list_sprints(
    project_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    sprints = hierarchy_service.list_sprints(db, project_id)
    return success_response([SprintResponse.model_validate(s) for s in sprints])

@router.get("/{sprint_id}")
def get_sprint(
    sprint_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    sprint = get_object_or_404(db, Sprint, sprint_id, ErrorMessages.SPRINT_NOT_FOUND, ErrorCode.SPRINT_NOT_FOUND)
    return success_response(SprintResponse.model_validate(sprint))

@router.patch("/{sprint_id}")
def update_sprint(
    sprint_id: int,
    sprint_in: SprintUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.MANAGE_SPRINTS))
):
    sprint = hierarchy_service.update_sprint(db, sprint_id, sprint_in)
    if not sprint:
        raise_sprint_not_found()
    return success_response(SprintResponse.model_validate(sprint), SuccessMessages.SPRINT_UPDATED)

@router.delete("/{sprint_id}")
def delete_sprint(
    sprint_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.MANAGE_SPRINTS))
):
    if not hierarchy_service.delete_sprint(db, sprint_id):
        raise_sprint_not_found()
    return success_response(message=SuccessMessages.SPRINT_DELETED)

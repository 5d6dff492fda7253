from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from devflow.database.session import get_db
from devflow.models import User, Project
from devflow.schemas import ProjectCreate, ProjectUpdate, ProjectResponse
from devflow.enums import Capability, ErrorCode
from devflow.auth.dependencies import get_current_user
from devflow.auth.permissions import require_capability
from devflow.constants import ErrorMessages, SuccessMessages
from devflow.exceptions import raise_project_not_found
from devflow.utils import hierarchy_service
from devflow.utils.common import get_object_or_404
from devflow.utils.responses import success_response

router = APIRouter(prefix="/projects", tags=["Projects"])

@router.post("", status_code=201)
def create_project(
    project_in: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.MANAGE_PROJECTS))
):
    """
    Creates a project for a team.
    The repository URL, when given, must point at a GitHub repository.
    """
    project = hierarchy_service.create_project(db, project_in)
    return success_response(ProjectResponse.model_validate(project), SuccessMessages.PROJECT_CREATED)

@router.get("")
def list_projects(
    team_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    projects = hierarchy_service.list_projects(db, team_id)
    return success_response([ProjectResponse.model_validate(p) for p in projects])

@router.get("/{project_id}")
def get_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    project = get_object_or_404(db, Project, project_id, ErrorMessages.PROJECT_NOT_FOUND, ErrorCode.PROJECT_NOT_FOUND)
    return success_response(ProjectResponse.model_validate(project))

@router.patch("/{project_id}")
def update_project(
    project_id: int,
    project_in: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.MANAGE_PROJECTS))
):
    project = hierarchy_service.update_project(db, project_id, project_in)
    if not project:
        raise_project_not_found()
    return success_response(ProjectResponse.model_validate(project), SuccessMessages.PROJECT_UPDATED)

@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.MANAGE_PROJECTS))
):
    if not hierarchy_service.delete_project(db, project_id):
        raise_project_not_found()
    return success_response(message=SuccessMessages.PROJECT_DELETED)

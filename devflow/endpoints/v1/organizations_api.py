from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from devflow.database.session import get_db
from devflow.models import User, Organization
from devflow.schemas import OrganizationCreate, OrganizationUpdate, OrganizationResponse
from devflow.enums import Capability, ErrorCode
from devflow.auth.dependencies import get_current_user
from devflow.auth.permissions import require_capability
from devflow.constants import ErrorMessages, SuccessMessages
from devflow.exceptions import raise_organization_not_found
from devflow.utils import hierarchy_service
from devflow.utils.common import get_object_or_404
from devflow.utils.deps import PaginationParams
from devflow.utils.responses import success_response, paginated_response

router = APIRouter(prefix="/organizations", tags=["Organizations"])

@router.post("", status_code=201)
def create_organization(
    org_in: OrganizationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.MANAGE_ORGANIZATIONS))
):
    """
    Creates a new organization.
    Restricted to Admins.
    """
    organization = hierarchy_service.create_organization(db, org_in)
    return success_response(OrganizationResponse.model_validate(organization), SuccessMessages.ORGANIZATION_CREATED)

@router.get("")
def list_organizations(
    pagination: PaginationParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    items, total, page, limit = hierarchy_service.list_organizations(db, pagination.page, pagination.limit)
    return paginated_response([OrganizationResponse.model_validate(o) for o in items], page, limit, total)

@router.get("/{organization_id}")
def get_organization(
    organization_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    organization = get_object_or_404(
        db, Organization, organization_id, ErrorMessages.ORGANIZATION_NOT_FOUND, ErrorCode.ORGANIZATION_NOT_FOUND
    )
    return success_response(OrganizationResponse.model_validate(organization))

@router.patch("/{organization_id}")
def update_organization(
    organization_id: int,
    org_in: OrganizationUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.MANAGE_ORGANIZATIONS))
):
    organization = hierarchy_service.update_organization(db, organization_id, org_in)
    if not organization:
        raise_organization_not_found()
    return success_response(OrganizationResponse.model_validate(organization), SuccessMessages.ORGANIZATION_UPDATED)

@router.delete("/{organization_id}")
def delete_organization(
    organization_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.MANAGE_ORGANIZATIONS))
):
    """
    Deletes an organization along with its teams, projects and sprints.
    """
    if not hierarchy_service.delete_organization(db, organization_id):
        raise_organization_not_found()
    return success_response(message=SuccessMessages.ORGANIZATION_DELETED)

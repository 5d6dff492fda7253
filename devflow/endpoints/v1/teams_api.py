from fastapi import APIRouter, Depends, Query
from typing import Optional

from devflow.models import User
from devflow.schemas import TeamCreate, TeamUpdate, TeamResponse, TeamMemberAdd, TeamMemberResponse
from devflow.enums import Capability
from devflow.auth.dependencies import get_current_user
from devflow.auth.permissions import require_capability
from devflow.constants import ErrorMessages, SuccessMessages
from devflow.exceptions import raise_team_not_found, raise_not_found
from devflow.utils.deps import get_team_service
from devflow.utils.team_service import TeamService
from devflow.utils.responses import success_response
from devflow.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/teams", tags=["Teams"])

@router.post("", status_code=201)
def create_team(
    team_in: TeamCreate,
    service: TeamService = Depends(get_team_service),
    current_user: User = Depends(require_capability(Capability.MANAGE_TEAMS))
):
    """
    Creates a new team inside an organization.
    Restricted to Admins and Team Leads.
    """
    team = service.create_team(team_in)
    return success_response(TeamResponse.model_validate(team), SuccessMessages.TEAM_CREATED)

@router.get("")
def list_teams(
    organization_id: Optional[int] = Query(None),
    service: TeamService = Depends(get_team_service),
    current_user: User = Depends(get_current_user)
):
    teams = service.list_teams(organization_id)
    return success_response([TeamResponse.model_validate(t) for t in teams])

@router.get("/{team_id}")
def get_team(
    team_id: int,
    service: TeamService = Depends(get_team_service),
    current_user: User = Depends(get_current_user)
):
    team = service.get_team(team_id)
    if not team:
        raise_team_not_found()
    return success_response(TeamResponse.model_validate(team))

@router.patch("/{team_id}")
def update_team(
    team_id: int,
    team_in: TeamUpdate,
    service: TeamService = Depends(get_team_service),
    current_user: User = Depends(require_capability(Capability.MANAGE_TEAMS))
):
    team = service.update_team(team_id, team_in)
    if not team:
        raise_team_not_found()
    return success_response(TeamResponse.model_validate(team), SuccessMessages.TEAM_UPDATED)

@router.delete("/{team_id}")
def delete_team(
    team_id: int,
    service: TeamService = Depends(get_team_service),
    current_user: User = Depends(require_capability(Capability.MANAGE_TEAMS))
):
    if not service.delete_team(team_id):
        raise_team_not_found()
    return success_response(message=SuccessMessages.TEAM_DELETED)

# Membership

@router.post("/{team_id}/members", status_code=201)
def add_team_member(
    team_id: int,
    member_in: TeamMemberAdd,
    service: TeamService = Depends(get_team_service),
    current_user: User = Depends(require_capability(Capability.MANAGE_MEMBERS))
):
    """
    Adds a user to the team.
    A user can only be a member of a given team once.
    """
    member = service.add_member(team_id, member_in.user_id, member_in.role)
    return success_response(TeamMemberResponse.from_member(member), SuccessMessages.MEMBER_ADDED)

@router.get("/{team_id}/members")
def list_team_members(
    team_id: int,
    service: TeamService = Depends(get_team_service),
    current_user: User = Depends(get_current_user)
):
    members = service.list_members(team_id)
    return success_response([TeamMemberResponse.from_member(m) for m in members])

@router.delete("/{team_id}/members/{user_id}")
def remove_team_member(
    team_id: int,
    user_id: int,
    service: TeamService = Depends(get_team_service),
    current_user: User = Depends(require_capability(Capability.MANAGE_MEMBERS))
):
    if not service.remove_member(team_id, user_id):
        raise_not_found(ErrorMessages.MEMBER_NOT_FOUND)
    logger.info(f"User {user_id} removed from team {team_id} by user {current_user.id}")
    return success_response(message=SuccessMessages.MEMBER_REMOVED)

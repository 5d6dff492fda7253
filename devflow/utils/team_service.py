from typing import List, Optional
from sqlalchemy.orm import Session, joinedload

from devflow.models import User, Organization, Team, TeamMember
from devflow.enums import TeamRole
from devflow.exceptions import (
    raise_organization_not_found,
    raise_team_not_found,
    raise_user_not_found,
    raise_already_member,
)
from devflow.schemas.hierarchy_schema import TeamCreate, TeamUpdate
from devflow.utils.common import exists
from devflow.utils.logger import get_logger

logger = get_logger(__name__)


class TeamService:
    """
    Teams and their membership.
    A user belongs to a team at most once.
    """

    def __init__(self, db: Session):
        self.db = db

    # Teams

    def create_team(self, team_in: TeamCreate) -> Team:
        if not exists(self.db, Organization, team_in.organization_id):
            raise_organization_not_found()

        team = Team(**team_in.model_dump())
        self.db.add(team)
        self.db.flush()
        self.db.refresh(team)
        logger.info(f"Team {team.id} created in organization {team.organization_id}")
        return team

    def list_teams(self, organization_id: Optional[int] = None) -> List[Team]:
        query = self.db.query(Team)
        if organization_id is not None:
            query = query.filter(Team.organization_id == organization_id)
        return query.order_by(Team.created_at.desc(), Team.id.desc()).all()

    def get_team(self, team_id: int) -> Optional[Team]:
        return self.db.query(Team).filter(Team.id == team_id).first()

    def update_team(self, team_id: int, team_in: TeamUpdate) -> Optional[Team]:
        team = self.get_team(team_id)
        if not team:
            return None

        for field, value in team_in.model_dump(exclude_unset=True).items():
            setattr(team, field, value)
        self.db.flush()
        self.db.refresh(team)
        return team

    def delete_team(self, team_id: int) -> bool:
        team = self.get_team(team_id)
        if not team:
            return False
        self.db.delete(team)
        self.db.flush()
        logger.info(f"Team {team_id} deleted")
        return True

    # Membership

    def add_member(self, team_id: int, user_id: int, role=TeamRole.DEVELOPER) -> TeamMember:
        """
        Adds a user to a team.

        Raises:
            NotFoundError: TEAM_NOT_FOUND, then USER_NOT_FOUND
            ConflictError: ALREADY_MEMBER if the pair already exists
        """
        if not exists(self.db, Team, team_id):
            raise_team_not_found()
        if not exists(self.db, User, user_id):
            raise_user_not_found()

        already = (
            self.db.query(TeamMember.id)
            .filter(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
            .first()
        )
        if already:
            raise_already_member()

        member = TeamMember(team_id=team_id, user_id=user_id, role=getattr(role, "value", role))
        self.db.add(member)
        self.db.flush()
        self.db.refresh(member)
        logger.info(f"User {user_id} joined team {team_id} as {member.role}")
        return member

    def remove_member(self, team_id: int, user_id: int) -> bool:
        removed = (
            self.db.query(TeamMember)
            .filter(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
            .delete(synchronize_session="fetch")
        )
        return removed > 0

    def list_members(self, team_id: int) -> List[TeamMember]:
        if not exists(self.db, Team, team_id):
            raise_team_not_found()

        return (
            self.db.query(TeamMember)
            .options(joinedload(TeamMember.user))
            .filter(TeamMember.team_id == team_id)
            .order_by(TeamMember.joined_at.desc(), TeamMember.id.desc())
            .all()
        )

import re
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from devflow.models import Organization, Team, Project, Sprint
from devflow.constants import ErrorMessages, GITHUB_REPO_URL_PATTERN
from devflow.exceptions import (
    raise_bad_request,
    raise_team_not_found,
    raise_project_not_found,
)
from devflow.schemas.hierarchy_schema import (
    OrganizationCreate,
    OrganizationUpdate,
    ProjectCreate,
    ProjectUpdate,
    SprintCreate,
    SprintUpdate,
)
from devflow.utils.common import exists, clamp_pagination, paginate
from devflow.utils.logger import get_logger

logger = get_logger(__name__)

_GITHUB_REPO_URL = re.compile(GITHUB_REPO_URL_PATTERN)


def _apply(db: Session, obj, changes: dict):
    for field, value in changes.items():
        setattr(obj, field, value)
    db.flush()
    db.refresh(obj)
    return obj


def _delete(db: Session, obj) -> bool:
    if not obj:
        return False
    db.delete(obj)
    db.flush()
    return True


# --------------------------------------------------
# ORGANIZATIONS
# --------------------------------------------------

def create_organization(db: Session, org_in: OrganizationCreate) -> Organization:
    organization = Organization(**org_in.model_dump())
    db.add(organization)
    db.flush()
    db.refresh(organization)
    logger.info(f"Organization {organization.id} created")
    return organization


def list_organizations(db: Session, page: int = 1, limit: int = 20) -> Tuple[List[Organization], int, int, int]:
    page, limit = clamp_pagination(page, limit)
    query = db.query(Organization).order_by(Organization.created_at.desc(), Organization.id.desc())
    items, total = paginate(query, page, limit)
    return items, total, page, limit


def get_organization(db: Session, organization_id: int) -> Optional[Organization]:
    return db.query(Organization).filter(Organization.id == organization_id).first()


def update_organization(db: Session, organization_id: int, org_in: OrganizationUpdate) -> Optional[Organization]:
    organization = get_organization(db, organization_id)
    if not organization:
        return None
    return _apply(db, organization, org_in.model_dump(exclude_unset=True))


def delete_organization(db: Session, organization_id: int) -> bool:
    deleted = _delete(db, get_organization(db, organization_id))
    if deleted:
        logger.info(f"Organization {organization_id} deleted")
    return deleted


# --------------------------------------------------
# PROJECTS
# --------------------------------------------------

def validate_github_repo_url(url: Optional[str]):
    if url and not _GITHUB_REPO_URL.match(url):
        raise_bad_request(ErrorMessages.INVALID_GITHUB_URL, {"github_repo_url": url})


def create_project(db: Session, project_in: ProjectCreate) -> Project:
    if not exists(db, Team, project_in.team_id):
        raise_team_not_found()
    validate_github_repo_url(project_in.github_repo_url)

    project = Project(**project_in.model_dump())
    db.add(project)
    db.flush()
    db.refresh(project)
    logger.info(f"Project {project.id} created in team {project.team_id}")
    return project


def list_projects(db: Session, team_id: Optional[int] = None) -> List[Project]:
    query = db.query(Project)
    if team_id is not None:
        query = query.filter(Project.team_id == team_id)
    return query.order_by(Project.created_at.desc(), Project.id.desc()).all()


def get_project(db: Session, project_id: int) -> Optional[Project]:
    return db.query(Project).filter(Project.id == project_id).first()


def update_project(db: Session, project_id: int, project_in: ProjectUpdate) -> Optional[Project]:
    project = get_project(db, project_id)
    if not project:
        return None
    changes = project_in.model_dump(exclude_unset=True)
    validate_github_repo_url(changes.get("github_repo_url"))
    return _apply(db, project, changes)


def delete_project(db: Session, project_id: int) -> bool:
    return _delete(db, get_project(db, project_id))


# --------------------------------------------------
# SPRINTS
# --------------------------------------------------

def validate_sprint_dates(start_date, end_date):
    if start_date and end_date and end_date <= start_date:
        raise_bad_request(
            ErrorMessages.INVALID_SPRINT_DATES,
            {"start_date": str(start_date), "end_date": str(end_date)},
        )


def create_sprint(db: Session, sprint_in: SprintCreate) -> Sprint:
    if not exists(db, Project, sprint_in.project_id):
        raise_project_not_found()
    validate_sprint_dates(sprint_in.start_date, sprint_in.end_date)

    sprint = Sprint(**sprint_in.model_dump())
    db.add(sprint)
    db.flush()
    db.refresh(sprint)
    logger.info(f"Sprint {sprint.id} created in project {sprint.project_id}")
    return sprint


def list_sprints(db: Session, project_id: Optional[int] = None) -> List[Sprint]:
    query = db.query(Sprint)
    if project_id is not None:
        query = query.filter(Sprint.project_id == project_id)
    return query.order_by(Sprint.start_date.desc(), Sprint.id.desc()).all()


def get_sprint(db: Session, sprint_id: int) -> Optional[Sprint]:
    return db.query(Sprint).filter(Sprint.id == sprint_id).first()


def update_sprint(db: Session, sprint_id: int, sprint_in: SprintUpdate) -> Optional[Sprint]:
    sprint = get_sprint(db, sprint_id)
    if not sprint:
        return None
    changes = sprint_in.model_dump(exclude_unset=True)
    # Validate against the dates the sprint will end up with
    validate_sprint_dates(
        changes.get("start_date", sprint.start_date),
        changes.get("end_date", sprint.end_date),
    )
    return _apply(db, sprint, changes)


def delete_sprint(db: Session, sprint_id: int) -> bool:
    return _delete(db, get_sprint(db, sprint_id))

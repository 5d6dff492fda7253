from datetime import date, timedelta

import pydantic
import pytest

from devflow.enums import SprintStatus, ErrorCode
from devflow.exceptions import NotFoundError, ValidationError
from devflow.models import Sprint, Team, Project, compute_sprint_status
from devflow.schemas import (
    OrganizationCreate,
    OrganizationUpdate,
    ProjectCreate,
    ProjectUpdate,
    SprintCreate,
    SprintUpdate,
)
from devflow.utils import hierarchy_service

START = date(2024, 1, 1)
END = date(2024, 1, 14)


@pytest.mark.parametrize("today,expected", [
    (date(2023, 12, 31), SprintStatus.PLANNED),
    (START, SprintStatus.ACTIVE),
    (date(2024, 1, 7), SprintStatus.ACTIVE),
    (END, SprintStatus.ACTIVE),
    (date(2024, 1, 15), SprintStatus.COMPLETED),
])
def test_sprint_status_from_dates(today, expected):
    assert compute_sprint_status(START, END, today) == expected


def test_sprint_status_is_computed_on_read(db, sprint):
    assert sprint.status == "active"

    sprint.start_date = date.today() + timedelta(days=3)
    sprint.end_date = date.today() + timedelta(days=10)
    assert sprint.status == "planned"


def test_organization_crud_and_pagination(db):
    for name in ("Acme", "Globex", "Initech"):
        hierarchy_service.create_organization(db, OrganizationCreate(name=name))

    items, total, page, limit = hierarchy_service.list_organizations(db, page=1, limit=2)
    assert total == 3
    assert len(items) == 2
    assert (page, limit) == (1, 2)

    org = items[0]
    updated = hierarchy_service.update_organization(db, org.id, OrganizationUpdate(description="Widgets"))
    assert updated.description == "Widgets"
    assert updated.name == org.name

    assert hierarchy_service.delete_organization(db, org.id) is True
    assert hierarchy_service.delete_organization(db, org.id) is False
    assert hierarchy_service.get_organization(db, org.id) is None
    assert hierarchy_service.update_organization(db, org.id, OrganizationUpdate(name="x")) is None


def test_deleting_organization_cascades(db, sprint):
    organization_id = sprint.project.team.organization_id

    assert hierarchy_service.delete_organization(db, organization_id) is True

    db.expire_all()
    assert db.query(Team).count() == 0
    assert db.query(Project).count() == 0
    assert db.query(Sprint).count() == 0


def test_project_requires_team(db):
    with pytest.raises(NotFoundError) as exc_info:
        hierarchy_service.create_project(db, ProjectCreate(team_id=999, name="API"))
    assert exc_info.value.reason == ErrorCode.TEAM_NOT_FOUND


@pytest.mark.parametrize("url", [
    "https://github.com/acme/api",
    "https://github.com/acme/api.js/",
    None,
])
def test_project_accepts_github_urls(db, sprint, url):
    project = hierarchy_service.create_project(
        db, ProjectCreate(team_id=sprint.project.team_id, name="Web", github_repo_url=url)
    )
    assert project.github_repo_url == url


@pytest.mark.parametrize("url", [
    "https://gitlab.com/acme/api",
    "https://github.com/acme",
    "not a url",
])
def test_project_rejects_other_urls(db, sprint, url):
    with pytest.raises(ValidationError):
        hierarchy_service.create_project(
            db, ProjectCreate(team_id=sprint.project.team_id, name="Web", github_repo_url=url)
        )
    with pytest.raises(ValidationError):
        hierarchy_service.update_project(db, sprint.project_id, ProjectUpdate(github_repo_url=url))


def test_sprint_requires_project(db):
    with pytest.raises(NotFoundError) as exc_info:
        hierarchy_service.create_sprint(
            db, SprintCreate(project_id=999, name="S1", start_date=START, end_date=END)
        )
    assert exc_info.value.reason == ErrorCode.PROJECT_NOT_FOUND


@pytest.mark.parametrize("end", [START, START - timedelta(days=1)])
def test_sprint_end_must_follow_start(db, sprint, end):
    with pytest.raises(ValidationError):
        hierarchy_service.create_sprint(
            db, SprintCreate(project_id=sprint.project_id, name="S2", start_date=START, end_date=end)
        )


def test_sprint_update_checks_resulting_dates(db, sprint):
    with pytest.raises(ValidationError):
        hierarchy_service.update_sprint(db, sprint.id, SprintUpdate(end_date=sprint.start_date))

    new_end = sprint.end_date + timedelta(days=7)
    updated = hierarchy_service.update_sprint(db, sprint.id, SprintUpdate(end_date=new_end))
    assert updated.end_date == new_end


def test_list_sprints_by_project(db, sprint):
    other = hierarchy_service.create_sprint(
        db, SprintCreate(project_id=sprint.project_id, name="S0", start_date=START, end_date=END)
    )

    sprints = hierarchy_service.list_sprints(db, sprint.project_id)

    assert [s.id for s in sprints] == [sprint.id, other.id]
    assert hierarchy_service.list_sprints(db, 999) == []
    assert hierarchy_service.delete_sprint(db, other.id) is True
    assert hierarchy_service.delete_sprint(db, other.id) is False


def test_sprint_update_rejects_null_dates():
    with pytest.raises(pydantic.ValidationError):
        SprintUpdate(start_date=None)

    # Omitted fields stay unset
    assert SprintUpdate(goal=None).model_dump(exclude_unset=True) == {"goal": None}

import os

# Settings are read at import time, so the environment goes first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["REFRESH_SECRET_KEY"] = "test-refresh-secret"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ADMIN_EMAIL"] = ""
os.environ["ADMIN_PASSWORD"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from devflow.database.base import Base
from devflow.database.session import SessionLocal, engine
from devflow.models import User, Organization, Team, Project, Sprint
from devflow.enums import UserRole
from devflow.auth.auth_utils import hash_password, create_access_token
from devflow.main import app

DEFAULT_PASSWORD = "password123"


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(role: UserRole = UserRole.DEVELOPER, name: str = None, email: str = None) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"{role.value}{counter['n']}@example.com",
            name=name or f"{role.value.title()} {counter['n']}",
            hashed_password=hash_password(DEFAULT_PASSWORD),
            role=role.value,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN, name="Ada Admin")


@pytest.fixture
def team_lead(make_user):
    return make_user(UserRole.TEAM_LEAD, name="Lee Lead")


@pytest.fixture
def developer(make_user):
    return make_user(UserRole.DEVELOPER, name="Dev One")


@pytest.fixture
def other_developer(make_user):
    return make_user(UserRole.DEVELOPER, name="Dev Two")


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def lead_headers(team_lead):
    return auth_headers(team_lead)


@pytest.fixture
def dev_headers(developer):
    return auth_headers(developer)


@pytest.fixture
def sprint(db):
    """
    Acme -> Core -> API -> S1, with S1 running today.
    """
    organization = Organization(name="Acme")
    db.add(organization)
    db.flush()
    team = Team(organization_id=organization.id, name="Core")
    db.add(team)
    db.flush()
    project = Project(team_id=team.id, name="API")
    db.add(project)
    db.flush()
    today = date.today()
    sprint = Sprint(
        project_id=project.id,
        name="S1",
        start_date=today - timedelta(days=1),
        end_date=today + timedelta(days=13),
    )
    db.add(sprint)
    db.commit()
    db.refresh(sprint)
    return sprint


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client

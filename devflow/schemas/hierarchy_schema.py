from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional

from devflow.enums import TeamRole
from devflow.schemas.common_schema import reject_null

# Organizations

class OrganizationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None

class OrganizationUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value):
        return reject_null(value)

class OrganizationResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

# Teams

class TeamCreate(BaseModel):
    organization_id: int
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None

class TeamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value):
        return reject_null(value)

class TeamResponse(BaseModel):
    id: int
    organization_id: int
    name: str
    description: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class TeamMemberAdd(BaseModel):
    user_id: int
    role: TeamRole = TeamRole.DEVELOPER

class TeamMemberResponse(BaseModel):
    team_id: int
    user_id: int
    role: str
    joined_at: datetime
    name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_member(cls, member) -> "TeamMemberResponse":
        user = member.user
        return cls(
            team_id=member.team_id,
            user_id=member.user_id,
            role=member.role,
            joined_at=member.joined_at,
            name=user.name if user else None,
            email=user.email if user else None,
            avatar_url=user.avatar_url if user else None,
        )

# Projects

class ProjectCreate(BaseModel):
    team_id: int
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    github_repo_url: Optional[str] = None

class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    github_repo_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value):
        return reject_null(value)

class ProjectResponse(BaseModel):
    id: int
    team_id: int
    name: str
    description: Optional[str] = None
    github_repo_url: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

# Sprints

class SprintCreate(BaseModel):
    project_id: int
    name: str = Field(..., min_length=1, max_length=255)
    goal: Optional[str] = None
    start_date: date
    end_date: date

class SprintUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    goal: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("name", "start_date", "end_date")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)

class SprintResponse(BaseModel):
    id: int
    project_id: int
    name: str
    goal: Optional[str] = None
    start_date: date
    end_date: date
    status: str
    created_at: datetime

    class Config:
        from_attributes = True

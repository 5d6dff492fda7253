from .common_schema import Pagination
from .auth_schema import LoginRequest, SignupRequest, RefreshRequest
from .user_schema import UserCreate, UserUpdate, UserResponse, AuthPayload
from .hierarchy_schema import (
    OrganizationCreate, OrganizationUpdate, OrganizationResponse,
    TeamCreate, TeamUpdate, TeamResponse, TeamMemberAdd, TeamMemberResponse,
    ProjectCreate, ProjectUpdate, ProjectResponse,
    SprintCreate, SprintUpdate, SprintResponse,
)
from .task_schema import (
    TaskCreate, TaskUpdate, TaskStatusChange, TaskAssign, TaskFilters,
    TaskResponse, TaskStatusHistoryResponse,
)
from .comment_schema import CommentCreate, CommentUpdate, CommentResponse
from .notification_schema import NotificationResponse, NotificationCount

from enum import Enum

class UserRole(str, Enum):
    ADMIN = "admin"
    TEAM_LEAD = "team_lead"
    DEVELOPER = "developer"

    @property
    def rank(self) -> int:
        return {
            UserRole.DEVELOPER: 1,
            UserRole.TEAM_LEAD: 2,
            UserRole.ADMIN: 3,
        }[self]

class TeamRole(str, Enum):
    TEAM_LEAD = "team_lead"
    DEVELOPER = "developer"

class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    IN_REVIEW = "in_review"
    DONE = "done"

    @property
    def next_states(self):
        if self == TaskStatus.TODO:
            return [TaskStatus.IN_PROGRESS]
        if self == TaskStatus.IN_PROGRESS:
            return [TaskStatus.IN_REVIEW, TaskStatus.TODO]
        if self == TaskStatus.IN_REVIEW:
            return [TaskStatus.DONE, TaskStatus.IN_PROGRESS]
        if self == TaskStatus.DONE:
            return [TaskStatus.IN_REVIEW]
        return []

class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

class PullRequestStatus(str, Enum):
    OPEN = "open"
    MERGED = "merged"
    CLOSED = "closed"

class SprintStatus(str, Enum):
    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"

class NotificationType(str, Enum):
    TASK_ASSIGNED = "task_assigned"
    TASK_UPDATED = "task_updated"
    COMMENT_ADDED = "comment_added"
    SPRINT_STARTED = "sprint_started"

class TaskSortField(str, Enum):
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    PRIORITY = "priority"
    STATUS = "status"
    TITLE = "title"
    STORY_POINTS = "story_points"

class Capability(str, Enum):
    MANAGE_USERS = "manage_users"
    MANAGE_ORGANIZATIONS = "manage_organizations"
    MANAGE_TEAMS = "manage_teams"
    MANAGE_MEMBERS = "manage_members"
    MANAGE_PROJECTS = "manage_projects"
    MANAGE_SPRINTS = "manage_sprints"
    EDIT_COMMENT = "edit_comment"
    DELETE_COMMENT = "delete_comment"

class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"

class ErrorCode(str, Enum):
    # Generic
    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Specific causes, sent as error.details.reason
    # Auth / User
    USER_NOT_FOUND = "USER_NOT_FOUND"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_EXISTS = "EMAIL_EXISTS"

    # Hierarchy
    ORGANIZATION_NOT_FOUND = "ORGANIZATION_NOT_FOUND"
    TEAM_NOT_FOUND = "TEAM_NOT_FOUND"
    PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"
    SPRINT_NOT_FOUND = "SPRINT_NOT_FOUND"
    ALREADY_MEMBER = "ALREADY_MEMBER"

    # Tasks
    TASK_NOT_FOUND = "TASK_NOT_FOUND"
    COMMENT_NOT_FOUND = "COMMENT_NOT_FOUND"
    NOTIFICATION_NOT_FOUND = "NOTIFICATION_NOT_FOUND"

    # Business rules
    INVALID_TRANSITION = "INVALID_TRANSITION"

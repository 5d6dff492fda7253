# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Compare-and-swap attempts for a single status change
STATUS_CHANGE_MAX_ATTEMPTS = 3

# Per-user push channel, e.g. "user:42"
USER_CHANNEL_PREFIX = "user:"

GITHUB_REPO_URL_PATTERN = r"^https?://(www\.)?github\.com/[\w-]+/[\w.-]+/?$"

class ErrorMessages:
    ORGANIZATION_NOT_FOUND = "Organization not found"
    TEAM_NOT_FOUND = "Team not found"
    PROJECT_NOT_FOUND = "Project not found"
    SPRINT_NOT_FOUND = "Sprint not found"
    TASK_NOT_FOUND = "Task not found"
    COMMENT_NOT_FOUND = "Comment not found"
    USER_NOT_FOUND = "User not found"
    NOTIFICATION_NOT_FOUND = "Notification not found"
    MEMBER_NOT_FOUND = "Team member not found"
    ROUTE_NOT_FOUND = "Route not found"

    # Auth
    INVALID_CREDENTIALS = "Invalid credentials"
    INVALID_TOKEN = "Invalid or expired token"
    INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"
    NO_TOKEN = "No token provided"
    EMAIL_EXISTS = "User with this email already exists"

    # Permissions
    ACCESS_DENIED = "Insufficient permissions"
    NO_PERMISSION_EDIT_COMMENT = "Unauthorized to edit this comment"
    NO_PERMISSION_DELETE_COMMENT = "Unauthorized to delete this comment"
    CANNOT_MODIFY_SELF = "Admins cannot demote or delete themselves"
    CANNOT_CHANGE_OWN_ROLE = "Cannot change your own role"
    CANNOT_CHANGE_ADMIN_ROLE = "Cannot change admin role"
    CREATABLE_ROLES_ONLY = "Invalid role. Admin can only create team_lead or developer"
    ALREADY_TEAM_LEAD = "User is already a team lead"
    ALREADY_DEVELOPER = "User is already a developer"

    # Membership
    ALREADY_MEMBER = "User is already a team member"

    # Validation
    VALIDATION_FAILED = "Validation failed"
    INVALID_GITHUB_URL = "Invalid GitHub repository URL"
    INVALID_SPRINT_DATES = "End date must be after start date"
    RESOURCE_EXISTS = "Resource already exists"
    CONCURRENT_STATUS_CHANGE = "Task status was changed concurrently, please retry"

    INTERNAL = "Internal server error"

class SuccessMessages:
    TASK_CREATED = "Task created successfully"
    TASK_UPDATED = "Task updated successfully"
    TASK_DELETED = "Task deleted successfully"
    TASK_STATUS_UPDATED = "Task status updated successfully"
    TASK_ASSIGNED = "Task assigned successfully"
    COMMENT_CREATED = "Comment created successfully"
    COMMENT_UPDATED = "Comment updated successfully"
    COMMENT_DELETED = "Comment deleted successfully"
    ORGANIZATION_CREATED = "Organization created successfully"
    ORGANIZATION_UPDATED = "Organization updated successfully"
    ORGANIZATION_DELETED = "Organization deleted successfully"
    TEAM_CREATED = "Team created successfully"
    TEAM_UPDATED = "Team updated successfully"
    TEAM_DELETED = "Team deleted successfully"
    MEMBER_ADDED = "Team member added successfully"
    MEMBER_REMOVED = "Team member removed successfully"
    PROJECT_CREATED = "Project created successfully"
    PROJECT_UPDATED = "Project updated successfully"
    PROJECT_DELETED = "Project deleted successfully"
    SPRINT_CREATED = "Sprint created successfully"
    SPRINT_UPDATED = "Sprint updated successfully"
    SPRINT_DELETED = "Sprint deleted successfully"
    NOTIFICATION_READ = "Notification marked as read"
    NOTIFICATIONS_READ = "All notifications marked as read"
    NOTIFICATION_DELETED = "Notification deleted successfully"
    USER_CREATED = "User created successfully"
    USER_UPDATED = "User updated successfully"
    USER_DELETED = "User deleted successfully"
    USER_PROMOTED = "User promoted to team lead"
    USER_DEMOTED = "User demoted to developer"
    SIGNUP = "User created successfully"
    LOGIN = "Login successful"
    TOKEN_REFRESHED = "Token refreshed successfully"

from fastapi import Depends

from devflow.models import User, Comment
from devflow.enums import Capability, UserRole
from devflow.constants import ErrorMessages
from devflow.exceptions import raise_forbidden
from devflow.auth.dependencies import get_current_user

# Roles granted each capability outright
ROLE_POLICY = {
    Capability.MANAGE_USERS: {UserRole.ADMIN},
    Capability.MANAGE_ORGANIZATIONS: {UserRole.ADMIN},
    Capability.MANAGE_TEAMS: {UserRole.ADMIN, UserRole.TEAM_LEAD},
    Capability.MANAGE_MEMBERS: {UserRole.ADMIN, UserRole.TEAM_LEAD},
    Capability.MANAGE_PROJECTS: {UserRole.ADMIN, UserRole.TEAM_LEAD},
    Capability.MANAGE_SPRINTS: {UserRole.ADMIN, UserRole.TEAM_LEAD},
    Capability.EDIT_COMMENT: {UserRole.ADMIN},
    Capability.DELETE_COMMENT: {UserRole.ADMIN},
}

# Capabilities also granted to the owner of the resource
OWNER_CAPABILITIES = {Capability.EDIT_COMMENT, Capability.DELETE_COMMENT}

DENIAL_MESSAGES = {
    Capability.EDIT_COMMENT: ErrorMessages.NO_PERMISSION_EDIT_COMMENT,
    Capability.DELETE_COMMENT: ErrorMessages.NO_PERMISSION_DELETE_COMMENT,
}


def _role_of(user: User):
    try:
        return UserRole(user.role)
    except ValueError:
        return None


def has_role_at_least(user: User, role: UserRole) -> bool:
    """
    Checks the role hierarchy admin > team_lead > developer.
    """
    user_role = _role_of(user)
    return user_role is not None and user_role.rank >= role.rank


def is_owner(user: User, resource) -> bool:
    if isinstance(resource, Comment):
        return resource.user_id == user.id
    return False


def can(user: User, capability: Capability, resource=None) -> bool:
    """
    Centralized permission check.

    Args:
        user: The user requesting access
        capability: What the user wants to do
        resource: The target instance, when ownership matters

    Returns:
        bool: True if permitted
    """
    if _role_of(user) in ROLE_POLICY.get(capability, set()):
        return True
    if capability in OWNER_CAPABILITIES and resource is not None:
        return is_owner(user, resource)
    return False


def authorize(user: User, capability: Capability, resource=None):
    """
    Same as can() but raises ForbiddenError on denial.
    """
    if not can(user, capability, resource):
        raise_forbidden(DENIAL_MESSAGES.get(capability, ErrorMessages.ACCESS_DENIED))
    return True


def require_capability(capability: Capability):
    """
    Dependency factory to require a role-based capability.

    Args:
        capability: The capability to require

    Returns:
        function: Dependency function that checks the current user
    """
    def checker(user: User = Depends(get_current_user)):
        authorize(user, capability)
        return user
    return checker

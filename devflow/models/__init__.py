from devflow.database.base import Base
from .user import User
from .organization import Organization
from .team import Team, TeamMember
from .project import Project
from .sprint import Sprint, compute_sprint_status
from .task import Task, TaskStatusHistory
from .comment import Comment
from .notification import Notification

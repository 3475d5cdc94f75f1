"""
SQLModel table models.

Importing this package registers every table on ``Base.metadata``.
"""

from .boq import BoqItem
from .design_files import DesignComment, DesignFile
from .notifications import Notification
from .payments import Invoice, Payment
from .projects import Project, ProjectMember
from .rbac import Permission, Role, RolePermission
from .snags import Snag, SnagHistory
from .tasks import ProjectStep, ProjectStepTask, TaskActivity
from .updates import ProgressUpdate
from .users import AuthSession, User

__all__ = [
    "AuthSession",
    "BoqItem",
    "DesignComment",
    "DesignFile",
    "Invoice",
    "Notification",
    "Payment",
    "Permission",
    "ProgressUpdate",
    "Project",
    "ProjectMember",
    "ProjectStep",
    "ProjectStepTask",
    "Role",
    "RolePermission",
    "Snag",
    "SnagHistory",
    "TaskActivity",
    "User",
]

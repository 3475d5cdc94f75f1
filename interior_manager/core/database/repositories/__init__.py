"""
Repositories: the data access layer, one per aggregate.
"""

from .base import AsyncBaseRepository, QueryBuilder, SQLModelRepository
from .boq import BoqRepository
from .design_files import DesignCommentRepository, DesignFileRepository
from .notifications import NotificationRepository
from .payments import InvoiceRepository, PaymentRepository
from .projects import ProjectMemberRepository, ProjectRepository
from .rbac import PermissionRepository, RoleRepository
from .snags import SnagHistoryRepository, SnagRepository
from .tasks import ProjectStepRepository, TaskActivityRepository, TaskRepository
from .updates import ProgressUpdateRepository
from .users import AuthSessionRepository, UserRepository

__all__ = [
    "AsyncBaseRepository",
    "AuthSessionRepository",
    "BoqRepository",
    "DesignCommentRepository",
    "DesignFileRepository",
    "InvoiceRepository",
    "NotificationRepository",
    "PaymentRepository",
    "PermissionRepository",
    "ProgressUpdateRepository",
    "ProjectMemberRepository",
    "ProjectRepository",
    "ProjectStepRepository",
    "QueryBuilder",
    "RoleRepository",
    "SQLModelRepository",
    "SnagHistoryRepository",
    "SnagRepository",
    "TaskActivityRepository",
    "TaskRepository",
    "UserRepository",
]

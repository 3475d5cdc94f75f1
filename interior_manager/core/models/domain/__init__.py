"""Domain-level value types (enums) for Interior Manager."""

from .enums import (
    ApprovalStatus,
    BoqBulkAction,
    BoqStatus,
    InvoiceStatus,
    NotificationType,
    PaymentMethod,
    PermissionNode,
    ProjectStatus,
    SnagAction,
    SnagPriority,
    SnagStatus,
    StepStatus,
    TaskStatus,
    UserRole,
    WorkflowStage,
)

__all__ = [
    "ApprovalStatus",
    "BoqBulkAction",
    "BoqStatus",
    "InvoiceStatus",
    "NotificationType",
    "PaymentMethod",
    "PermissionNode",
    "ProjectStatus",
    "SnagAction",
    "SnagPriority",
    "SnagStatus",
    "StepStatus",
    "TaskStatus",
    "UserRole",
    "WorkflowStage",
]

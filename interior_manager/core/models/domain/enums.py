"""Domain enums shared by entities, I/O schemas and services."""

from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """Built-in account role. ``admin`` bypasses every permission check."""

    admin = "admin"
    project_manager = "project_manager"
    employee = "employee"
    client = "client"


class ProjectStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    on_hold = "on_hold"
    completed = "completed"


class WorkflowStage(str, Enum):
    """Stage of the project pipeline; also used as a deep-link ``stage`` parameter."""

    design = "design"
    boq = "boq"
    orders = "orders"
    work_progress = "work_progress"
    snag = "snag"
    handover = "handover"


class StepStatus(str, Enum):
    todo = "todo"
    in_progress = "in_progress"
    done = "done"


class TaskStatus(str, Enum):
    todo = "todo"
    in_progress = "in_progress"
    blocked = "blocked"
    done = "done"


class TaskActivityType(str, Enum):
    created = "created"
    status_changed = "status_changed"
    assigned = "assigned"
    priority_changed = "priority_changed"
    commented = "commented"
    updated = "updated"
    due_date_changed = "due_date_changed"


class BoqStatus(str, Enum):
    draft = "draft"
    confirmed = "confirmed"
    completed = "completed"


class BoqBulkAction(str, Enum):
    update_status = "update_status"
    delete = "delete"


class ApprovalStatus(str, Enum):
    """Review state of an uploaded design file."""

    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    needs_changes = "needs_changes"


class DesignBulkAction(str, Enum):
    approve = "approve"
    reject = "reject"


class SnagPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class SnagStatus(str, Enum):
    open = "open"
    assigned = "assigned"
    resolved = "resolved"
    verified = "verified"
    closed = "closed"


class SnagAction(str, Enum):
    """Workflow transitions accepted by the snag update endpoint."""

    assign = "assign"
    resolve = "resolve"
    verify = "verify"
    close = "close"
    reopen = "reopen"


class InvoiceStatus(str, Enum):
    draft = "draft"
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    paid = "paid"


class PaymentMethod(str, Enum):
    bank_transfer = "bank_transfer"
    cheque = "cheque"
    cash = "cash"
    upi = "upi"


class NotificationType(str, Enum):
    """Kinds of in-app and push notifications."""

    task_assigned = "task_assigned"
    project_update = "project_update"
    mention = "mention"
    general = "general"
    comment_added = "comment_added"
    design_approved = "design_approved"
    design_rejected = "design_rejected"
    design_uploaded = "design_uploaded"
    snag_created = "snag_created"
    snag_assigned = "snag_assigned"
    snag_resolved = "snag_resolved"
    snag_verified = "snag_verified"
    invoice_created = "invoice_created"
    invoice_approved = "invoice_approved"
    invoice_rejected = "invoice_rejected"
    payment_recorded = "payment_recorded"


class PermissionNode(str, Enum):
    """
    Permission codes checked by the RBAC service.

    A role may also hold a wildcard code such as ``boq.*`` which grants every
    node in that module.
    """

    # Projects
    projects_view = "projects.view"
    projects_create = "projects.create"
    projects_edit = "projects.edit"
    projects_delete = "projects.delete"
    projects_assign = "projects.assign"
    projects_view_budget = "projects.view_budget"

    # Designs
    designs_view = "designs.view"
    designs_upload = "designs.upload"
    designs_delete = "designs.delete"
    designs_approve = "designs.approve"
    designs_freeze = "designs.freeze"
    designs_comment = "designs.comment"

    # BOQ
    boq_view = "boq.view"
    boq_create = "boq.create"
    boq_edit = "boq.edit"
    boq_delete = "boq.delete"
    boq_import = "boq.import"

    # Finance
    payments_view = "payments.view"
    payments_create = "payments.create"
    payments_edit = "payments.edit"
    payments_delete = "payments.delete"
    invoices_view = "invoices.view"
    invoices_create = "invoices.create"

    # Snags
    snags_view = "snags.view"
    snags_create = "snags.create"
    snags_resolve = "snags.resolve"
    snags_verify = "snags.verify"

    # Tasks
    tasks_view = "tasks.view"
    tasks_create = "tasks.create"
    tasks_edit = "tasks.edit"
    tasks_bulk = "tasks.bulk"

    # Users
    users_view = "users.view"
    users_create = "users.create"
    users_edit = "users.edit"
    users_delete = "users.delete"
    users_manage_roles = "users.manage_roles"

    # Settings
    settings_view = "settings.view"
    settings_edit = "settings.edit"

    @property
    def module(self) -> str:
        return self.value.split(".", 1)[0]

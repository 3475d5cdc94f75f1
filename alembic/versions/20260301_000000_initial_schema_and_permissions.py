"""Initial schema and permission catalog for Interior Manager

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

This is the initial migration that creates all tables and seeds the
permission catalog. This includes:
- Accounts (users, auth sessions) and RBAC (roles, permissions, grants)
- Projects and project members
- Project steps, tasks and task activity
- Project progress updates
- BOQ items, design files and comments, snags and snag history
- Invoices, payments and notifications

Revision format: YYYYMMDD_HHMMSS_description

"""

import uuid
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PERMISSION_CODES = [
    "projects.view",
    "projects.create",
    "projects.edit",
    "projects.delete",
    "projects.assign",
    "projects.view_budget",
    "designs.view",
    "designs.upload",
    "designs.delete",
    "designs.approve",
    "designs.freeze",
    "designs.comment",
    "boq.view",
    "boq.create",
    "boq.edit",
    "boq.delete",
    "boq.import",
    "payments.view",
    "payments.create",
    "payments.edit",
    "payments.delete",
    "invoices.view",
    "invoices.create",
    "snags.view",
    "snags.create",
    "snags.resolve",
    "snags.verify",
    "tasks.view",
    "tasks.create",
    "tasks.edit",
    "tasks.bulk",
    "users.view",
    "users.create",
    "users.edit",
    "users.delete",
    "users.manage_roles",
    "settings.view",
    "settings.edit",
]


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), nullable=False)


def upgrade() -> None:
    """Create all tables and seed the permission catalog."""

    # RBAC
    op.create_table(
        "roles",
        _id(),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
        sa.Index("ix_roles_name", "name"),
    )

    permissions = op.create_table(
        "permissions",
        _id(),
        sa.Column("code", sa.String(64), nullable=False),
        sa.Column("module", sa.String(32), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
        sa.Index("ix_permissions_code", "code"),
        sa.Index("ix_permissions_module", "module"),
    )

    op.create_table(
        "role_permissions",
        _id(),
        sa.Column("role_id", sa.String(36), sa.ForeignKey("roles.id"), nullable=False),
        sa.Column("permission_id", sa.String(36), sa.ForeignKey("permissions.id"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
        sa.Index("ix_role_permissions_role_id", "role_id"),
        sa.Index("ix_role_permissions_permission_id", "permission_id"),
    )

    # Accounts
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(64), nullable=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(32), nullable=False),
        sa.Column("role_id", sa.String(36), sa.ForeignKey("roles.id"), nullable=True),
        sa.Column("phone_number", sa.String(32), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("password_salt", sa.String(64), nullable=False),
        sa.Column("password_changed", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_users_email", "email", unique=True),
        sa.Index("ix_users_username", "username", unique=True),
        sa.Index("ix_users_role", "role"),
    )

    op.create_table(
        "auth_sessions",
        _id(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("token_hash", sa.String(64), nullable=False),
        sa.Column("user_agent", sa.String(512), nullable=True),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("last_seen_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_auth_sessions_user_id", "user_id"),
        sa.Index("ix_auth_sessions_token_hash", "token_hash", unique=True),
        sa.Index("ix_auth_sessions_expires_at", "expires_at"),
    )

    # Projects
    op.create_table(
        "projects",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("customer_name", sa.String(255), nullable=True),
        sa.Column("phone_number", sa.String(32), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("property_type", sa.String(64), nullable=True),
        sa.Column("area_sqft", sa.Float(), nullable=True),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("workflow_stage", sa.String(32), nullable=True),
        sa.Column("project_budget", sa.Float(), nullable=True),
        sa.Column("project_notes", sa.Text(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("estimated_completion_date", sa.Date(), nullable=True),
        sa.Column("actual_completion_date", sa.Date(), nullable=True),
        sa.Column("assigned_employee_id", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_projects_title", "title"),
        sa.Index("ix_projects_status", "status"),
        sa.Index("ix_projects_assigned_employee_id", "assigned_employee_id"),
        sa.Index("ix_projects_created_by", "created_by"),
        sa.Index("ix_projects_created_at", "created_at"),
    )

    op.create_table(
        "project_members",
        _id(),
        sa.Column("project_id", sa.String(36), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("permissions", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("project_id", "user_id", name="uq_project_member"),
        sa.Index("ix_project_members_project_id", "project_id"),
        sa.Index("ix_project_members_user_id", "user_id"),
    )

    # Steps and tasks
    op.create_table(
        "project_steps",
        _id(),
        sa.Column("project_id", sa.String(36), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("stage", sa.String(32), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_project_steps_project_id", "project_id"),
        sa.Index("ix_project_steps_stage", "stage"),
    )

    op.create_table(
        "project_step_tasks",
        _id(),
        sa.Column("step_id", sa.String(36), sa.ForeignKey("project_steps.id"), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("assigned_to", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("estimated_completion_date", sa.Date(), nullable=True),
        sa.Column("completion_description", sa.Text(), nullable=True),
        sa.Column("completion_photos", sa.JSON(), nullable=False),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_project_step_tasks_step_id", "step_id"),
        sa.Index("ix_project_step_tasks_status", "status"),
        sa.Index("ix_project_step_tasks_assigned_to", "assigned_to"),
        sa.Index("ix_project_step_tasks_created_at", "created_at"),
    )

    op.create_table(
        "task_activity",
        _id(),
        sa.Column("task_id", sa.String(36), sa.ForeignKey("project_step_tasks.id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("activity_type", sa.String(50), nullable=False),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_task_activity_task_id", "task_id"),
        sa.Index("ix_task_activity_user_id", "user_id"),
        sa.Index("ix_task_activity_created_at", "created_at"),
    )

    # Progress updates
    op.create_table(
        "project_updates",
        _id(),
        sa.Column("project_id", sa.String(36), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("update_date", sa.Date(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("photos", sa.JSON(), nullable=False),
        sa.Column("audio_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_project_updates_project_id", "project_id"),
        sa.Index("ix_project_updates_update_date", "update_date"),
    )

    # BOQ
    op.create_table(
        "boq_items",
        _id(),
        sa.Column("project_id", sa.String(36), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("category", sa.String(255), nullable=True),
        sa.Column("sub_category", sa.String(255), nullable=True),
        sa.Column("item_name", sa.String(500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("unit", sa.String(32), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("rate", sa.Float(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("item_type", sa.String(32), nullable=False),
        sa.Column("source", sa.String(32), nullable=False),
        sa.Column("order_status", sa.String(32), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_boq_items_project_id", "project_id"),
        sa.Index("ix_boq_items_category", "category"),
        sa.Index("ix_boq_items_status", "status"),
    )

    # Design files
    op.create_table(
        "design_files",
        _id(),
        sa.Column("project_id", sa.String(36), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_url", sa.Text(), nullable=False),
        sa.Column("file_type", sa.String(64), nullable=True),
        sa.Column("version_number", sa.Integer(), nullable=False),
        sa.Column("parent_design_id", sa.String(36), nullable=True),
        sa.Column("uploaded_by", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("approval_status", sa.String(32), nullable=False),
        sa.Column("admin_comments", sa.Text(), nullable=True),
        sa.Column("approved_by", sa.String(36), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("is_current_approved", sa.Boolean(), nullable=False),
        sa.Column("is_frozen", sa.Boolean(), nullable=False),
        sa.Column("frozen_at", sa.DateTime(), nullable=True),
        sa.Column("frozen_by", sa.String(36), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_design_files_project_id", "project_id"),
        sa.Index("ix_design_files_file_name", "file_name"),
        sa.Index("ix_design_files_approval_status", "approval_status"),
        sa.Index("ix_design_files_created_at", "created_at"),
    )

    op.create_table(
        "design_comments",
        _id(),
        sa.Column("design_file_id", sa.String(36), sa.ForeignKey("design_files.id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_design_comments_design_file_id", "design_file_id"),
    )

    # Snags
    op.create_table(
        "snags",
        _id(),
        sa.Column("project_id", sa.String(36), sa.ForeignKey("projects.id"), nullable=True),
        sa.Column("site_name", sa.String(255), nullable=True),
        sa.Column("client_name", sa.String(255), nullable=True),
        sa.Column("customer_phone", sa.String(32), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("category", sa.String(64), nullable=True),
        sa.Column("priority", sa.String(16), nullable=False),
        sa.Column("photos", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("assigned_to_user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("resolved_photos", sa.JSON(), nullable=False),
        sa.Column("resolved_description", sa.Text(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(), nullable=True),
        sa.Column("closed_at", sa.DateTime(), nullable=True),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_snags_project_id", "project_id"),
        sa.Index("ix_snags_status", "status"),
        sa.Index("ix_snags_assigned_to_user_id", "assigned_to_user_id"),
        sa.Index("ix_snags_created_by", "created_by"),
        sa.Index("ix_snags_created_at", "created_at"),
    )

    op.create_table(
        "snag_history",
        _id(),
        sa.Column("snag_id", sa.String(36), sa.ForeignKey("snags.id"), nullable=False),
        sa.Column("action", sa.String(16), nullable=False),
        sa.Column("from_status", sa.String(16), nullable=True),
        sa.Column("to_status", sa.String(16), nullable=False),
        sa.Column("actor_id", sa.String(36), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_snag_history_snag_id", "snag_id"),
    )

    # Finance
    op.create_table(
        "invoices",
        _id(),
        sa.Column("project_id", sa.String(36), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("invoice_number", sa.String(64), nullable=False),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("project_id", "invoice_number", name="uq_invoice_number"),
        sa.Index("ix_invoices_project_id", "project_id"),
        sa.Index("ix_invoices_status", "status"),
    )

    op.create_table(
        "payments",
        _id(),
        sa.Column("project_id", sa.String(36), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("invoice_id", sa.String(36), sa.ForeignKey("invoices.id"), nullable=True),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("payment_method", sa.String(16), nullable=True),
        sa.Column("reference_number", sa.String(128), nullable=True),
        sa.Column("payment_proof_url", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_payments_project_id", "project_id"),
        sa.Index("ix_payments_invoice_id", "invoice_id"),
        sa.Index("ix_payments_payment_date", "payment_date"),
    )

    # Notifications
    op.create_table(
        "notifications",
        _id(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("related_id", sa.String(36), nullable=True),
        sa.Column("related_type", sa.String(32), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_notifications_user_id", "user_id"),
        sa.Index("ix_notifications_is_read", "is_read"),
        sa.Index("ix_notifications_created_at", "created_at"),
    )

    # Seed the permission catalog
    op.bulk_insert(
        permissions,
        [
            {
                "id": str(uuid.uuid4()),
                "code": code,
                "module": code.split(".", 1)[0],
                "description": code.replace(".", " ").replace("_", " ").capitalize(),
            }
            for code in PERMISSION_CODES
        ],
    )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("notifications")
    op.drop_table("payments")
    op.drop_table("invoices")
    op.drop_table("snag_history")
    op.drop_table("snags")
    op.drop_table("design_comments")
    op.drop_table("design_files")
    op.drop_table("boq_items")
    op.drop_table("project_updates")
    op.drop_table("task_activity")
    op.drop_table("project_step_tasks")
    op.drop_table("project_steps")
    op.drop_table("project_members")
    op.drop_table("projects")
    op.drop_table("auth_sessions")
    op.drop_table("users")
    op.drop_table("role_permissions")
    op.drop_table("permissions")
    op.drop_table("roles")

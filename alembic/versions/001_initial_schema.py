"""Initial schema — lead allocation tables.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Sales employees
    op.create_table(
        "sales_employees",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("employee_code", sa.String(50), unique=True, nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(200), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("round_robin_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("daily_lead_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_lead_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("last_assigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("idx_sales_employees_active", "sales_employees", ["is_active"])

    # Product groups
    op.create_table(
        "product_groups",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(50), unique=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )

    # Specializations
    op.create_table(
        "sales_specializations",
        sa.Column(
            "sales_employee_id",
            sa.Integer,
            sa.ForeignKey("sales_employees.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "product_group_id",
            sa.Integer,
            sa.ForeignKey("product_groups.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("is_primary", sa.Boolean, nullable=False, server_default=sa.false()),
    )
    op.create_index(
        "idx_specializations_product_group", "sales_specializations", ["product_group_id"]
    )

    # Allocation rules
    op.create_table(
        "sales_allocation_rules",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("rule_code", sa.String(50), unique=True, nullable=False),
        sa.Column("customer_group", sa.String(100), nullable=True),
        sa.Column("product_group_ids", ARRAY(sa.Integer), nullable=False, server_default="{}"),
        sa.Column("assigned_sales_ids", ARRAY(sa.Integer), nullable=False, server_default="{}"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )

    # Leads
    op.create_table(
        "leads",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("email", sa.String(200), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="new"),
        sa.Column("customer_group", sa.String(100), nullable=True),
        sa.Column(
            "interested_product_group_id",
            sa.Integer,
            sa.ForeignKey("product_groups.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "assigned_sales_id", sa.Integer, sa.ForeignKey("sales_employees.id"), nullable=True
        ),
        sa.Column("assignment_method", sa.String(20), nullable=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("idx_leads_assigned_sales", "leads", ["assigned_sales_id"])
    op.create_index("idx_leads_status", "leads", ["status"])

    # Assignment logs
    op.create_table(
        "assignment_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "lead_id", sa.Integer, sa.ForeignKey("leads.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column(
            "sales_employee_id", sa.Integer, sa.ForeignKey("sales_employees.id"), nullable=True
        ),
        sa.Column("method", sa.String(20), nullable=True),
        sa.Column("reason", sa.Text, nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("idx_assignment_logs_lead", "assignment_logs", ["lead_id"])


def downgrade() -> None:
    op.drop_table("assignment_logs")
    op.drop_table("leads")
    op.drop_table("sales_allocation_rules")
    op.drop_table("sales_specializations")
    op.drop_table("product_groups")
    op.drop_table("sales_employees")

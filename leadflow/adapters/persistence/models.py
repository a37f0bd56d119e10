"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leadflow.adapters.persistence.database import Base


class SalesEmployeeModel(Base):
    __tablename__ = "sales_employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    round_robin_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    daily_lead_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_lead_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_assigned_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    specializations: Mapped[list["SpecializationModel"]] = relationship(
        back_populates="employee", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("idx_sales_employees_active", "is_active"),)


class ProductGroupModel(Base):
    __tablename__ = "product_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class SpecializationModel(Base):
    __tablename__ = "sales_specializations"

    sales_employee_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sales_employees.id", ondelete="CASCADE"), primary_key=True
    )
    product_group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("product_groups.id", ondelete="CASCADE"), primary_key=True
    )
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    employee: Mapped["SalesEmployeeModel"] = relationship(back_populates="specializations")

    __table_args__ = (Index("idx_specializations_product_group", "product_group_id"),)


class AllocationRuleModel(Base):
    __tablename__ = "sales_allocation_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    rule_code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    customer_group: Mapped[str | None] = mapped_column(String(100), nullable=True)
    product_group_ids: Mapped[list[int]] = mapped_column(
        ARRAY(Integer), nullable=False, default=list
    )
    assigned_sales_ids: Mapped[list[int]] = mapped_column(
        ARRAY(Integer), nullable=False, default=list
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )


class LeadModel(Base):
    __tablename__ = "leads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="new")
    customer_group: Mapped[str | None] = mapped_column(String(100), nullable=True)
    interested_product_group_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("product_groups.id", ondelete="SET NULL"), nullable=True
    )
    assigned_sales_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("sales_employees.id"), nullable=True
    )
    assignment_method: Mapped[str | None] = mapped_column(String(20), nullable=True)
    assigned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    sales_employee: Mapped["SalesEmployeeModel | None"] = relationship()
    product_group: Mapped["ProductGroupModel | None"] = relationship()

    __table_args__ = (
        Index("idx_leads_assigned_sales", "assigned_sales_id"),
        Index("idx_leads_status", "status"),
    )


class AssignmentLogModel(Base):
    __tablename__ = "assignment_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lead_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("leads.id", ondelete="CASCADE"), nullable=False
    )
    sales_employee_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("sales_employees.id"), nullable=True
    )
    method: Mapped[str | None] = mapped_column(String(20), nullable=True)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (Index("idx_assignment_logs_lead", "lead_id"),)

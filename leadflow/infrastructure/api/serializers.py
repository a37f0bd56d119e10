"""Entity → API response dict conversion."""

from __future__ import annotations

from datetime import datetime

from leadflow.domain.entities.allocation_rule import AllocationRule
from leadflow.domain.entities.assignment import Assignment
from leadflow.domain.entities.lead import Lead
from leadflow.domain.entities.product_group import ProductGroup
from leadflow.domain.entities.sales_employee import SalesEmployee
from leadflow.domain.entities.specialization import Specialization


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def serialize_lead(lead: Lead) -> dict:
    return {
        "id": lead.id,
        "full_name": lead.full_name,
        "phone": lead.phone,
        "email": lead.email,
        "status": lead.status.value,
        "customer_group": lead.customer_group.value if lead.customer_group else None,
        "interested_product_group_id": lead.interested_product_group_id,
        "assigned_sales_id": lead.assigned_sales_id,
        "assignment_method": lead.assignment_method.value if lead.assignment_method else None,
        "assigned_at": _iso(lead.assigned_at),
        "created_at": _iso(lead.created_at),
    }


def serialize_assignment(a: Assignment) -> dict:
    return {
        "lead_id": a.lead_id,
        "sales_employee_id": a.sales_employee_id,
        "method": a.method.value,
        "assigned_at": _iso(a.assigned_at),
        "already_assigned": a.already_assigned,
    }


def serialize_employee(e: SalesEmployee) -> dict:
    return {
        "id": e.id,
        "employee_code": e.employee_code,
        "full_name": e.full_name,
        "email": e.email,
        "phone": e.phone,
        "is_active": e.is_active,
        "round_robin_order": e.round_robin_order,
        "daily_lead_count": e.today_count,
        "total_lead_count": e.total_count,
        "last_assigned_at": _iso(e.last_assigned_at),
    }


def serialize_rule(r: AllocationRule) -> dict:
    return {
        "id": r.id,
        "rule_code": r.rule_code,
        "customer_group": r.customer_group.value if r.customer_group else None,
        "product_group_ids": list(r.product_group_ids),
        "assigned_sales_ids": list(r.assigned_sales_ids),
        "is_active": r.is_active,
        "created_at": _iso(r.created_at),
    }


def serialize_product_group(g: ProductGroup) -> dict:
    return {"id": g.id, "code": g.code, "name": g.name, "is_active": g.is_active}


def serialize_specialization(s: Specialization) -> dict:
    return {
        "sales_employee_id": s.sales_employee_id,
        "product_group_id": s.product_group_id,
        "is_primary": s.is_primary,
    }

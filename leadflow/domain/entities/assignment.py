"""Assignment — the outcome of allocating a lead to a sales employee."""

from dataclasses import dataclass
from datetime import datetime

from leadflow.domain.value_objects.enums import AssignmentMethod


@dataclass
class Assignment:
    lead_id: int
    sales_employee_id: int
    method: AssignmentMethod
    assigned_at: datetime | None = None
    already_assigned: bool = False


@dataclass
class AssignmentLog:
    id: int | None
    lead_id: int
    sales_employee_id: int | None
    method: AssignmentMethod | None
    reason: str | None = None
    created_at: datetime | None = None

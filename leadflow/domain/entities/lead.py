"""Lead entity — a prospective customer awaiting sales contact."""

from dataclasses import dataclass
from datetime import datetime

from leadflow.domain.value_objects.enums import (
    AssignmentMethod,
    CustomerGroup,
    LeadStatus,
)


@dataclass
class Lead:
    id: int | None
    full_name: str
    phone: str | None = None
    email: str | None = None
    status: LeadStatus = LeadStatus.NEW
    customer_group: CustomerGroup | None = None
    interested_product_group_id: int | None = None
    assigned_sales_id: int | None = None
    assignment_method: AssignmentMethod | None = None
    assigned_at: datetime | None = None
    created_at: datetime | None = None

    def is_assigned(self) -> bool:
        return self.assigned_sales_id is not None

"""SalesEmployee entity — a staff member who can be assigned leads."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class SalesEmployee:
    id: int | None
    employee_code: str
    full_name: str
    email: str | None = None
    phone: str | None = None
    is_active: bool = True
    round_robin_order: int = 0
    today_count: int = 0
    total_count: int = 0
    last_assigned_at: datetime | None = None

    def rotation_key(self) -> tuple:
        """Sort key for fair rotation: order, longest idle first, then id.

        Employees never assigned (``last_assigned_at is None``) sort before
        any timestamp.
        """
        never_assigned = self.last_assigned_at is None
        return (
            self.round_robin_order,
            not never_assigned,
            self.last_assigned_at or datetime.min,
            self.id if self.id is not None else 0,
        )

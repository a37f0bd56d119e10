"""RoundRobinPolicy — deterministic fallback selection over active employees."""

from __future__ import annotations

from leadflow.domain.entities.sales_employee import SalesEmployee
from leadflow.domain.errors import NoEligibleAssignee


def rotation_order(employees: list[SalesEmployee]) -> list[SalesEmployee]:
    """Active employees sorted by (round_robin_order, last_assigned_at nulls first, id)."""
    return sorted((e for e in employees if e.is_active), key=lambda e: e.rotation_key())


def next_in_rotation(active_employees: list[SalesEmployee]) -> SalesEmployee:
    """Pick the next employee in the rotation.

    Employees never assigned come before anyone with a timestamp, and the
    least recently assigned comes next. Since the executor stamps
    ``last_assigned_at`` on every assignment, N consecutive calls over N
    employees with the same order key visit each employee exactly once.

    Raises:
        NoEligibleAssignee: if there is no active employee.
    """
    ordered = rotation_order(active_employees)
    if not ordered:
        raise NoEligibleAssignee()
    return ordered[0]

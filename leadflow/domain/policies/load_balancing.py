"""LoadBalancingPolicy — least-loaded pick among equally eligible employees."""

from __future__ import annotations

from leadflow.domain.entities.sales_employee import SalesEmployee
from leadflow.domain.errors import NoEligibleAssignee
from leadflow.domain.policies.round_robin import next_in_rotation


def pick(candidates: list[SalesEmployee]) -> SalesEmployee:
    """Choose one employee from a non-empty candidate list.

    1. Keep the employees with the minimal ``today_count``.
    2. Among them, apply the round-robin ordering (``round_robin_order``,
       then oldest ``last_assigned_at``, then id).

    Raises:
        NoEligibleAssignee: if candidates is empty.
    """
    if not candidates:
        raise NoEligibleAssignee()

    lowest = min(c.today_count for c in candidates)
    least_loaded = [c for c in candidates if c.today_count == lowest]
    return next_in_rotation(least_loaded)

"""SpecializationFillPolicy — infers a rule's employees from specializations."""

from __future__ import annotations

from leadflow.domain.entities.allocation_rule import AllocationRule
from leadflow.domain.entities.sales_employee import SalesEmployee
from leadflow.domain.entities.specialization import Specialization


def employees_for_rule(
    rule: AllocationRule,
    specializations: list[Specialization],
    employees: list[SalesEmployee],
) -> list[int] | None:
    """Return the deduplicated set of active specialists for the rule's product groups.

    Returns None when the rule references no product groups (nothing to
    infer from, rule must be left unchanged).
    """
    if not rule.product_group_ids:
        return None

    active_ids = {e.id for e in employees if e.is_active}
    wanted = set(rule.product_group_ids)
    found = {
        s.sales_employee_id
        for s in specializations
        if s.product_group_id in wanted and s.sales_employee_id in active_ids
    }
    return sorted(found)

"""AutoFillRuleUseCase — fill rules' employees from product-group specializations."""

from __future__ import annotations

import logging

from leadflow.application.ports.employee_repo import EmployeeRepository
from leadflow.application.ports.rule_repo import RuleRepository
from leadflow.application.ports.specialization_repo import SpecializationRepository
from leadflow.domain.entities.allocation_rule import AllocationRule
from leadflow.domain.policies.specialization_fill import employees_for_rule

logger = logging.getLogger(__name__)


class AutoFillRuleUseCase:
    def __init__(
        self,
        rule_repo: RuleRepository,
        specialization_repo: SpecializationRepository,
        employee_repo: EmployeeRepository,
    ):
        self._rules = rule_repo
        self._specializations = specialization_repo
        self._employees = employee_repo

    async def execute(self, rule_id: int) -> AllocationRule:
        """Replace one rule's assigned employees with its product-group specialists.

        Raises:
            LookupError: if the rule does not exist.
        """
        rule = await self._rules.get_by_id(rule_id)
        if rule is None:
            raise LookupError(f"Allocation rule {rule_id} not found")
        await self._fill(rule, await self._employees.get_active())
        return rule

    async def execute_all(self) -> int:
        """Auto-fill every rule. Returns the number of rules updated."""
        employees = await self._employees.get_active()
        updated = 0
        for rule in await self._rules.get_all():
            if await self._fill(rule, employees):
                updated += 1
        logger.info("Auto-filled %d allocation rule(s)", updated)
        return updated

    async def _fill(self, rule: AllocationRule, employees) -> bool:
        if not rule.product_group_ids:
            return False
        specializations = await self._specializations.get_by_product_groups(
            rule.product_group_ids
        )
        sales_ids = employees_for_rule(rule, specializations, employees)
        if sales_ids is None:
            return False
        rule.assigned_sales_ids = sales_ids
        await self._rules.set_assigned_sales(rule.id, sales_ids)
        logger.info("Rule %s auto-filled with employees %s", rule.rule_code, sales_ids)
        return True

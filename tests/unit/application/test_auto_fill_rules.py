"""Tests for AutoFillRuleUseCase."""

import pytest

from leadflow.application.use_cases.auto_fill_rules import AutoFillRuleUseCase
from leadflow.domain.entities.allocation_rule import AllocationRule
from leadflow.domain.entities.specialization import Specialization
from tests.fakes import FakeEmployeeRepo, FakeRuleRepo, FakeSpecializationRepo, employee


def _uc(rules, specializations, employees):
    rule_repo = FakeRuleRepo(rules)
    uc = AutoFillRuleUseCase(
        rule_repo, FakeSpecializationRepo(specializations), FakeEmployeeRepo(employees)
    )
    return uc, rule_repo


@pytest.mark.asyncio
async def test_fill_replaces_assigned_set_with_specialists():
    """Product groups {P, Q}; X specializes in P, Y in Q, Z in neither → {X, Y}."""
    uc, rules = _uc(
        [AllocationRule(id=None, rule_code="R1", product_group_ids=[10, 20], assigned_sales_ids=[3])],
        [
            Specialization(sales_employee_id=1, product_group_id=10),
            Specialization(sales_employee_id=2, product_group_id=20, is_primary=True),
            Specialization(sales_employee_id=3, product_group_id=30),
        ],
        [employee(1), employee(2), employee(3)],
    )

    rule = await uc.execute(1)

    assert rule.assigned_sales_ids == [1, 2]
    assert rules.rules[1].assigned_sales_ids == [1, 2]


@pytest.mark.asyncio
async def test_fill_deduplicates_and_excludes_inactive():
    uc, rules = _uc(
        [AllocationRule(id=None, rule_code="R1", product_group_ids=[10, 20])],
        [
            Specialization(sales_employee_id=1, product_group_id=10),
            Specialization(sales_employee_id=1, product_group_id=20),
            Specialization(sales_employee_id=2, product_group_id=20),
        ],
        [employee(1), employee(2, is_active=False)],
    )
    await uc.execute(1)
    assert rules.rules[1].assigned_sales_ids == [1]


@pytest.mark.asyncio
async def test_fill_with_no_specialists_empties_the_set():
    uc, rules = _uc(
        [AllocationRule(id=None, rule_code="R1", product_group_ids=[10], assigned_sales_ids=[1])],
        [],
        [employee(1)],
    )
    await uc.execute(1)
    assert rules.rules[1].assigned_sales_ids == []


@pytest.mark.asyncio
async def test_rule_without_product_groups_unchanged():
    uc, rules = _uc(
        [AllocationRule(id=None, rule_code="R1", assigned_sales_ids=[1])],
        [Specialization(sales_employee_id=2, product_group_id=10)],
        [employee(1), employee(2)],
    )
    await uc.execute(1)
    assert rules.rules[1].assigned_sales_ids == [1]


@pytest.mark.asyncio
async def test_unknown_rule_raises_lookup_error():
    uc, _ = _uc([], [], [employee(1)])
    with pytest.raises(LookupError):
        await uc.execute(42)


@pytest.mark.asyncio
async def test_execute_all_counts_updated_rules():
    uc, rules = _uc(
        [
            AllocationRule(id=None, rule_code="R1", product_group_ids=[10]),
            AllocationRule(id=None, rule_code="R2", product_group_ids=[20]),
            AllocationRule(id=None, rule_code="R3", assigned_sales_ids=[1]),
        ],
        [
            Specialization(sales_employee_id=1, product_group_id=10),
            Specialization(sales_employee_id=2, product_group_id=20),
        ],
        [employee(1), employee(2)],
    )

    assert await uc.execute_all() == 2
    assert rules.rules[1].assigned_sales_ids == [1]
    assert rules.rules[2].assigned_sales_ids == [2]
    assert rules.rules[3].assigned_sales_ids == [1]

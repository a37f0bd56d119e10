"""RuleMatcherPolicy — resolves candidate employees from allocation rules."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from leadflow.domain.entities.allocation_rule import AllocationRule
from leadflow.domain.entities.lead import Lead
from leadflow.domain.entities.sales_employee import SalesEmployee
from leadflow.domain.value_objects.enums import RuleShape

logger = logging.getLogger(__name__)

# Lower rank = more specific
_SPECIFICITY: dict[RuleShape, int] = {
    RuleShape.BOTH: 0,
    RuleShape.CUSTOMER_GROUP_ONLY: 1,
    RuleShape.PRODUCT_GROUP_ONLY: 1,
    RuleShape.ANY: 2,
}


def rule_matches(rule: AllocationRule, lead: Lead) -> bool:
    """Check one rule against a lead, by rule shape.

    An unset customer group or an empty product set on the rule means
    "no preference" for that dimension. An unset value on the lead only
    satisfies rules that do not constrain that dimension.
    """
    group_ok = rule.customer_group == lead.customer_group
    product_ok = lead.interested_product_group_id in rule.product_group_ids

    shape = rule.shape
    if shape is RuleShape.BOTH:
        return group_ok and product_ok
    if shape is RuleShape.CUSTOMER_GROUP_ONLY:
        return group_ok
    if shape is RuleShape.PRODUCT_GROUP_ONLY:
        return product_ok
    if shape is RuleShape.ANY:
        return True
    raise AssertionError(f"Unhandled rule shape: {shape!r}")


def _drop_unknown_product_groups(
    rule: AllocationRule, known_product_group_ids: set[int]
) -> AllocationRule | None:
    """Return the rule restricted to known product groups, or None if nothing is left."""
    if not rule.product_group_ids:
        return rule
    known = [pg for pg in rule.product_group_ids if pg in known_product_group_ids]
    if len(known) == len(rule.product_group_ids):
        return rule
    if not known:
        logger.warning(
            "Rule %s references only unknown product groups %s, treating as non-matching",
            rule.rule_code, rule.product_group_ids,
        )
        return None
    logger.warning(
        "Rule %s references unknown product groups %s, ignoring them",
        rule.rule_code, sorted(set(rule.product_group_ids) - set(known)),
    )
    return AllocationRule(
        id=rule.id,
        rule_code=rule.rule_code,
        customer_group=rule.customer_group,
        product_group_ids=known,
        assigned_sales_ids=rule.assigned_sales_ids,
        is_active=rule.is_active,
        created_at=rule.created_at,
    )


def _creation_key(rule: AllocationRule) -> tuple:
    return (rule.created_at is None, rule.created_at or 0, rule.id or 0)


def matching_rules(
    lead: Lead,
    rules: Iterable[AllocationRule],
    known_product_group_ids: set[int] | None = None,
) -> list[AllocationRule]:
    """Return the active rules matching *lead*, most specific first.

    Ties keep creation order (first created first).
    """
    ordered = sorted((r for r in rules if r.is_active), key=_creation_key)
    matched: list[AllocationRule] = []
    for rule in ordered:
        if known_product_group_ids is not None:
            rule = _drop_unknown_product_groups(rule, known_product_group_ids)
            if rule is None:
                continue
        if not rule.assigned_sales_ids:
            continue
        if rule_matches(rule, lead):
            matched.append(rule)

    # sorted() is stable, so creation order survives within a specificity rank
    return sorted(matched, key=lambda r: _SPECIFICITY[r.shape])


def match(
    lead: Lead,
    rules: Iterable[AllocationRule],
    active_employees: Iterable[SalesEmployee],
    known_product_group_ids: set[int] | None = None,
) -> list[int]:
    """Pure function: ordered candidate employee ids for a lead.

    1. Keep active rules that match the lead (see :func:`rule_matches`).
    2. Rank by specificity, then creation order.
    3. Union the assigned employees of every matched rule, preserving
       rule order and dropping duplicates.
    4. Keep only currently active employees; references to unknown or
       inactive employees are silently dropped.

    An empty result means "no rule applies" and is the caller's cue to
    fall back to round robin.
    """
    active_ids = {e.id for e in active_employees if e.is_active}
    candidates: list[int] = []
    seen: set[int] = set()
    for rule in matching_rules(lead, rules, known_product_group_ids):
        for sales_id in rule.assigned_sales_ids:
            if sales_id in seen or sales_id not in active_ids:
                continue
            seen.add(sales_id)
            candidates.append(sales_id)
    return candidates

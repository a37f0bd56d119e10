"""Allocation endpoints — rule administration, auto-fill, bulk distribution."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.adapters.persistence.database import get_session
from leadflow.application.ports.rule_repo import RuleRepository
from leadflow.application.use_cases.auto_fill_rules import AutoFillRuleUseCase
from leadflow.application.use_cases.distribute_leads import BulkDistributeUseCase
from leadflow.config import settings
from leadflow.domain.entities.allocation_rule import AllocationRule
from leadflow.domain.value_objects.enums import CustomerGroup
from leadflow.infrastructure.api.dependencies import (
    get_auto_fill_uc,
    get_bulk_distribute_uc,
    get_rule_repo,
)
from leadflow.infrastructure.api.serializers import serialize_rule

logger = logging.getLogger(__name__)

rules_router = APIRouter(prefix="/allocation-rules", tags=["allocation-rules"])
router = APIRouter(prefix="/allocation", tags=["allocation"])


class RuleRequest(BaseModel):
    rule_code: str = Field(min_length=1, max_length=50)
    customer_group: CustomerGroup | None = None
    product_group_ids: list[int] = Field(default_factory=list)
    assigned_sales_ids: list[int] = Field(default_factory=list)
    is_active: bool = True


def _dedupe(ids: list[int]) -> list[int]:
    return list(dict.fromkeys(ids))


# ── Rule CRUD ───────────────────────────────────────────────────────

@rules_router.get("")
async def list_rules(rule_repo: RuleRepository = Depends(get_rule_repo)):
    """All allocation rules in creation order."""
    return [serialize_rule(r) for r in await rule_repo.get_all()]


@rules_router.post("", status_code=201)
async def create_rule(
    body: RuleRequest,
    rule_repo: RuleRepository = Depends(get_rule_repo),
    session: AsyncSession = Depends(get_session),
):
    rule = AllocationRule(
        id=None,
        rule_code=body.rule_code,
        customer_group=body.customer_group,
        product_group_ids=_dedupe(body.product_group_ids),
        assigned_sales_ids=_dedupe(body.assigned_sales_ids),
        is_active=body.is_active,
    )
    rule = await rule_repo.save(rule)
    await session.commit()
    return serialize_rule(rule)


@rules_router.post("/auto-fill")
async def auto_fill_all_rules(
    auto_fill_uc: AutoFillRuleUseCase = Depends(get_auto_fill_uc),
    session: AsyncSession = Depends(get_session),
):
    """Fill every rule's employees from product-group specializations."""
    updated = await auto_fill_uc.execute_all()
    await session.commit()
    return {"status": "ok", "updated": updated}


@rules_router.put("/{rule_id}")
async def update_rule(
    rule_id: int,
    body: RuleRequest,
    rule_repo: RuleRepository = Depends(get_rule_repo),
    session: AsyncSession = Depends(get_session),
):
    existing = await rule_repo.get_by_id(rule_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Allocation rule not found")

    existing.rule_code = body.rule_code
    existing.customer_group = body.customer_group
    existing.product_group_ids = _dedupe(body.product_group_ids)
    existing.assigned_sales_ids = _dedupe(body.assigned_sales_ids)
    existing.is_active = body.is_active
    rule = await rule_repo.update(existing)
    await session.commit()
    return serialize_rule(rule)


@rules_router.delete("/{rule_id}")
async def delete_rule(
    rule_id: int,
    rule_repo: RuleRepository = Depends(get_rule_repo),
    session: AsyncSession = Depends(get_session),
):
    if not await rule_repo.delete(rule_id):
        raise HTTPException(status_code=404, detail="Allocation rule not found")
    await session.commit()
    return {"status": "ok", "id": rule_id}


@rules_router.post("/{rule_id}/auto-fill")
async def auto_fill_rule(
    rule_id: int,
    auto_fill_uc: AutoFillRuleUseCase = Depends(get_auto_fill_uc),
    session: AsyncSession = Depends(get_session),
):
    """Replace one rule's employees with its product-group specialists."""
    try:
        rule = await auto_fill_uc.execute(rule_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    await session.commit()
    return serialize_rule(rule)


# ── Bulk distribution ───────────────────────────────────────────────

@router.post("/auto-distribute")
async def auto_distribute(
    bulk_uc: BulkDistributeUseCase = Depends(get_bulk_distribute_uc),
    session: AsyncSession = Depends(get_session),
):
    """Assign every currently unassigned lead; returns the aggregate report."""
    try:
        report = await bulk_uc.execute(deadline_seconds=settings.bulk_deadline_seconds)
    except SQLAlchemyError as e:
        logger.exception("Bulk distribution could not load unassigned leads")
        raise HTTPException(status_code=503, detail=f"Storage unavailable: {e}")
    await session.commit()
    return report.to_dict()

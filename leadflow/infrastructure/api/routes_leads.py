"""Lead endpoints — intake with auto-assignment, listing, manual assignment."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.adapters.persistence.database import get_session
from leadflow.application.ports.lead_repo import LeadRepository
from leadflow.application.use_cases.assign_lead import AssignLeadUseCase
from leadflow.application.use_cases.create_lead import CreateLeadUseCase
from leadflow.application.use_cases.manual_assign import ManualAssignUseCase
from leadflow.domain.entities.lead import Lead
from leadflow.domain.errors import Err
from leadflow.domain.value_objects.enums import CustomerGroup, LeadStatus
from leadflow.infrastructure.api.dependencies import (
    get_assign_lead_uc,
    get_create_lead_uc,
    get_lead_repo,
    get_manual_assign_uc,
)
from leadflow.infrastructure.api.serializers import serialize_assignment, serialize_lead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leads", tags=["leads"])


# ── Request schemas ─────────────────────────────────────────────────

class LeadCreateRequest(BaseModel):
    full_name: str = Field(min_length=1, max_length=200)
    phone: str | None = None
    email: str | None = None
    customer_group: CustomerGroup | None = None
    interested_product_group_id: int | None = None
    assigned_sales_id: int | None = None


class ManualAssignRequest(BaseModel):
    sales_employee_id: int


# ── Endpoints ───────────────────────────────────────────────────────

@router.get("")
async def list_leads(
    status: LeadStatus | None = None,
    assigned_sales_id: int | None = None,
    unassigned: bool = False,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    lead_repo: LeadRepository = Depends(get_lead_repo),
):
    """List leads, newest first."""
    leads, total = await lead_repo.search(
        status=status,
        assigned_sales_id=assigned_sales_id,
        unassigned=unassigned,
        limit=limit,
        offset=offset,
    )
    return {"count": total, "data": [serialize_lead(lead) for lead in leads]}


@router.get("/{lead_id}")
async def get_lead(lead_id: int, lead_repo: LeadRepository = Depends(get_lead_repo)):
    lead = await lead_repo.get_by_id(lead_id)
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")
    return serialize_lead(lead)


@router.post("", status_code=201)
async def create_lead(
    body: LeadCreateRequest,
    create_uc: CreateLeadUseCase = Depends(get_create_lead_uc),
    session: AsyncSession = Depends(get_session),
):
    """Create a lead and try to assign it. Assignment failure never blocks creation."""
    lead = Lead(id=None, **body.model_dump())
    try:
        result = await create_uc.execute(lead)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    await session.commit()

    return {
        "lead": serialize_lead(result.lead),
        "assignment": serialize_assignment(result.assignment) if result.assignment else None,
        "reason": result.reason,
    }


@router.post("/{lead_id}/assign")
async def assign_lead(
    lead_id: int,
    lead_repo: LeadRepository = Depends(get_lead_repo),
    assign_uc: AssignLeadUseCase = Depends(get_assign_lead_uc),
    session: AsyncSession = Depends(get_session),
):
    """Run the allocation engine for one lead (no-op if already assigned)."""
    lead = await lead_repo.get_by_id(lead_id)
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")

    result = await assign_uc.execute(lead)
    await session.commit()

    if isinstance(result, Err):
        return {
            "status": "error",
            "assignment": None,
            "reason": result.error.code.value,
            "error": result.error.message,
        }
    return {"status": "ok", "assignment": serialize_assignment(result.value), "reason": None}


@router.put("/{lead_id}/assignment")
async def manual_assign(
    lead_id: int,
    body: ManualAssignRequest,
    manual_uc: ManualAssignUseCase = Depends(get_manual_assign_uc),
    session: AsyncSession = Depends(get_session),
):
    """Operator (re)assignment; the engine never overwrites it."""
    try:
        lead = await manual_uc.execute(lead_id, body.sales_employee_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    await session.commit()
    return serialize_lead(lead)

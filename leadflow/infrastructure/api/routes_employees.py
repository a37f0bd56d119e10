"""Sales employee endpoints — directory, specializations, daily reset."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.adapters.persistence.database import get_session
from leadflow.application.ports.employee_repo import EmployeeRepository
from leadflow.application.ports.specialization_repo import SpecializationRepository
from leadflow.application.use_cases.reset_daily_counts import ResetDailyCountsUseCase
from leadflow.domain.entities.sales_employee import SalesEmployee
from leadflow.domain.entities.specialization import Specialization
from leadflow.infrastructure.api.dependencies import (
    get_employee_repo,
    get_reset_daily_uc,
    get_specialization_repo,
)
from leadflow.infrastructure.api.serializers import (
    serialize_employee,
    serialize_specialization,
)

router = APIRouter(prefix="/sales-employees", tags=["sales-employees"])


class EmployeeRequest(BaseModel):
    employee_code: str = Field(min_length=1, max_length=50)
    full_name: str = Field(min_length=1, max_length=200)
    email: str | None = None
    phone: str | None = None
    is_active: bool = True
    round_robin_order: int = 0


class SpecializationRequest(BaseModel):
    product_group_id: int
    is_primary: bool = False


@router.get("")
async def list_employees(employee_repo: EmployeeRepository = Depends(get_employee_repo)):
    return [serialize_employee(e) for e in await employee_repo.get_all()]


@router.post("", status_code=201)
async def create_employee(
    body: EmployeeRequest,
    employee_repo: EmployeeRepository = Depends(get_employee_repo),
    session: AsyncSession = Depends(get_session),
):
    employee = await employee_repo.save(SalesEmployee(id=None, **body.model_dump()))
    await session.commit()
    return serialize_employee(employee)


@router.post("/reset-daily")
async def reset_daily_counts(
    reset_uc: ResetDailyCountsUseCase = Depends(get_reset_daily_uc),
    session: AsyncSession = Depends(get_session),
):
    """Zero today's lead count of every active employee."""
    reset = await reset_uc.execute()
    await session.commit()
    return {"status": "ok", "reset": reset}


@router.get("/by-product-group/{product_group_id}")
async def employees_by_product_group(
    product_group_id: int,
    employee_repo: EmployeeRepository = Depends(get_employee_repo),
    specialization_repo: SpecializationRepository = Depends(get_specialization_repo),
):
    """Active employees specialized in the given product group."""
    specs = await specialization_repo.get_by_product_groups([product_group_id])
    wanted = {s.sales_employee_id for s in specs}
    return [serialize_employee(e) for e in await employee_repo.get_active() if e.id in wanted]


@router.put("/{employee_id}")
async def update_employee(
    employee_id: int,
    body: EmployeeRequest,
    employee_repo: EmployeeRepository = Depends(get_employee_repo),
    session: AsyncSession = Depends(get_session),
):
    employee = await employee_repo.get_by_id(employee_id)
    if not employee:
        raise HTTPException(status_code=404, detail="Sales employee not found")

    employee.full_name = body.full_name
    employee.email = body.email
    employee.phone = body.phone
    employee.is_active = body.is_active
    employee.round_robin_order = body.round_robin_order
    await employee_repo.update(employee)
    await session.commit()
    return serialize_employee(employee)


@router.get("/{employee_id}/specializations")
async def list_specializations(
    employee_id: int,
    specialization_repo: SpecializationRepository = Depends(get_specialization_repo),
):
    return [serialize_specialization(s) for s in await specialization_repo.get_by_employee(employee_id)]


@router.post("/{employee_id}/specializations", status_code=201)
async def add_specialization(
    employee_id: int,
    body: SpecializationRequest,
    employee_repo: EmployeeRepository = Depends(get_employee_repo),
    specialization_repo: SpecializationRepository = Depends(get_specialization_repo),
    session: AsyncSession = Depends(get_session),
):
    if not await employee_repo.get_by_id(employee_id):
        raise HTTPException(status_code=404, detail="Sales employee not found")

    specialization = await specialization_repo.add(
        Specialization(
            sales_employee_id=employee_id,
            product_group_id=body.product_group_id,
            is_primary=body.is_primary,
        )
    )
    await session.commit()
    return serialize_specialization(specialization)


@router.delete("/{employee_id}/specializations/{product_group_id}")
async def remove_specialization(
    employee_id: int,
    product_group_id: int,
    specialization_repo: SpecializationRepository = Depends(get_specialization_repo),
    session: AsyncSession = Depends(get_session),
):
    if not await specialization_repo.remove(employee_id, product_group_id):
        raise HTTPException(status_code=404, detail="Specialization not found")
    await session.commit()
    return {"status": "ok"}

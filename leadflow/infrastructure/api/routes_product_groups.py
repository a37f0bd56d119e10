"""Product group endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.adapters.persistence.database import get_session
from leadflow.application.ports.specialization_repo import ProductGroupRepository
from leadflow.domain.entities.product_group import ProductGroup
from leadflow.infrastructure.api.dependencies import get_product_group_repo
from leadflow.infrastructure.api.serializers import serialize_product_group

router = APIRouter(prefix="/product-groups", tags=["product-groups"])


class ProductGroupRequest(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=200)
    is_active: bool = True


@router.get("")
async def list_product_groups(repo: ProductGroupRepository = Depends(get_product_group_repo)):
    return [serialize_product_group(g) for g in await repo.get_all()]


@router.post("", status_code=201)
async def create_product_group(
    body: ProductGroupRequest,
    repo: ProductGroupRepository = Depends(get_product_group_repo),
    session: AsyncSession = Depends(get_session),
):
    group = await repo.save(ProductGroup(id=None, **body.model_dump()))
    await session.commit()
    return serialize_product_group(group)

"""AllocationRule entity — maps lead attributes to eligible sales employees."""

from dataclasses import dataclass, field
from datetime import datetime

from leadflow.domain.value_objects.enums import CustomerGroup, RuleShape


@dataclass
class AllocationRule:
    id: int | None
    rule_code: str
    customer_group: CustomerGroup | None = None
    product_group_ids: list[int] = field(default_factory=list)
    assigned_sales_ids: list[int] = field(default_factory=list)
    is_active: bool = True
    created_at: datetime | None = None

    @property
    def shape(self) -> RuleShape:
        has_group = self.customer_group is not None
        has_products = bool(self.product_group_ids)
        if has_group and has_products:
            return RuleShape.BOTH
        if has_group:
            return RuleShape.CUSTOMER_GROUP_ONLY
        if has_products:
            return RuleShape.PRODUCT_GROUP_ONLY
        return RuleShape.ANY

"""Seed database from CSV files.

Usage:
    python -m leadflow.tools.seed_db
    python -m leadflow.tools.seed_db --data-dir data
    python -m leadflow.tools.seed_db --drop  # drop existing data first
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.adapters.csv_loader.loader import (
    load_employees,
    load_leads,
    load_product_groups,
    load_rules,
)
from leadflow.adapters.persistence.database import async_session_factory
from leadflow.adapters.persistence.models import (
    AllocationRuleModel,
    AssignmentLogModel,
    LeadModel,
    ProductGroupModel,
    SalesEmployeeModel,
    SpecializationModel,
)
from leadflow.config import settings
from leadflow.domain.value_objects.enums import CustomerGroup

logger = logging.getLogger(__name__)


async def _drop_data(session: AsyncSession) -> None:
    """Delete all data in correct order (respecting FK constraints)."""
    for model in [
        AssignmentLogModel,
        LeadModel,
        AllocationRuleModel,
        SpecializationModel,
        SalesEmployeeModel,
        ProductGroupModel,
    ]:
        await session.execute(delete(model))
    await session.commit()
    logger.info("Dropped all existing data")


def _find_csv(data_dir: Path, name_hints: list[str]) -> Path | None:
    """Find a CSV file matching the name hints, earlier hints first.

    An exact stem match wins over a substring match.
    """
    files = sorted(data_dir.glob("*.csv"))
    for hint in name_hints:
        for f in files:
            if f.stem.lower() == hint:
                logger.info("Found CSV: %s", f.name)
                return f
    for hint in name_hints:
        for f in files:
            if hint in f.stem.lower():
                logger.info("Found CSV: %s (matched hint '%s')", f.name, hint)
                return f
    return None


def _customer_group(raw: str | None, context: str) -> str | None:
    if not raw:
        return None
    try:
        return CustomerGroup(raw).value
    except ValueError:
        logger.warning("%s: unknown customer group %r, ignored", context, raw)
        return None


async def seed(data_dir: Path, drop: bool = False) -> dict[str, int]:
    """Main seed function. Returns counts of seeded records."""
    counts = {"product_groups": 0, "employees": 0, "specializations": 0, "rules": 0, "leads": 0}

    group_csv = _find_csv(data_dir, ["product_groups", "product", "nhom_sp"])
    employee_csv = _find_csv(data_dir, ["sales_employees", "employees", "nhan_vien"])
    rule_csv = _find_csv(data_dir, ["allocation_rules", "rules"])
    lead_csv = _find_csv(data_dir, ["leads"])

    if not employee_csv:
        raise FileNotFoundError(
            f"No employees CSV found in {data_dir}. Expected something like sales_employees.csv"
        )

    async with async_session_factory() as session:
        if drop:
            await _drop_data(session)

        # 1. Product groups
        if group_csv:
            for gd in load_product_groups(group_csv):
                existing = await session.execute(
                    select(ProductGroupModel).where(ProductGroupModel.code == gd["code"])
                )
                if existing.scalar_one_or_none():
                    logger.debug("Product group '%s' already exists, skipping", gd["code"])
                    continue
                session.add(ProductGroupModel(**gd))
                counts["product_groups"] += 1
            await session.commit()

        groups = (await session.execute(select(ProductGroupModel))).scalars().all()
        group_code_to_id = {g.code: g.id for g in groups}

        # 2. Employees + specializations
        for ed in load_employees(employee_csv):
            existing = await session.execute(
                select(SalesEmployeeModel).where(
                    SalesEmployeeModel.employee_code == ed["employee_code"]
                )
            )
            if existing.scalar_one_or_none():
                logger.debug("Employee '%s' already exists, skipping", ed["employee_code"])
                continue

            employee = SalesEmployeeModel(
                employee_code=ed["employee_code"],
                full_name=ed["full_name"],
                email=ed["email"],
                phone=ed["phone"],
                is_active=ed["is_active"],
                round_robin_order=ed["round_robin_order"],
            )
            session.add(employee)
            await session.flush()
            counts["employees"] += 1

            for i, code in enumerate(ed["specializations"]):
                group_id = group_code_to_id.get(code)
                if group_id is None:
                    logger.warning(
                        "Employee '%s': product group '%s' not found, skipping",
                        ed["employee_code"], code,
                    )
                    continue
                session.add(
                    SpecializationModel(
                        sales_employee_id=employee.id,
                        product_group_id=group_id,
                        is_primary=(i == 0),
                    )
                )
                counts["specializations"] += 1
        await session.commit()

        employees = (await session.execute(select(SalesEmployeeModel))).scalars().all()
        employee_code_to_id = {e.employee_code.upper(): e.id for e in employees}

        # 3. Allocation rules
        if rule_csv:
            for rd in load_rules(rule_csv):
                existing = await session.execute(
                    select(AllocationRuleModel).where(
                        AllocationRuleModel.rule_code == rd["rule_code"]
                    )
                )
                if existing.scalar_one_or_none():
                    continue
                session.add(
                    AllocationRuleModel(
                        rule_code=rd["rule_code"],
                        customer_group=_customer_group(rd["customer_group"], rd["rule_code"]),
                        product_group_ids=[
                            group_code_to_id[c] for c in rd["product_group_codes"]
                            if c in group_code_to_id
                        ],
                        assigned_sales_ids=[
                            employee_code_to_id[c] for c in rd["employee_codes"]
                            if c in employee_code_to_id
                        ],
                        is_active=rd["is_active"],
                    )
                )
                # One commit per rule keeps created_at (creation order) distinct
                await session.commit()
                counts["rules"] += 1

        # 4. Leads (unassigned; run auto-distribute afterwards)
        if lead_csv:
            for ld in load_leads(lead_csv):
                session.add(
                    LeadModel(
                        full_name=ld["full_name"],
                        phone=ld["phone"],
                        email=ld["email"],
                        status="new",
                        customer_group=_customer_group(ld["customer_group"], ld["full_name"]),
                        interested_product_group_id=group_code_to_id.get(
                            ld["product_group_code"]
                        ),
                    )
                )
                counts["leads"] += 1
            await session.commit()
        else:
            logger.info("No leads CSV found — skipping lead import")

    logger.info(
        "Seed complete: %d product groups, %d employees, %d specializations, %d rules, %d leads",
        counts["product_groups"], counts["employees"], counts["specializations"],
        counts["rules"], counts["leads"],
    )
    return counts


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")

    parser = argparse.ArgumentParser(description="Seed the LeadFlow database from CSV files")
    parser.add_argument("--data-dir", default=settings.csv_data_path)
    parser.add_argument("--drop", action="store_true", help="delete existing data first")
    args = parser.parse_args()

    asyncio.run(seed(Path(args.data_dir), drop=args.drop))


if __name__ == "__main__":
    main()

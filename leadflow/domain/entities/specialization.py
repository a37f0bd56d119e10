"""Specialization — declared competency of an employee for a product group."""

from dataclasses import dataclass


@dataclass
class Specialization:
    sales_employee_id: int
    product_group_id: int
    is_primary: bool = False

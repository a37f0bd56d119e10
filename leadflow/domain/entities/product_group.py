"""ProductGroup entity — a family of products a lead can be interested in."""

from dataclasses import dataclass


@dataclass
class ProductGroup:
    id: int | None
    code: str
    name: str
    is_active: bool = True

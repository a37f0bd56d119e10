"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class CustomerGroup(str, Enum):
    INDIVIDUAL = "Cá nhân"
    BUSINESS = "Doanh nghiệp"
    AGENCY = "Đại lý"
    SCHOOL = "Trường học"
    GOVERNMENT = "Cơ quan nhà nước"


class AssignmentMethod(str, Enum):
    MANUAL = "manual"
    ROUND_ROBIN = "round_robin"
    PRODUCT_BASED = "product_based"


class LeadStatus(str, Enum):
    NEW = "new"
    CALLING = "calling"
    NO_ANSWER = "no_answer"
    CLOSED = "closed"
    REJECTED = "rejected"


class RuleShape(str, Enum):
    """Which lead dimensions an allocation rule constrains."""

    BOTH = "both"
    CUSTOMER_GROUP_ONLY = "customer_group_only"
    PRODUCT_GROUP_ONLY = "product_group_only"
    ANY = "any"

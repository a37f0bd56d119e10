"""Allocation error taxonomy and the explicit assignment result type."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


class AllocationError(Exception):
    """Base class for lead allocation failures."""


class NoEligibleAssignee(AllocationError):
    """No active sales employee can take the lead."""

    def __init__(self, message: str = "No active sales employee available"):
        super().__init__(message)


class TransientStorageError(AllocationError):
    """Read or write against persisted state failed."""


class ConfigurationError(AllocationError):
    """An allocation rule references a product group or employee that does not exist.

    The rule matcher never raises this; it is used to classify and log
    degraded rules.
    """


class AssignmentErrorCode(str, Enum):
    NO_ELIGIBLE_ASSIGNEE = "no_eligible_assignee"
    TRANSIENT_STORAGE = "transient_storage"


@dataclass(frozen=True)
class AssignmentError:
    code: AssignmentErrorCode
    message: str


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err[E]]

"""Pytest configuration and shared fixtures."""

import pytest

from tests.fakes import Env, employee


@pytest.fixture
def three_employees():
    return [employee(1), employee(2), employee(3)]


@pytest.fixture
def rr_env(three_employees):
    """Executor with three active employees and no rules."""
    return Env(employees=three_employees)

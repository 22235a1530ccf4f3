"""Pytest configuration for the latebound test suite."""

import sys
from pathlib import Path

import pytest

# Add repository root to path for latebound imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from samples import Account, Calc, Counter  # noqa: E402


@pytest.fixture
def calc() -> Calc:
    return Calc()


@pytest.fixture
def counter() -> Counter:
    return Counter(count=5, label="apples")


@pytest.fixture
def account() -> Account:
    return Account(balance=100)

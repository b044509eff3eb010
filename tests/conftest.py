"""Shared test fixtures."""

import itertools
from datetime import datetime, timezone

import pytest

from flashplay.parser import Parser
from flashplay.scheduler import Scheduler

SAMPLE_DECK = """\
# Science Basics

## Chemistry
What is H2O? :: Water
- Gold symbol :: Au
Water boils at 100C at sea level :: True

## Math
- What is 2+2?
  - 3
  - 4
  - 5
  > 4
<!-- Hint: count on your fingers -->
"""


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def parser():
    """Parser with predictable ids: card-1, card-2, ..."""
    counter = itertools.count(1)
    return Parser(id_factory=lambda: f"card-{next(counter)}")


@pytest.fixture
def scheduler():
    return Scheduler()


@pytest.fixture
def sample_markdown():
    return SAMPLE_DECK

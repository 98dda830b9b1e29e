"""Pytest configuration and shared fixtures for HabitPulse tests.

Engine tests use plain ``SimpleNamespace`` records; repository and CLI tests
run against an isolated temporary SQLite database.
"""

from __future__ import annotations

import tempfile
from datetime import date, timedelta
from pathlib import Path
from types import SimpleNamespace

import pytest
from sqlmodel import SQLModel, create_engine

from habitpulse.infra.database import create_session_factory
from habitpulse.infra.repositories import SQLModelHabitRepository
from habitpulse.models import Completion, Habit  # noqa: F401  (registers tables)

# Wednesday; its Monday-start week runs 2024-03-11 .. 2024-03-17.
FIXED_TODAY = date(2024, 3, 13)


# =============================================================================
# Plain records for the stats engine
# =============================================================================


@pytest.fixture
def today() -> date:
    """Fixed reference day used instead of the wall clock."""
    return FIXED_TODAY


@pytest.fixture
def make_habit():
    """Factory for lightweight habit records."""

    def _make(habit_id: str = "h1", period: str = "daily", target_frequency=1, name: str | None = None):
        return SimpleNamespace(
            id=habit_id,
            name=name or habit_id,
            period=period,
            target_frequency=target_frequency,
            color=None,
        )

    return _make


@pytest.fixture
def make_completion():
    """Factory for completion records; accepts a date or a raw string."""

    def _make(habit_id: str, day):
        occurred_on = day.isoformat() if isinstance(day, date) else day
        return SimpleNamespace(habit_id=habit_id, occurred_on=occurred_on)

    return _make


@pytest.fixture
def days_back(today):
    """Return the date ``n`` days before the fixed today."""

    def _days_back(n: int) -> date:
        return today - timedelta(days=n)

    return _days_back


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine with all tables created
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what the repository expects."""
    return create_session_factory(db_engine)


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def habit_factory(habit_repo):
    """Factory for creating persisted habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Test Habit",
        period: str = "daily",
        target_frequency: int = 1,
        category: str = "",
    ) -> Habit:
        return habit_repo.create(
            Habit(name=name, period=period, target_frequency=target_frequency, category=category)
        )

    return _create_habit

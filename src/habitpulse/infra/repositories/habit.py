"""SQLModel implementation of the habit repository."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, Optional

from sqlmodel import Session, select

from ...logging_config import get_logger
from ...models.habit import Completion, Habit
from ...services.dates import format_date

logger = get_logger(__name__)


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.get(Habit, habit_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self) -> list[Habit]:
        """List all habits in creation order."""
        with self.session_factory() as session:
            statement = select(Habit).order_by(Habit.created_at, Habit.name)  # type: ignore[arg-type]
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            logger.info("Habit created", extra={"habit_id": habit.id, "period": habit.period})
            return habit

    def update(self, habit: Habit) -> Habit:
        """Update an existing habit.

        Changing period or target re-interprets the existing completion log;
        completions themselves are left untouched.
        """
        with self.session_factory() as session:
            habit.updated_at = datetime.now(timezone.utc)
            merged = session.merge(habit)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            logger.info("Habit updated", extra={"habit_id": merged.id, "period": merged.period})
            return merged

    def delete(self, habit_id: str) -> bool:
        """Delete a habit together with its completions."""
        with self.session_factory() as session:
            habit = session.get(Habit, habit_id)
            if habit is None:
                return False
            for completion in session.exec(
                select(Completion).where(Completion.habit_id == habit_id)
            ).all():
                session.delete(completion)
            session.delete(habit)
            session.commit()
            logger.info("Habit deleted", extra={"habit_id": habit_id})
            return True

    # Completion log operations
    def list_completions(self, habit_id: Optional[str] = None) -> list[Completion]:
        """Return the completion log, optionally for one habit."""
        with self.session_factory() as session:
            statement = select(Completion).order_by(Completion.occurred_on, Completion.id)  # type: ignore[arg-type]
            if habit_id is not None:
                statement = statement.where(Completion.habit_id == habit_id)
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def add_completion(self, habit_id: str, occurred_on: date) -> Completion:
        """Record a completion; duplicates for the same day are allowed."""
        with self.session_factory() as session:
            completion = Completion(habit_id=habit_id, occurred_on=format_date(occurred_on))
            session.add(completion)
            session.commit()
            session.refresh(completion)
            session.expunge(completion)
            return completion

    def remove_completion(self, habit_id: str, occurred_on: date) -> int:
        """Remove every completion record for the habit and day; return how many."""
        with self.session_factory() as session:
            rows = session.exec(
                select(Completion)
                .where(Completion.habit_id == habit_id)
                .where(Completion.occurred_on == format_date(occurred_on))
            ).all()
            for row in rows:
                session.delete(row)
            session.commit()
            return len(rows)

    def toggle_completion(self, habit_id: str, occurred_on: date) -> bool:
        """Flip the completion state for a day; return True when it ends up completed."""
        if self.remove_completion(habit_id, occurred_on):
            logger.info(
                "Completion toggled off",
                extra={"habit_id": habit_id, "occurred_on": format_date(occurred_on)},
            )
            return False
        self.add_completion(habit_id, occurred_on)
        logger.info(
            "Completion toggled on",
            extra={"habit_id": habit_id, "occurred_on": format_date(occurred_on)},
        )
        return True

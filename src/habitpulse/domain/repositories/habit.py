"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.habit import Completion, Habit


class HabitRepository(Protocol):
    """Repository for habits and their completion log."""

    def get_by_id(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self) -> list[Habit]:
        """List all habits in creation order."""
        ...

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit: Habit) -> Habit:
        """Update an existing habit."""
        ...

    def delete(self, habit_id: str) -> bool:
        """Delete a habit together with its completions."""
        ...

    # Completion log operations
    def list_completions(self, habit_id: Optional[str] = None) -> list[Completion]:
        """Return the completion log, optionally for one habit."""
        ...

    def add_completion(self, habit_id: str, occurred_on: date) -> Completion:
        """Record a completion."""
        ...

    def remove_completion(self, habit_id: str, occurred_on: date) -> int:
        """Remove every completion record for the habit and day; return how many."""
        ...

    def toggle_completion(self, habit_id: str, occurred_on: date) -> bool:
        """Flip the completion state for a day; return the new state."""
        ...

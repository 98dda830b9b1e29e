"""SQLModel table exports."""

from .habit import HABIT_PERIODS, Completion, Habit

__all__ = ["HABIT_PERIODS", "Completion", "Habit"]

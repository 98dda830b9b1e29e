"""Habit and completion records."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional
from uuid import uuid4

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

HABIT_PERIODS = ("daily", "weekly", "monthly", "yearly")


def _new_habit_id() -> str:
    return uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Habit(SQLModel, table=True):
    """A recurring commitment measured against a period goal."""

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(default_factory=_new_habit_id, primary_key=True, max_length=32)
    name: str = Field(nullable=False, max_length=80, index=True)
    description: str = Field(default="", max_length=255)
    category: str = Field(default="", max_length=64)
    color: str = Field(default="#6366f1", max_length=32)
    reward: str = Field(default="", max_length=255)
    period: str = Field(default="daily", max_length=16, index=True)
    target_frequency: int = Field(default=1, nullable=False)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)

    completions: list["Completion"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "Completion", back_populates="habit", cascade="all, delete-orphan"
        ),
    )


class Completion(SQLModel, table=True):
    """Evidence that a habit was performed on one calendar day.

    ``occurred_on`` keeps the ISO ``YYYY-MM-DD`` text form; the log may hold
    several rows for the same habit and day.
    """

    __tablename__: ClassVar[str] = "completion"

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: str = Field(foreign_key="habit.id", nullable=False, index=True, max_length=32)
    occurred_on: str = Field(nullable=False, index=True, max_length=10)

    habit: Optional["Habit"] = Relationship(
        back_populates="completions",
        sa_relationship=relationship("Habit", back_populates="completions"),
    )

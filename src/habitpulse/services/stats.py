"""Habit statistics: streaks and period-goal attainment.

Every function here is pure. Callers pass the full completion log; records for
other habits are filtered out, duplicates are tolerated and malformed dates are
skipped with a warning rather than failing the whole computation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Protocol, Sequence

from ..errors import InvalidDateError
from ..logging_config import get_logger
from ..models.habit import HABIT_PERIODS
from .dates import parse_iso_date, period_window, resolve_today

logger = get_logger(__name__)

# Upper bound on the backward walk for the current streak.
STREAK_WALK_LIMIT = 1000


class HabitLike(Protocol):
    id: object
    period: str
    target_frequency: int | None


class CompletionLike(Protocol):
    habit_id: object
    occurred_on: str


@dataclass(frozen=True, slots=True)
class HabitStats:
    """Derived progress metrics for one habit at one reference day."""

    current_streak: int
    longest_streak: int
    total_completions: int
    is_completed_today: bool
    period_completions: int
    is_goal_met_in_period: bool
    target_frequency: int = 1

    @property
    def period_progress(self) -> float:
        """Percentage of the period target reached, capped at 100."""
        return min(100.0, self.period_completions / self.target_frequency * 100)


@dataclass(frozen=True, slots=True)
class DashboardSummary:
    total_habits: int
    completed_today: int
    best_current_streak: int
    goals_met: int


def normalize_period(period: object) -> str:
    """Return a recognised period name; anything else counts as ``daily``."""

    if isinstance(period, str) and period.strip().lower() in HABIT_PERIODS:
        return period.strip().lower()
    return "daily"


def normalize_target(target: object) -> int:
    """Coerce a missing or non-positive target frequency to 1."""

    try:
        value = int(target)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 1
    return value if value > 0 else 1


def completion_days(habit_id: object, completions: Iterable[CompletionLike]) -> list[date]:
    """Return parsed dates of every valid completion for ``habit_id``, duplicates kept."""

    days: list[date] = []
    for completion in completions:
        if getattr(completion, "habit_id", None) != habit_id:
            continue
        raw = getattr(completion, "occurred_on", None)
        try:
            days.append(parse_iso_date(raw))
        except InvalidDateError:
            logger.warning(
                "Skipping completion with malformed date",
                extra={"habit_id": habit_id, "occurred_on": raw},
            )
    return days


def compute_streaks(days: Iterable[date], *, today: date) -> tuple[int, int]:
    """Return (current_streak, longest_streak) from completion days.

    The current streak counts back from today when today is done, otherwise from
    yesterday, so an unfinished today does not break a running streak.
    """

    present = set(days)

    current = 0
    cursor = today if today in present else today - timedelta(days=1)
    for _ in range(STREAK_WALK_LIMIT):
        if cursor not in present:
            break
        current += 1
        cursor -= timedelta(days=1)

    # Longest streak: sweep through sorted days, counting consecutive runs.
    longest = 0
    run = 0
    last_day: date | None = None
    for d in sorted(present):
        if last_day is not None and d == last_day + timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last_day = d

    return current, longest


def compute_stats(
    habit: HabitLike,
    completions: Iterable[CompletionLike],
    *,
    now: date | datetime | None = None,
) -> HabitStats:
    """Compute :class:`HabitStats` for ``habit`` from the full completion log.

    ``now`` is the reference instant; when omitted the clock is read once.
    """

    today = resolve_today(now)
    period = normalize_period(getattr(habit, "period", None))
    target = normalize_target(getattr(habit, "target_frequency", None))

    days = completion_days(habit.id, completions)
    distinct = set(days)
    is_completed_today = today in distinct

    if period == "daily":
        # Same-day duplicates count once for a daily goal.
        period_completions = 1 if is_completed_today else 0
    else:
        start, end = period_window(period, today)
        period_completions = sum(1 for d in days if start <= d <= end)

    current, longest = compute_streaks(distinct, today=today)

    return HabitStats(
        current_streak=current,
        longest_streak=longest,
        total_completions=len(distinct),
        is_completed_today=is_completed_today,
        period_completions=period_completions,
        is_goal_met_in_period=period_completions >= target,
        target_frequency=target,
    )


def summarize_dashboard(
    habits: Sequence[HabitLike],
    completions: Sequence[CompletionLike],
    *,
    now: date | datetime | None = None,
) -> DashboardSummary:
    """Aggregate headline numbers across all habits for one reference day."""

    today = resolve_today(now)
    stats = [compute_stats(habit, completions, now=today) for habit in habits]
    return DashboardSummary(
        total_habits=len(habits),
        completed_today=sum(1 for s in stats if s.is_completed_today),
        best_current_streak=max((s.current_streak for s in stats), default=0),
        goals_met=sum(1 for s in stats if s.is_goal_met_in_period),
    )


def filter_by_period(habits: Iterable[HabitLike], period: str) -> list[HabitLike]:
    """Return habits whose (normalized) period matches, keeping input order."""

    wanted = normalize_period(period)
    return [h for h in habits if normalize_period(getattr(h, "period", None)) == wanted]


__all__ = [
    "DashboardSummary",
    "HabitStats",
    "STREAK_WALK_LIMIT",
    "compute_stats",
    "compute_streaks",
    "completion_days",
    "filter_by_period",
    "normalize_period",
    "normalize_target",
    "summarize_dashboard",
]

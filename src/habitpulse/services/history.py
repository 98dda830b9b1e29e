"""Month-by-month completion history for timeline views."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from ..errors import InvalidDateError
from ..logging_config import get_logger
from .dates import month_key, month_label, parse_iso_date
from .stats import CompletionLike, HabitLike

logger = get_logger(__name__)


@dataclass(slots=True)
class MonthGroup:
    """Raw completion tallies for one calendar month.

    ``counts`` keeps every habit id seen that month, known or not; ``rows``
    pairs the known habits (in caller order) with their tally.
    """

    year: int
    month: int
    counts: dict[object, int] = field(default_factory=dict)
    rows: list[tuple[HabitLike, int]] = field(default_factory=list)

    @property
    def label(self) -> str:
        return month_label(self.year, self.month)

    @property
    def total(self) -> int:
        return sum(self.counts.values())


def group_by_month(
    completions: Iterable[CompletionLike],
    habits: Sequence[HabitLike] = (),
) -> list[MonthGroup]:
    """Tally completions per (month, habit), most recent month first.

    Every record counts, so same-day duplicates increment the tally.
    """

    tallies: dict[tuple[int, int], dict[object, int]] = defaultdict(lambda: defaultdict(int))
    for completion in completions:
        raw = getattr(completion, "occurred_on", None)
        try:
            day = parse_iso_date(raw)
        except InvalidDateError:
            logger.warning(
                "Skipping completion with malformed date in history",
                extra={"habit_id": getattr(completion, "habit_id", None), "occurred_on": raw},
            )
            continue
        tallies[month_key(day)][completion.habit_id] += 1

    groups: list[MonthGroup] = []
    for (year, month) in sorted(tallies, reverse=True):
        counts = dict(tallies[(year, month)])
        rows = [(habit, counts[habit.id]) for habit in habits if counts.get(habit.id)]
        groups.append(MonthGroup(year=year, month=month, counts=counts, rows=rows))
    return groups


__all__ = ["MonthGroup", "group_by_month"]

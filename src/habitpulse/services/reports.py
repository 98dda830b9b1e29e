"""Reporting utilities: history chart and stats export."""

from __future__ import annotations

import csv
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Protocol, Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.colors import is_color_like  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from .dates import resolve_today  # noqa: E402
from .history import MonthGroup  # noqa: E402
from .stats import CompletionLike, HabitLike, compute_stats  # noqa: E402

STATS_CSV_HEADERS = [
    "habit_id",
    "name",
    "period",
    "target_frequency",
    "current_streak",
    "longest_streak",
    "total_completions",
    "is_completed_today",
    "period_completions",
    "is_goal_met_in_period",
]


class ReportRenderer(Protocol):
    """Protocol describing renderer behavior."""

    def render(self, figure: Figure, *, output_path: Path) -> None:  # pragma: no cover - interface
        ...


def build_history_chart(
    groups: Sequence[MonthGroup],
    habits: Sequence[HabitLike] | None = None,
) -> Figure:
    """Create a stacked bar chart of monthly completion tallies per habit.

    Months run oldest to newest from left to right. Bars are stacked per habit
    in ``habits`` order; without ``habits`` every id found in the groups is
    plotted under its raw id.
    """

    ordered = list(reversed(groups))
    if habits is not None:
        series = []
        used_colors: set[str] = set()
        for h in habits:
            color = getattr(h, "color", None)
            # Invalid or repeated colors fall back to the axes property cycle.
            if not color or not is_color_like(color) or str(color).lower() in used_colors:
                color = None
            else:
                used_colors.add(str(color).lower())
            series.append((h.id, getattr(h, "name", None) or str(h.id), color))
    else:
        seen: dict[object, None] = {}
        for group in ordered:
            for habit_id in group.counts:
                seen.setdefault(habit_id, None)
        series = [(habit_id, str(habit_id), None) for habit_id in seen]

    fig, ax = plt.subplots(figsize=(10, 5))

    if ordered and series:
        labels = [g.label for g in ordered]
        positions = range(len(ordered))
        bottoms = [0] * len(ordered)
        for habit_id, name, color in series:
            heights = [g.counts.get(habit_id, 0) for g in ordered]
            if not any(heights):
                continue
            ax.bar(positions, heights, bottom=bottoms, label=name, color=color)
            bottoms = [b + h for b, h in zip(bottoms, heights)]

        ax.set_xticks(list(positions))
        ax.set_xticklabels(labels, rotation=30, ha="right", fontsize=9)
        ax.set_ylabel("Completions")
        ax.set_title("Completions by Month", fontsize=14, fontweight="bold")
        ax.legend(title="Habits", loc="upper left", bbox_to_anchor=(1.02, 1.0), fontsize=9)
    else:
        ax.text(0.5, 0.5, "No completion history", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")

    fig.tight_layout()
    return fig


def export_history_png(
    *,
    groups: Sequence[MonthGroup],
    output_path: Path,
    habits: Sequence[HabitLike] | None = None,
    renderer: ReportRenderer | None = None,
) -> Path:
    """Render the history chart to PNG and return the path."""

    fig = build_history_chart(groups, habits)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if renderer is not None:
            renderer.render(fig, output_path=output_path)
        else:
            fig.savefig(output_path, bbox_inches="tight", dpi=120)
    finally:
        plt.close(fig)
    return output_path


def export_stats_csv(
    *,
    habits: Iterable[HabitLike],
    completions: Sequence[CompletionLike],
    output_path: Path,
    now: date | datetime | None = None,
) -> Path:
    """Write one row of statistics per habit to CSV at ``output_path``."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    today = resolve_today(now)

    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=STATS_CSV_HEADERS, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for habit in habits:
            stats = compute_stats(habit, completions, now=today)
            writer.writerow(
                {
                    "habit_id": habit.id,
                    "name": getattr(habit, "name", ""),
                    "period": habit.period,
                    "target_frequency": stats.target_frequency,
                    "current_streak": stats.current_streak,
                    "longest_streak": stats.longest_streak,
                    "total_completions": stats.total_completions,
                    "is_completed_today": stats.is_completed_today,
                    "period_completions": stats.period_completions,
                    "is_goal_met_in_period": stats.is_goal_met_in_period,
                }
            )

    return output_path


__all__ = [
    "STATS_CSV_HEADERS",
    "ReportRenderer",
    "build_history_chart",
    "export_history_png",
    "export_stats_csv",
]

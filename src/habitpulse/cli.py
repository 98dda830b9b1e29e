"""Command line interface for HabitPulse."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import click
from matplotlib.colors import is_color_like

from .domain.repositories import HabitRepository
from .errors import InvalidDateError
from .models.habit import HABIT_PERIODS, Habit
from .services.dates import format_date, parse_iso_date


def _parse_day(ctx, param, value):
    """Click callback turning ``YYYY-MM-DD`` into a date."""

    if value is None:
        return None
    try:
        return parse_iso_date(value)
    except InvalidDateError as exc:
        raise click.BadParameter(str(exc)) from exc


def _parse_color(ctx, param, value):
    """Click callback accepting any color matplotlib can draw."""

    if value is None:
        return None
    value = value.strip()
    if not is_color_like(value):
        raise click.BadParameter(f"Not a color: {value!r} (try a name or #rrggbb)")
    return value


def _repo(ctx: click.Context) -> HabitRepository:
    obj = ctx.ensure_object(dict)
    if "repo" not in obj:
        # An injected repository skips configuration and database bootstrap.
        from .config import DevConfig
        from .infra.database import bootstrap_database
        from .infra.repositories import SQLModelHabitRepository
        from .logging_config import setup_logging

        config = obj.get("config") or DevConfig()
        setup_logging(config)
        _engine, session_factory = bootstrap_database(config)
        obj["repo"] = SQLModelHabitRepository(session_factory)
    return obj["repo"]


def _require_habit(repo: HabitRepository, habit_id: str) -> Habit:
    habit = repo.get_by_id(habit_id)
    if habit is None:
        raise click.ClickException(f"Unknown habit: {habit_id}")
    return habit


@click.group()
@click.version_option(package_name="habitpulse")
@click.pass_context
def main(ctx: click.Context) -> None:
    """Track habit completions and report streaks and period goals."""

    ctx.ensure_object(dict)


@main.group()
def habits() -> None:
    """Manage habits."""


@habits.command("add")
@click.argument("name")
@click.option("--period", type=click.Choice(HABIT_PERIODS), default="daily", show_default=True)
@click.option("--target", "target_frequency", type=click.IntRange(min=1), default=1, show_default=True)
@click.option("--category", default="", help="Free-form grouping label.")
@click.option("--color", default="#6366f1", show_default=True, callback=_parse_color)
@click.option("--description", default="")
@click.option("--reward", default="")
@click.pass_context
def add_habit(ctx, name, period, target_frequency, category, color, description, reward) -> None:
    """Create a habit."""

    habit = _repo(ctx).create(
        Habit(
            name=name,
            period=period,
            target_frequency=target_frequency,
            category=category,
            color=color,
            description=description,
            reward=reward,
        )
    )
    click.echo(f"Created {habit.name} ({habit.period}, target {habit.target_frequency}): {habit.id}")


@habits.command("list")
@click.option("--period", type=click.Choice(HABIT_PERIODS, case_sensitive=False), default=None)
@click.pass_context
def list_habits(ctx, period) -> None:
    """List habits, optionally for one period."""

    from .services.stats import filter_by_period

    rows = _repo(ctx).list_all()
    if period:
        rows = filter_by_period(rows, period)
    if not rows:
        click.echo("No habits yet.")
        return
    for habit in rows:
        click.echo(f"{habit.id}  {habit.name}  [{habit.period} x{habit.target_frequency}]")


@habits.command("edit")
@click.argument("habit_id")
@click.option("--name", default=None)
@click.option("--period", type=click.Choice(HABIT_PERIODS), default=None)
@click.option("--target", "target_frequency", type=click.IntRange(min=1), default=None)
@click.option("--category", default=None)
@click.option("--color", default=None, callback=_parse_color)
@click.option("--description", default=None)
@click.option("--reward", default=None)
@click.pass_context
def edit_habit(ctx, habit_id, **changes) -> None:
    """Change a habit's settings.

    A new period or target applies to the whole existing completion log.
    """

    changes = {key: value for key, value in changes.items() if value is not None}
    if not changes:
        raise click.UsageError("Nothing to change; pass at least one option.")

    repo = _repo(ctx)
    habit = _require_habit(repo, habit_id)
    for key, value in changes.items():
        setattr(habit, key, value)
    habit = repo.update(habit)
    click.echo(f"Updated {habit.name} ({habit.period}, target {habit.target_frequency}): {habit.id}")


@habits.command("delete")
@click.argument("habit_id")
@click.pass_context
def delete_habit(ctx, habit_id) -> None:
    """Delete a habit and its completion log."""

    if not _repo(ctx).delete(habit_id):
        raise click.ClickException(f"Unknown habit: {habit_id}")
    click.echo(f"Deleted {habit_id}")


@main.command()
@click.argument("habit_id")
@click.option("--on", "day", callback=_parse_day, help="Day to toggle (YYYY-MM-DD), defaults to today.")
@click.pass_context
def toggle(ctx, habit_id, day) -> None:
    """Mark a habit done for a day, or undo it."""

    repo = _repo(ctx)
    habit = _require_habit(repo, habit_id)
    day = day or date.today()
    done = repo.toggle_completion(habit.id, day)

    from .services.stats import compute_stats

    result = compute_stats(habit, repo.list_completions(habit.id), now=day)
    state = "done" if done else "not done"
    click.echo(f"{habit.name}: {state} on {format_date(day)}")
    if done and result.is_goal_met_in_period:
        click.echo(f"Goal met: {result.period_completions}/{result.target_frequency} this {habit.period} period")


@main.command()
@click.option("--on", "day", callback=_parse_day, help="Reference day (YYYY-MM-DD), defaults to today.")
@click.pass_context
def stats(ctx, day) -> None:
    """Show streaks and period progress per habit."""

    from .services.stats import compute_stats, summarize_dashboard

    repo = _repo(ctx)
    today = day or date.today()
    rows = repo.list_all()
    completions = repo.list_completions()

    for habit in rows:
        s = compute_stats(habit, completions, now=today)
        mark = "x" if s.is_completed_today else " "
        click.echo(
            f"[{mark}] {habit.name}: streak {s.current_streak} (best {s.longest_streak}), "
            f"{s.period_completions}/{s.target_frequency} {habit.period} "
            f"({s.period_progress:.0f}%), {s.total_completions} days total"
        )

    summary = summarize_dashboard(rows, completions, now=today)
    click.echo(
        f"{summary.completed_today}/{summary.total_habits} done today, "
        f"best streak {summary.best_current_streak}, goals met {summary.goals_met}"
    )


@main.command()
@click.pass_context
def history(ctx) -> None:
    """Show completion tallies per month, newest first."""

    from .services.history import group_by_month

    repo = _repo(ctx)
    groups = group_by_month(repo.list_completions(), repo.list_all())
    if not groups:
        click.echo("No completions logged.")
        return
    for group in groups:
        click.echo(group.label)
        for habit, count in group.rows:
            click.echo(f"  {habit.name}: {count}")


@main.command()
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.option("--png", "png_path", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.option("--on", "day", callback=_parse_day, help="Reference day for stats (YYYY-MM-DD).")
@click.pass_context
def export(ctx, csv_path, png_path, day) -> None:
    """Export per-habit stats as CSV and/or the month history as PNG."""

    if csv_path is None and png_path is None:
        raise click.UsageError("Specify --csv and/or --png.")

    from .services.history import group_by_month
    from .services.reports import export_history_png, export_stats_csv

    repo = _repo(ctx)
    rows = repo.list_all()
    completions = repo.list_completions()

    if csv_path is not None:
        export_stats_csv(habits=rows, completions=completions, output_path=csv_path, now=day)
        click.echo(f"Stats written: {csv_path}")
    if png_path is not None:
        export_history_png(groups=group_by_month(completions, rows), habits=rows, output_path=png_path)
        click.echo(f"History chart written: {png_path}")


if __name__ == "__main__":  # pragma: no cover
    main()

"""Tests for the click command line interface."""

from __future__ import annotations

import csv
import logging
from datetime import date

import pytest
from click.testing import CliRunner

from habitpulse.cli import main


@pytest.fixture
def run(habit_repo):
    runner = CliRunner()

    def _run(*args):
        return runner.invoke(main, list(args), obj={"repo": habit_repo})

    return _run


def test_add_and_list_habits(run, habit_repo):
    result = run("habits", "add", "Read", "--period", "weekly", "--target", "3")

    assert result.exit_code == 0, result.output
    assert "Created Read (weekly, target 3)" in result.output

    listed = run("habits", "list", "--period", "weekly")
    assert "Read" in listed.output
    assert "[weekly x3]" in listed.output


def test_add_rejects_unknown_period(run):
    result = run("habits", "add", "Read", "--period", "hourly")

    assert result.exit_code != 0


def test_toggle_reports_goal(run, habit_factory, habit_repo):
    habit = habit_factory(name="Walk")

    result = run("toggle", habit.id, "--on", "2024-03-13")

    assert result.exit_code == 0, result.output
    assert "Walk: done on 2024-03-13" in result.output
    assert "Goal met: 1/1" in result.output

    again = run("toggle", habit.id, "--on", "2024-03-13")
    assert "Walk: not done on 2024-03-13" in again.output
    assert habit_repo.list_completions(habit.id) == []


def test_toggle_rejects_bad_date(run, habit_factory):
    habit = habit_factory(name="Walk")

    result = run("toggle", habit.id, "--on", "2024-02-30")

    assert result.exit_code == 2
    assert "Invalid calendar date" in result.output


def test_toggle_unknown_habit(run):
    result = run("toggle", "nope")

    assert result.exit_code == 1
    assert "Unknown habit: nope" in result.output


def test_stats_output(run, habit_factory, habit_repo):
    habit = habit_factory(name="Journal")
    for day in (date(2024, 3, 11), date(2024, 3, 12), date(2024, 3, 13)):
        habit_repo.add_completion(habit.id, day)

    result = run("stats", "--on", "2024-03-13")

    assert result.exit_code == 0, result.output
    assert "[x] Journal: streak 3 (best 3), 1/1 daily (100%), 3 days total" in result.output
    assert "1/1 done today, best streak 3, goals met 1" in result.output


def test_history_output(run, habit_factory, habit_repo):
    habit = habit_factory(name="Journal")
    habit_repo.add_completion(habit.id, date(2024, 1, 5))
    habit_repo.add_completion(habit.id, date(2024, 2, 5))
    habit_repo.add_completion(habit.id, date(2024, 2, 6))

    result = run("history")

    lines = result.output.splitlines()
    assert lines == ["February 2024", "  Journal: 2", "January 2024", "  Journal: 1"]


def test_history_empty(run):
    assert "No completions logged." in run("history").output


def test_list_filters_by_period(run, habit_factory):
    habit_factory(name="Floss", period="daily")
    habit_factory(name="Review", period="weekly")

    result = run("habits", "list", "--period", "Weekly")

    assert result.exit_code == 0, result.output
    assert "Review" in result.output
    assert "Floss" not in result.output


@pytest.mark.parametrize("color", ["", "#zzz", "sparkly"])
def test_add_rejects_unusable_color(run, habit_repo, color):
    result = run("habits", "add", "Read", "--color", color)

    assert result.exit_code == 2
    assert "Not a color" in result.output
    assert habit_repo.list_all() == []


def test_edit_reinterprets_log_under_new_period(run, habit_factory, habit_repo):
    habit = habit_factory(name="Stretch", period="daily")
    habit_repo.add_completion(habit.id, date(2024, 3, 11))
    habit_repo.add_completion(habit.id, date(2024, 3, 12))

    before = run("stats", "--on", "2024-03-13")
    assert "[ ] Stretch: streak 2 (best 2), 0/1 daily (0%), 2 days total" in before.output

    edited = run("habits", "edit", habit.id, "--period", "weekly", "--target", "2", "--color", "teal")

    assert edited.exit_code == 0, edited.output
    assert f"Updated Stretch (weekly, target 2): {habit.id}" in edited.output
    stored = habit_repo.get_by_id(habit.id)
    assert (stored.period, stored.target_frequency, stored.color) == ("weekly", 2, "teal")
    assert len(habit_repo.list_completions(habit.id)) == 2

    after = run("stats", "--on", "2024-03-13")
    assert "[ ] Stretch: streak 2 (best 2), 2/2 weekly (100%), 2 days total" in after.output
    assert "goals met 1" in after.output


def test_edit_requires_a_change(run, habit_factory):
    habit = habit_factory(name="Stretch")

    result = run("habits", "edit", habit.id)

    assert result.exit_code == 2
    assert "Nothing to change" in result.output


def test_edit_unknown_habit(run):
    result = run("habits", "edit", "nope", "--name", "Renamed")

    assert result.exit_code == 1
    assert "Unknown habit: nope" in result.output


def test_delete_habit(run, habit_factory, habit_repo):
    habit = habit_factory(name="Old")

    result = run("habits", "delete", habit.id)

    assert result.exit_code == 0
    assert habit_repo.get_by_id(habit.id) is None


def test_export_requires_a_target(run):
    result = run("export")

    assert result.exit_code == 2


def test_export_writes_files(run, habit_factory, habit_repo, tmp_path):
    habit = habit_factory(name="Journal")
    habit_repo.add_completion(habit.id, date(2024, 3, 13))
    csv_path = tmp_path / "stats.csv"
    png_path = tmp_path / "history.png"

    result = run("export", "--csv", str(csv_path), "--png", str(png_path), "--on", "2024-03-13")

    assert result.exit_code == 0, result.output
    with csv_path.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))
    assert rows[0]["name"] == "Journal"
    assert rows[0]["is_completed_today"] == "True"
    assert png_path.exists()


def test_bootstraps_sqlite_store_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("HABITPULSE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HABITPULSE_DEV_MODE", "false")
    monkeypatch.delenv("HABITPULSE_DATABASE_URL", raising=False)
    runner = CliRunner()

    try:
        added = runner.invoke(main, ["habits", "add", "Floss"])
        listed = runner.invoke(main, ["habits", "list"])
    finally:
        logger = logging.getLogger("habitpulse")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    assert added.exit_code == 0, added.output
    assert "Floss" in listed.output
    assert (tmp_path / "habitpulse.db").exists()
    assert (tmp_path / "logs" / "habitpulse.log").exists()

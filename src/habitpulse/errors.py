"""Exceptions raised by HabitPulse helpers."""

from __future__ import annotations


class InvalidDateError(ValueError):
    """A completion date is not a valid ``YYYY-MM-DD`` calendar date."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid calendar date: {value!r} (expected YYYY-MM-DD)")
        self.value = value


__all__ = ["InvalidDateError"]

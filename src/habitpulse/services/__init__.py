"""Service module exports."""

from . import dates, history, reports, stats

__all__ = ["dates", "history", "reports", "stats"]

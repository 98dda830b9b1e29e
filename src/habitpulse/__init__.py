"""HabitPulse habit tracker package."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, InMemoryConfig

__version__ = "0.1.0"

__all__ = ["BaseConfig", "DevConfig", "InMemoryConfig", "__version__"]

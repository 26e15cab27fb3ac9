"""HabitHub weekly habit tracking."""

__version__ = "1.0.0"

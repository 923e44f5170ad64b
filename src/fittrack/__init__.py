"""Local-first fitness tracking core: streaks, progression and personal records."""

__version__ = "0.1.0"

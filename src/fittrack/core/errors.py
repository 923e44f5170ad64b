"""Exceptions raised by the fitness core.

Expected business outcomes (freeze quota exhausted, no active streak) are
returned as values. Only broken invariants and storage failures raise.
"""


class FitTrackError(Exception):
    """Base class for fittrack errors."""


class StreakInvariantError(FitTrackError):
    """More than one streak is marked active."""

    def __init__(self, active_ids: list[str]) -> None:
        self.active_ids = active_ids
        super().__init__(f"Expected at most one active streak, found {len(active_ids)}")

"""Exception types raised by shotchain."""
from __future__ import annotations


class ShotchainError(Exception):
    """Base class for all shotchain errors."""


class UnknownShotError(ShotchainError, KeyError):
    def __init__(self, shot_id: str) -> None:
        super().__init__(shot_id)
        self.shot_id = shot_id

    def __str__(self) -> str:
        return f"Unknown shot: {self.shot_id}"


class SnapshotError(ShotchainError):
    """A storyboard snapshot could not be read or validated."""

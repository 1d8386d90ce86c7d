"""core/errors.py — Exceptions for contract violations.

The simulation core does no I/O, so the only errors it raises are
caller bugs: stepping a run that is not running, passing something
that isn't a ``MovementIntent``, or asking for a difficulty tier that
doesn't exist.
"""

from __future__ import annotations


class GameError(Exception):
    """Base class for every error raised by the game core."""


class InvalidStep(GameError):
    """``step()`` was called with a state or intent it cannot accept."""


class UnknownDifficulty(GameError, KeyError):
    """A difficulty tag that is not in the closed profile table."""

    def __init__(self, tag):
        super().__init__(tag)
        self.tag = tag

    def __str__(self) -> str:
        return f"unknown difficulty {self.tag!r}"

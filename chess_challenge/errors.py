"""Exception types raised by the chess challenge solver.

``InvalidInput`` is the only error a well-behaved caller should ever see; the
remaining classes signal a defect in the internal wiring and are never retried.
"""


class ChessChallengeError(Exception):
    """Base class for every error raised by this package."""


class InvalidInput(ChessChallengeError, ValueError):
    """Malformed arguments (empty piece list, bad dimensions, unknown piece)."""


class InvalidLocation(ChessChallengeError, ValueError):
    """A piece origin lies outside the board dimensions."""


class OutOfBounds(ChessChallengeError, IndexError):
    """A board cell was accessed outside the board dimensions."""


class InternalConsistencyError(ChessChallengeError, AssertionError):
    """The first piece could not be placed on an empty board square."""

"""
Exception hierarchy for the fold lattice.

Illegal moves are not errors: the verification engine reports them as data.
Exceptions are reserved for malformed input and programming errors.
"""


class TetrafoldError(Exception):
    """Base class for all tetrafold errors."""


class InvalidInput(TetrafoldError, ValueError):
    """Malformed construction input (equal endpoints, off-lattice point, unknown cover)."""


class InvalidLatticeState(TetrafoldError, RuntimeError):
    """Operation on a shape or enum value the board does not know about."""

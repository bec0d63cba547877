"""Exceptions raised by the backgammon position model and move generator."""


class ParseError(ValueError):
    """A position string could not be decoded into a valid board."""


class IllegalSubmoveError(ValueError):
    """A caller-supplied submove cannot be played from the given position."""


class InvariantViolation(RuntimeError):
    """
    A board broke checker conservation (15 checkers per side).

    This indicates a bug in move application, never bad input, so it
    is not retried.
    """

"""
Move value types.

Submoves are written from the mover's perspective: points count down
toward the mover's home board, 25 is the bar and 0 is borne off. This
matches how moves are read aloud ("bar/22", "6/off") for either side.
"""
from dataclasses import dataclass
from typing import Tuple

BAR_POINT = 25
OFF_POINT = 0


@dataclass(frozen=True)
class Submove:
    """A single checker movement using one die."""

    origin: int
    destination: int
    die: int = 0
    hit: bool = False

    @property
    def is_entry(self) -> bool:
        return self.origin == BAR_POINT

    @property
    def is_bear_off(self) -> bool:
        return self.destination == OFF_POINT


@dataclass(frozen=True)
class Move:
    """
    A complete play for one turn.

    ``submoves`` holds the whole turn, including the ``prefix_length``
    submoves the caller had already played before asking for the rest.
    """

    side: str
    dice: Tuple[int, int]
    submoves: Tuple[Submove, ...]
    description: str
    prefix_length: int = 0

    @property
    def continuation(self) -> Tuple[Submove, ...]:
        return self.submoves[self.prefix_length:]

    @property
    def dice_used(self) -> Tuple[int, ...]:
        return tuple(submove.die for submove in self.submoves)


def expand_dice(dice: Tuple[int, int]) -> list:
    """Doubles give four moves."""
    die1, die2 = dice
    if die1 == die2:
        return [die1] * 4
    return [die1, die2]

"""
Immutable backgammon board model.

Board Representation:
    Points are numbered 1-24 exactly as they appear in an XGID string.

    Positive values: White checkers (player 1). White moves from 24
        toward 1, its home board is points 1-6 and it enters from the
        bar onto points 19-24.
    Negative values: Black checkers (player 2). Black moves from 1
        toward 24, its home board is points 19-24 and it enters from
        the bar onto points 1-6.

    Bar and borne-off checkers are held per side outside the points.
"""
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .exceptions import InvariantViolation

WHITE = 'white'
BLACK = 'black'
CENTER = 'center'

TOTAL_POINTS = 24
CHECKERS_PER_PLAYER = 15

PLAYER_SIDES = {1: WHITE, 2: BLACK}


def opponent_of(side: str) -> str:
    """Return the other side."""
    return BLACK if side == WHITE else WHITE


def side_for_player(player: int) -> str:
    """Map a player number (1 or 2) to its side."""
    try:
        return PLAYER_SIDES[player]
    except KeyError:
        raise ValueError(f"Player must be 1 or 2, got {player!r}") from None


def player_for_side(side: str) -> int:
    """Map a side back to its player number."""
    return 1 if side == WHITE else 2


@dataclass(frozen=True)
class BoardState:
    """
    A complete backgammon position.

    Attributes:
        points: 24 signed checker counts, index 0 is point 1.
        white_bar / black_bar: Checkers waiting to re-enter.
        white_off / black_off: Checkers already borne off.
        turn: Side on roll.
        cube_value: Current cube value (1, 2, 4, ...).
        cube_owner: 'center', 'white' or 'black'.
        dice: The roll to play, or None while the roll is pending.
        white_score / black_score: Match score.
        crawford_jacoby: Raw rules flag. Crawford in match play,
            Jacoby (bit 1) and beaver (bit 2) in money play.
        match_length: 0 for a money game.
        max_cube: Maximum cube exponent.
    """

    points: Tuple[int, ...]
    white_bar: int = 0
    black_bar: int = 0
    white_off: int = 0
    black_off: int = 0
    turn: str = WHITE
    cube_value: int = 1
    cube_owner: str = CENTER
    dice: Optional[Tuple[int, int]] = None
    white_score: int = 0
    black_score: int = 0
    crawford_jacoby: int = 0
    match_length: int = 0
    max_cube: int = 0

    def __post_init__(self):
        if not isinstance(self.points, tuple):
            object.__setattr__(self, 'points', tuple(self.points))
        if len(self.points) != TOTAL_POINTS:
            raise InvariantViolation(
                f"Board must have {TOTAL_POINTS} points, got {len(self.points)}"
            )
        if min(self.white_bar, self.black_bar, self.white_off, self.black_off) < 0:
            raise InvariantViolation("Bar and borne-off counts cannot be negative")
        for side in (WHITE, BLACK):
            total = self.checker_count(side)
            if total != CHECKERS_PER_PLAYER:
                raise InvariantViolation(
                    f"{side} has {total} checkers, expected {CHECKERS_PER_PLAYER}"
                )

    @classmethod
    def initial(cls, **kwargs) -> 'BoardState':
        """Return the standard starting position."""
        return cls.from_layout(
            white={6: 5, 8: 3, 13: 5, 24: 2},
            black={1: 2, 12: 5, 17: 3, 19: 5},
            **kwargs,
        )

    @classmethod
    def from_layout(
        cls,
        white: Mapping[int, int],
        black: Mapping[int, int],
        white_bar: int = 0,
        black_bar: int = 0,
        **kwargs,
    ) -> 'BoardState':
        """
        Build a board from per-side {point: count} layouts.

        Checkers not placed on a point or the bar are taken as borne off.
        """
        points = [0] * TOTAL_POINTS
        for point, count in white.items():
            points[point - 1] += count
        for point, count in black.items():
            if points[point - 1]:
                raise InvariantViolation(f"Point {point} holds checkers of both sides")
            points[point - 1] -= count
        white_on = sum(white.values()) + white_bar
        black_on = sum(black.values()) + black_bar
        return cls(
            points=tuple(points),
            white_bar=white_bar,
            black_bar=black_bar,
            white_off=CHECKERS_PER_PLAYER - white_on,
            black_off=CHECKERS_PER_PLAYER - black_on,
            **kwargs,
        )

    def point(self, number: int) -> Tuple[Optional[str], int]:
        """Return (owner, count) for point 1-24; owner is None when empty."""
        count = self.points[number - 1]
        if count > 0:
            return WHITE, count
        if count < 0:
            return BLACK, -count
        return None, 0

    def bar(self, side: str) -> int:
        return self.white_bar if side == WHITE else self.black_bar

    def off(self, side: str) -> int:
        return self.white_off if side == WHITE else self.black_off

    def checker_count(self, side: str) -> int:
        """Count every checker a side owns: points, bar and borne off."""
        if side == WHITE:
            on_points = sum(count for count in self.points if count > 0)
        else:
            on_points = -sum(count for count in self.points if count < 0)
        return on_points + self.bar(side) + self.off(side)

    def position_key(self) -> Tuple:
        """Checker placement only; equal keys mean the same position."""
        return (self.points, self.white_bar, self.black_bar, self.white_off, self.black_off)

    @property
    def is_crawford(self) -> bool:
        return self.match_length > 0 and self.crawford_jacoby == 1

    @property
    def jacoby(self) -> bool:
        return self.match_length == 0 and bool(self.crawford_jacoby & 1)

    @property
    def beaver(self) -> bool:
        return self.match_length == 0 and bool(self.crawford_jacoby & 2)

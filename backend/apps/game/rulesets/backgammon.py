"""
Backgammon-specific rule implementation.

This module contains the single-checker rules of backgammon:
- Entering from the bar
- Blocked points and hitting blots
- Bearing off
- Win condition and win type detection

Rules are applied to a SideView, a mutable mover-relative copy of a
BoardState that lets both sides share one code path.

SideView Representation:
    mine[1..24]: Mover's checkers, numbered toward the mover's home.
    mine[25]: Mover's bar.
    mine[0]: Mover's borne-off checkers.

    theirs[1..24]: Opponent checkers at the same mover-relative points.
    theirs[0]: Opponent's bar (they enter onto the mover's 1-6).
    theirs[25]: Opponent's borne-off checkers.
"""
from dataclasses import replace
from typing import List, Optional

from ..board import BLACK, CHECKERS_PER_PLAYER, TOTAL_POINTS, WHITE, BoardState, opponent_of
from ..moves import BAR_POINT, OFF_POINT, Submove


class SideView:
    """Mutable mover-relative board used during search."""

    __slots__ = ('mine', 'theirs')

    def __init__(self, mine: List[int], theirs: List[int]):
        self.mine = mine
        self.theirs = theirs

    @classmethod
    def from_board(cls, board: BoardState, side: str) -> 'SideView':
        mine = [0] * 26
        theirs = [0] * 26
        white_is_mover = side == WHITE
        for index, count in enumerate(board.points):
            if not count:
                continue
            absolute = index + 1
            relative = absolute if white_is_mover else 25 - absolute
            if (count > 0) == white_is_mover:
                mine[relative] = abs(count)
            else:
                theirs[relative] = abs(count)

        opponent = opponent_of(side)
        mine[BAR_POINT] = board.bar(side)
        mine[OFF_POINT] = board.off(side)
        theirs[0] = board.bar(opponent)
        theirs[25] = board.off(opponent)
        return cls(mine, theirs)

    def copy(self) -> 'SideView':
        return SideView(self.mine[:], self.theirs[:])

    def key(self) -> tuple:
        return tuple(self.mine) + tuple(self.theirs)

    def to_board(self, template: BoardState, side: str) -> BoardState:
        """
        Write the view back as a BoardState.

        The result has the opponent on roll with the roll pending; all
        other fields are carried over from ``template``.
        """
        sign = 1 if side == WHITE else -1
        points = [0] * TOTAL_POINTS
        for relative in range(1, TOTAL_POINTS + 1):
            absolute = relative if side == WHITE else 25 - relative
            points[absolute - 1] = sign * (self.mine[relative] - self.theirs[relative])

        bars = {side: self.mine[BAR_POINT], opponent_of(side): self.theirs[0]}
        offs = {side: self.mine[OFF_POINT], opponent_of(side): self.theirs[25]}
        return replace(
            template,
            points=tuple(points),
            white_bar=bars[WHITE],
            black_bar=bars[BLACK],
            white_off=offs[WHITE],
            black_off=offs[BLACK],
            turn=opponent_of(side),
            dice=None,
        )


class BackgammonRuleSet:
    """
    Backgammon movement rules.

    Implements:
    - Bar entry before any other move
    - Landing restrictions and hitting blots
    - Bearing off once every checker is home, including the
      higher-die rule for the farthest checker
    - Gammon and backgammon scoring with the cube
    """

    BAR = BAR_POINT
    OFF = OFF_POINT
    HOME_BOARD_END = 6
    CHECKERS_PER_PLAYER = CHECKERS_PER_PLAYER

    def legal_submoves(self, view: SideView, die: int) -> List[Submove]:
        """
        All legal single-checker moves for one die, highest origin first.
        """
        mine, theirs = view.mine, view.theirs

        # Must enter from the bar first
        if mine[self.BAR]:
            target = self.BAR - die
            if self._can_land_on(view, target):
                return [Submove(self.BAR, target, die, theirs[target] == 1)]
            return []

        farthest = self._farthest_checker(view)
        can_bear_off = farthest <= self.HOME_BOARD_END

        submoves = []
        for origin in range(farthest, 0, -1):
            if not mine[origin]:
                continue
            target = origin - die
            if target >= 1:
                if self._can_land_on(view, target):
                    submoves.append(Submove(origin, target, die, theirs[target] == 1))
            elif can_bear_off and (target == 0 or origin == farthest):
                submoves.append(Submove(origin, self.OFF, die))
        return submoves

    def execute(self, view: SideView, submove: Submove) -> None:
        """Apply a submove to the view in place."""
        mine, theirs = view.mine, view.theirs
        mine[submove.origin] -= 1
        if submove.destination == self.OFF:
            mine[self.OFF] += 1
            return

        target = submove.destination
        if theirs[target] == 1:
            theirs[target] = 0
            theirs[0] += 1
        mine[target] += 1

    def check_winner(self, board: BoardState) -> Optional[str]:
        """Check if a player has borne off all checkers."""
        if board.white_off == self.CHECKERS_PER_PLAYER:
            return WHITE
        if board.black_off == self.CHECKERS_PER_PLAYER:
            return BLACK
        return None

    def win_type(self, board: BoardState, winner: str) -> str:
        """Return 'normal', 'gammon' or 'backgammon' for a finished game."""
        loser = opponent_of(winner)
        if board.off(loser) > 0:
            return 'normal'
        loser_view = SideView.from_board(board, loser)
        # Loser still on the bar or in the winner's home board
        if any(loser_view.mine[point] for point in range(19, 26)):
            return 'backgammon'
        return 'gammon'

    # Private helper methods

    def _can_land_on(self, view: SideView, point: int) -> bool:
        """Check if the mover can land on a point."""
        return view.theirs[point] < 2

    def _farthest_checker(self, view: SideView) -> int:
        """Highest mover-relative point holding a mover checker, 0 if none."""
        mine = view.mine
        for point in range(self.BAR, 0, -1):
            if mine[point]:
                return point
        return 0

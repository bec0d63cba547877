"""
Backgammon move generator.

Expands a dice roll into every legal full-turn play:
- Bar entry before anything else
- Doubles played four times
- Forced maximal play (use as many dice as possible, and the larger
  die when only one of two can be played)
- Plays reaching the same position collapse to one representative
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..board import BoardState
from ..exceptions import IllegalSubmoveError
from ..moves import BAR_POINT, Move, Submove, expand_dice
from ..notation import describe, format_submove
from ..rulesets.backgammon import BackgammonRuleSet, SideView

logger = logging.getLogger(__name__)

Leaf = Tuple[SideView, Tuple[Submove, ...]]


@dataclass(frozen=True)
class LegalPlay:
    """A legal play and the position it leads to."""

    move: Move
    board: BoardState


class MoveGenerator:
    """
    Generates legal plays for a position and roll.

    Example:
        generator = MoveGenerator()
        plays = generator.generate(board, (6, 5), 'white')
        for play in plays:
            print(play.move.description)
    """

    def __init__(self, rules: Optional[BackgammonRuleSet] = None):
        self.rules = rules or BackgammonRuleSet()

    def generate(
        self,
        board: BoardState,
        dice: Optional[Sequence[int]],
        side: str,
        already_used: Iterable[Submove] = (),
    ) -> List[LegalPlay]:
        """
        Return every distinct legal play, sorted by description.

        Args:
            board: Position before the play.
            dice: The roll, or None while the roll is pending.
            side: 'white' or 'black'.
            already_used: Submoves of this turn the player has already
                made, in mover-relative notation. They are applied first
                and only the remaining dice are searched.

        Returns:
            LegalPlays whose moves hold the prefix plus a continuation
            using the maximum number of remaining dice. Empty when the
            roll is pending, nothing is left to play, or no move is legal.

        Raises:
            IllegalSubmoveError: If a submove in ``already_used`` cannot
                be played.
        """
        if dice is None:
            return []
        dice = tuple(dice)
        if len(dice) != 2 or not all(1 <= die <= 6 for die in dice):
            raise ValueError(f"Dice must be two values from 1 to 6, got {dice!r}")

        view = SideView.from_board(board, side)
        remaining = expand_dice(dice)
        prefix = self._apply_prefix(view, remaining, already_used)
        if not remaining:
            return []

        leaves: List[Leaf] = []
        if len(set(remaining)) == 1:
            self._search_doubles(view, remaining[0], len(remaining), BAR_POINT, (), leaves)
        else:
            self._search(view, remaining, (), leaves)

        most_dice = max(len(path) for _, path in leaves)
        if most_dice == 0:
            return []

        plays = [leaf for leaf in leaves if len(leaf[1]) == most_dice]

        # Only one die of a non-double can be played: the larger one if possible
        if most_dice == 1 and len(remaining) == 2 and remaining[0] != remaining[1]:
            larger = max(remaining)
            with_larger = [leaf for leaf in plays if leaf[1][0].die == larger]
            if with_larger:
                plays = with_larger

        distinct: Dict[tuple, Tuple[str, SideView, Tuple[Submove, ...]]] = {}
        for child, path in plays:
            submoves = tuple(prefix) + path
            description = describe(submoves)
            key = child.key()
            current = distinct.get(key)
            if current is None or description < current[0]:
                distinct[key] = (description, child, submoves)

        results = []
        for description, child, submoves in sorted(distinct.values(), key=lambda entry: entry[0]):
            move = Move(
                side=side,
                dice=dice,
                submoves=submoves,
                description=description,
                prefix_length=len(prefix),
            )
            results.append(LegalPlay(move=move, board=child.to_board(board, side)))

        logger.debug(f"{len(results)} plays for {side} with {dice} from {len(leaves)} sequences")
        return results

    def _apply_prefix(
        self,
        view: SideView,
        remaining: List[int],
        already_used: Iterable[Submove],
    ) -> List[Submove]:
        """Play the caller's submoves, consuming dice from ``remaining``."""
        played = []
        for requested in already_used:
            submove = self._resolve(view, remaining, requested)
            self.rules.execute(view, submove)
            remaining.remove(submove.die)
            played.append(submove)
        return played

    def _resolve(self, view: SideView, remaining: List[int], requested: Submove) -> Submove:
        """Find the legal submove matching ``requested``, preferring the smaller die."""
        for die in sorted(set(remaining)):
            for submove in self.rules.legal_submoves(view, die):
                if (submove.origin, submove.destination) == (requested.origin, requested.destination):
                    return submove
        raise IllegalSubmoveError(
            f"Submove {format_submove(requested)} is not legal with dice {remaining}"
        )

    def _search(
        self,
        view: SideView,
        remaining: List[int],
        path: Tuple[Submove, ...],
        leaves: List[Leaf],
    ) -> None:
        """Depth-first search over both die orders of a non-double."""
        moved = False
        for die in sorted(set(remaining), reverse=True):
            rest = list(remaining)
            rest.remove(die)
            for submove in self.rules.legal_submoves(view, die):
                child = view.copy()
                self.rules.execute(child, submove)
                self._search(child, rest, path + (submove,), leaves)
                moved = True
        if not moved:
            leaves.append((view, path))

    def _search_doubles(
        self,
        view: SideView,
        die: int,
        uses: int,
        highest: int,
        path: Tuple[Submove, ...],
        leaves: List[Leaf],
    ) -> None:
        """
        Depth-first search for doubles.

        Origins never increase along a path. Every reachable position
        has such an ordering, so this skips only permutations.
        """
        moved = False
        if uses:
            for submove in self.rules.legal_submoves(view, die):
                if submove.origin > highest:
                    continue
                child = view.copy()
                self.rules.execute(child, submove)
                self._search_doubles(child, die, uses - 1, submove.origin, path + (submove,), leaves)
                moved = True
        if not moved:
            leaves.append((view, path))

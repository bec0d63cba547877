"""
Heuristic player implementation.

A player that uses the hand-coded evaluation to select moves. It plays
both sides of every rollout trial.
"""
from typing import Any, Dict, List, Optional

from apps.game.board import BoardState
from apps.game.services.move_generator import LegalPlay

from ..evaluation.backgammon import cached_score
from ..evaluation.cache import HeuristicCache
from .base import BasePlayer


class HeuristicPlayer(BasePlayer):
    """
    A player that selects moves using heuristic evaluation.

    Scores the position each legal play leads to and selects the best
    one (greedy one-ply lookahead). Ties go to the play listed first,
    and plays arrive sorted by description, so the choice is
    deterministic for a given position and roll.

    Attributes:
        weights: Custom weights for evaluation factors.
        cache: Optional shared cache for position scores.

    Example:
        player = HeuristicPlayer(player_id='rollout_white', side='white')
        play = player.select_action(board, generator.generate(board, dice, 'white'))
    """

    def __init__(
        self,
        player_id: str,
        side: str,
        name: Optional[str] = None,
        weights: Optional[Dict[str, float]] = None,
        cache: Optional[HeuristicCache] = None,
    ):
        """
        Initialize a heuristic player.

        Args:
            player_id: Unique identifier for this player.
            side: Side this player moves.
            name: Optional display name.
            weights: Optional custom weights for evaluation.
            cache: Optional HeuristicCache shared with other players.
        """
        super().__init__(
            player_id=player_id,
            side=side,
            name=name or 'Heuristic Player',
        )
        self.weights = weights
        self.cache = cache

    def select_action(
        self,
        board: BoardState,
        legal_plays: List[LegalPlay],
    ) -> LegalPlay:
        """
        Select the play leading to the best evaluated position.

        Raises:
            ValueError: If legal_plays is empty.
        """
        if not legal_plays:
            raise ValueError("Cannot select from empty play list")

        if len(legal_plays) == 1:
            return legal_plays[0]

        best_play = legal_plays[0]
        best_value = float('-inf')

        for play in legal_plays:
            value = self.evaluate(play.board)
            if value > best_value:
                best_value = value
                best_play = play

        return best_play

    def evaluate(self, board: BoardState) -> float:
        """Score a position from this player's side."""
        return cached_score(board, self.side, self.cache, self.weights)

    def get_player_type(self) -> str:
        """Return 'heuristic' as the player type."""
        return 'heuristic'

    def get_config(self) -> Dict[str, Any]:
        """Return configuration including weights."""
        config = super().get_config()
        config['weights'] = self.weights
        return config

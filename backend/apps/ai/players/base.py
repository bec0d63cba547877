"""
Base player abstraction for rollout players.

This module defines the interface a player must implement to take part
in rollouts. The key method is `select_action`, which takes the current
board and the list of legal plays, returning the chosen play.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from apps.game.board import BoardState
from apps.game.services.move_generator import LegalPlay


class BasePlayer(ABC):
    """
    Abstract base class for rollout players.

    Attributes:
        player_id: Unique identifier for this player instance.
        side: The side this player moves ('white' or 'black').
        name: Human-readable name for display purposes.

    Example:
        class FirstPlayPlayer(BasePlayer):
            def select_action(self, board, legal_plays):
                return legal_plays[0]

            def get_player_type(self):
                return 'first'
    """

    def __init__(
        self,
        player_id: str,
        side: str,
        name: Optional[str] = None,
    ):
        """
        Initialize a player.

        Args:
            player_id: Unique identifier for this player.
            side: Side this player moves.
            name: Optional display name. Defaults to player_id if not provided.
        """
        self.player_id = player_id
        self.side = side
        self.name = name or player_id

    @abstractmethod
    def select_action(
        self,
        board: BoardState,
        legal_plays: List[LegalPlay],
    ) -> LegalPlay:
        """
        Choose a play from the list of legal plays.

        Args:
            board: Position before the play, with this player on roll.
            legal_plays: Every legal play for the current dice, as
                returned by MoveGenerator.generate().

        Returns:
            A single LegalPlay from legal_plays.

        Raises:
            ValueError: If legal_plays is empty.
        """

    @abstractmethod
    def get_player_type(self) -> str:
        """
        Return the type identifier for this player.

        Used for serialization and logging.
        """

    def get_config(self) -> Dict[str, Any]:
        """
        Return player configuration for serialization.

        Override to include additional configuration specific to
        your player implementation.
        """
        return {
            'player_id': self.player_id,
            'side': self.side,
            'name': self.name,
            'type': self.get_player_type(),
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.player_id}, side={self.side})"

    def __str__(self) -> str:
        return f"{self.name} ({self.get_player_type()})"

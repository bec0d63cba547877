"""
Pytest fixtures for AI app tests.

Provides fixtures for:
- Small engine configurations
- Heuristic caches
- Sample boards and legal plays
"""
import pytest

from apps.ai.conf import EngineConfig
from apps.ai.evaluation.cache import HeuristicCache
from apps.game.board import BoardState
from apps.game.services.move_generator import MoveGenerator


@pytest.fixture
def engine_config():
    """Config with short rollouts and a small pool."""
    return EngineConfig(
        heuristic_cache_size=5000,
        rollout_max_plies=4,
        max_workers=2,
        default_deadline_seconds=60.0,
    )


@pytest.fixture
def heuristic_cache():
    """Fresh heuristic cache."""
    return HeuristicCache(max_entries=5000)


@pytest.fixture
def initial_board():
    """The standard starting position."""
    return BoardState.initial()


@pytest.fixture
def white_won_board():
    """White has borne off everything; black never got home."""
    return BoardState.from_layout(white={}, black={12: 15})


@pytest.fixture
def opening_plays(initial_board):
    """Every legal play for white's opening 6-5."""
    return MoveGenerator().generate(initial_board, (6, 5), 'white')

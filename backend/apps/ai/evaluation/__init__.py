"""
Position evaluation for backgammon.

These functions provide hand-coded heuristics for evaluating
positions, used for:
- Scoring candidate plays
- Choosing moves during rollouts
- Understanding what makes positions good/bad
"""
from .backgammon import (
    DEFAULT_WEIGHTS,
    anchor_count,
    blot_count,
    blot_exposure,
    builder_coverage,
    cached_score,
    hit_probability,
    home_board_strength,
    longest_prime,
    made_points_count,
    opponent_blot_count,
    pip_count,
    race_position,
    score,
    score_breakdown,
)
from .cache import HeuristicCache

__all__ = [
    'DEFAULT_WEIGHTS',
    'HeuristicCache',
    'anchor_count',
    'blot_count',
    'blot_exposure',
    'builder_coverage',
    'cached_score',
    'hit_probability',
    'home_board_strength',
    'longest_prime',
    'made_points_count',
    'opponent_blot_count',
    'pip_count',
    'race_position',
    'score',
    'score_breakdown',
]

"""
Candidate ranking.

Combines the heuristic score and the rollout win rate of every
candidate play:

    combined = heuristic_weight * normalize(heuristic) + mc_weight * mc

normalize() is a fixed logistic squashing of the heuristic onto the
0-1 probability scale. Weights are free linear coefficients and are
not renormalized. When no rollout ran, the mc term is left out.

Ordering is total: combined score descending, then rollout win rate
descending (candidates without one last), then description ascending.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from apps.game.board import BoardState
from apps.game.moves import Move
from apps.game.notation import encode, format_submove


def normalize_heuristic(value: float, scale: float = 1.0) -> float:
    """Map a heuristic score onto (0, 1) with a logistic curve."""
    x = value / scale
    # Two branches so math.exp never overflows
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)


@dataclass
class Candidate:
    """A legal play with its scores."""
    move: Move
    board: BoardState
    heuristic_score: float
    mc_score: Optional[float] = None
    trials: int = 0
    trials_requested: int = 0
    std_error: Optional[float] = None
    combined_score: float = field(default=0.0)
    breakdown: Optional[Dict[str, Dict[str, float]]] = None

    @property
    def description(self) -> str:
        return self.move.description

    @property
    def partial(self) -> bool:
        return self.trials < self.trials_requested

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'description': self.description,
            'submoves': [format_submove(submove) for submove in self.move.submoves],
            'position': encode(self.board),
            'heuristicScore': self.heuristic_score,
            'mcScore': self.mc_score,
            'stdError': self.std_error,
            'trials': self.trials,
            'trialsRequested': self.trials_requested,
            'partial': self.partial,
            'combinedScore': self.combined_score,
        }
        if self.breakdown is not None:
            data['breakdown'] = self.breakdown
        return data


def combined_score(
    candidate: Candidate,
    heuristic_weight: float,
    mc_weight: float,
    scale: float = 1.0,
) -> float:
    value = heuristic_weight * normalize_heuristic(candidate.heuristic_score, scale)
    if candidate.mc_score is not None:
        value += mc_weight * candidate.mc_score
    return value


def _sort_key(candidate: Candidate):
    mc = candidate.mc_score if candidate.mc_score is not None else float('-inf')
    return (-candidate.combined_score, -mc, candidate.description)


def rank_candidates(
    candidates: List[Candidate],
    heuristic_weight: float,
    mc_weight: float,
    scale: float = 1.0,
) -> List[Candidate]:
    """
    Score and order candidates, best first.

    Sets ``combined_score`` on each candidate and returns a new list.
    """
    for candidate in candidates:
        candidate.combined_score = combined_score(candidate, heuristic_weight, mc_weight, scale)
    return sorted(candidates, key=_sort_key)


def top_moves(ranked: List[Candidate], max_top_moves: int) -> List[Candidate]:
    """Keep the best ``max_top_moves`` of an already ranked list."""
    if max_top_moves < 1:
        raise ValueError(f"max_top_moves must be at least 1, got {max_top_moves}")
    return ranked[:max_top_moves]

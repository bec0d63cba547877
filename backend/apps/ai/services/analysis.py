"""
Position analysis service.

Turns an EvaluationRequest into a ranked list of candidate plays:

1. Decode the position
2. Generate every legal play for the dice
3. Score each resulting position with the heuristic
4. Roll out each position when simulations are requested
5. Rank, then keep the top moves

Steps 3 and 4 run on one thread pool per request; ranking waits for
all of them.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from apps.game.board import player_for_side, side_for_player
from apps.game.moves import Submove
from apps.game.notation import decode
from apps.game.services.move_generator import MoveGenerator

from ..conf import EngineConfig
from ..evaluation.backgammon import cached_score, score_breakdown
from ..evaluation.cache import HeuristicCache
from ..ranking import Candidate, rank_candidates, top_moves
from ..simulation.rollout import RolloutEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationRequest:
    """
    Options for one analysis.

    ``dice`` of None means use the dice in the position (still None if
    the roll is pending). ``num_simulations`` of 0 means heuristic only.
    ``max_top_moves`` has no default.
    """
    position: str
    player_to_move: int
    dice: Optional[Tuple[int, int]]
    heuristic_weight: float
    mc_weight: float
    max_top_moves: int
    already_used_submoves: Tuple[Submove, ...] = ()
    num_simulations: int = 0
    debug: bool = False
    deadline_seconds: Optional[float] = None
    seed: Optional[int] = None

    def __post_init__(self):
        side_for_player(self.player_to_move)
        if self.max_top_moves < 1:
            raise ValueError(f"max_top_moves must be at least 1, got {self.max_top_moves}")
        if self.num_simulations < 0:
            raise ValueError(f"num_simulations cannot be negative, got {self.num_simulations}")
        if self.deadline_seconds is not None and self.deadline_seconds <= 0:
            raise ValueError(f"deadline_seconds must be positive, got {self.deadline_seconds}")
        if self.dice is not None:
            object.__setattr__(self, 'dice', tuple(self.dice))
        object.__setattr__(self, 'already_used_submoves', tuple(self.already_used_submoves))

    @property
    def runs_rollouts(self) -> bool:
        # A zero mc weight would discard the rollouts, so none are run
        return self.num_simulations > 0 and self.mc_weight != 0


@dataclass
class EvaluationResult:
    """Ranked candidates for a request."""
    position: str
    side: str
    dice: Optional[Tuple[int, int]]
    moves: List[Candidate] = field(default_factory=list)
    all_moves: Optional[List[Candidate]] = None
    elapsed_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'position': self.position,
            'playerToMove': player_for_side(self.side),
            'dice': list(self.dice) if self.dice else None,
            'moves': [candidate.to_dict() for candidate in self.moves],
        }
        if self.all_moves is not None:
            data['allMoves'] = [candidate.to_dict() for candidate in self.all_moves]
        return data


def analyze(
    request: EvaluationRequest,
    config: Optional[EngineConfig] = None,
    cache: Optional[HeuristicCache] = None,
) -> EvaluationResult:
    """
    Rank the legal plays for a request.

    Args:
        request: What to analyze.
        config: Engine limits; defaults to EngineConfig().
        cache: Heuristic cache to use; a private one is created if None.

    Returns:
        EvaluationResult. Its move list is empty when the roll is
        pending or no play is legal.

    Raises:
        ValueError: If more simulations are requested than the config allows.
        ParseError: If the position cannot be decoded.
        IllegalSubmoveError: If an already-used submove is not legal.
        InvariantViolation: If a generated board loses or gains checkers.
    """
    config = config or EngineConfig()
    if request.num_simulations > config.max_simulations:
        raise ValueError(
            f"num_simulations must be at most {config.max_simulations}, got {request.num_simulations}"
        )
    if cache is None:
        cache = HeuristicCache(max_entries=config.heuristic_cache_size)
    started = time.monotonic()

    board = decode(request.position)
    side = side_for_player(request.player_to_move)
    dice = request.dice or board.dice
    result = EvaluationResult(position=request.position, side=side, dice=dice)

    if dice is None:
        logger.info(f"Roll pending for {side}; nothing to analyze")
        return result

    plays = MoveGenerator().generate(board, dice, side, request.already_used_submoves)
    if not plays:
        logger.info(f"No legal play for {side} with {dice}")
        result.elapsed_seconds = time.monotonic() - started
        return result

    deadline_seconds = request.deadline_seconds or config.default_deadline_seconds
    deadline = started + deadline_seconds

    with ThreadPoolExecutor(max_workers=config.worker_count) as executor:
        heuristic_scores = list(executor.map(
            lambda play: cached_score(play.board, side, cache),
            plays,
        ))

        rollouts = {}
        if request.runs_rollouts:
            engine = RolloutEngine(
                cache=cache,
                max_plies=config.rollout_max_plies,
                max_workers=config.worker_count,
            )
            rollouts = engine.estimate_many(
                {play.move.description: play.board for play in plays},
                side,
                request.num_simulations,
                executor,
                deadline=deadline,
                seed=request.seed,
            )

    candidates = []
    for play, heuristic in zip(plays, heuristic_scores):
        rollout = rollouts.get(play.move.description)
        candidates.append(Candidate(
            move=play.move,
            board=play.board,
            heuristic_score=heuristic,
            mc_score=rollout.probability if rollout else None,
            trials=rollout.trials_completed if rollout else 0,
            trials_requested=request.num_simulations if rollout else 0,
            std_error=rollout.std_error if rollout else None,
            breakdown=score_breakdown(play.board, side) if request.debug else None,
        ))

    ranked = rank_candidates(
        candidates,
        request.heuristic_weight,
        request.mc_weight,
        config.heuristic_scale,
    )
    result.moves = top_moves(ranked, request.max_top_moves)
    if request.debug:
        result.all_moves = ranked
    result.elapsed_seconds = time.monotonic() - started

    logger.info(
        f"Analyzed {len(plays)} plays for {side} with {dice} "
        f"({request.num_simulations if request.runs_rollouts else 0} trials each) "
        f"in {result.elapsed_seconds:.2f}s"
    )
    return result

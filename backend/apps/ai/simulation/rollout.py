"""
Monte Carlo rollouts for candidate positions.

Each trial plays a position forward with random dice, both sides moving
with the greedy HeuristicPlayer, until someone bears off all checkers
or a ply limit is reached. The win rate over trials estimates the
probability that the side who just moved wins the game.

Features:
- Fan-out of (candidate, trial) tasks on a shared thread pool, in
  bounded waves so a deadline stops new work promptly
- Cooperative deadline checked before each trial starts
- Per-trial seeding so seeded results do not depend on scheduling
"""
import logging
import os
import random
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from itertools import islice
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from apps.game.board import BoardState, opponent_of
from apps.game.services.move_generator import MoveGenerator

from ..evaluation.backgammon import cached_score
from ..evaluation.cache import HeuristicCache
from ..players.heuristic import HeuristicPlayer

logger = logging.getLogger(__name__)

DEFAULT_MAX_PLIES = 40


@dataclass
class TrialOutcome:
    """Result of a single rollout trial."""
    credit: float  # 1.0 win, 0.0 loss, 0.5 for a level position at the ply limit
    plies: int = 0
    winner: Optional[str] = None  # None when the ply limit ended the trial
    win_type: Optional[str] = None


@dataclass
class RolloutResult:
    """Aggregated rollout estimate for one position."""
    probability: float
    trials_completed: int
    trials_requested: int
    std_error: float = 0.0
    gammon_rate: float = 0.0

    @property
    def partial(self) -> bool:
        return self.trials_completed < self.trials_requested

    def to_dict(self) -> Dict[str, Any]:
        return {
            'probability': self.probability,
            'trials_completed': self.trials_completed,
            'trials_requested': self.trials_requested,
            'std_error': self.std_error,
            'gammon_rate': self.gammon_rate,
            'partial': self.partial,
        }


class RolloutEngine:
    """
    Estimate win probabilities by simulation.

    Example:
        engine = RolloutEngine(max_plies=40)
        result = engine.estimate_equity(play.board, 'white', trials=100, seed=7)
        print(f"Win rate: {result.probability:.3f} +/- {result.std_error:.3f}")
    """

    def __init__(
        self,
        generator: Optional[MoveGenerator] = None,
        cache: Optional[HeuristicCache] = None,
        max_plies: int = DEFAULT_MAX_PLIES,
        max_workers: Optional[int] = None,
        weights: Optional[Dict[str, float]] = None,
    ):
        """
        Initialize the rollout engine.

        Args:
            generator: Move generator used inside trials.
            cache: Heuristic cache shared by every trial.
            max_plies: Plies per trial before scoring the position instead.
            max_workers: Pool size for estimate_equity(); None lets the
                executor decide.
            weights: Optional custom evaluation weights for both players.
        """
        self.generator = generator or MoveGenerator()
        self.rules = self.generator.rules
        self.cache = cache
        self.max_plies = max_plies
        self.max_workers = max_workers
        self.weights = weights

    def estimate_equity(
        self,
        board: BoardState,
        side: str,
        trials: int,
        deadline: Optional[float] = None,
        seed: Optional[int] = None,
    ) -> RolloutResult:
        """
        Roll out a single position on a private thread pool.

        Args:
            board: Position right after ``side`` has moved.
            side: Side whose winning chances are estimated.
            trials: Number of trials requested.
            deadline: time.monotonic() value after which no new trial starts.
            seed: Optional seed for reproducible results.
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            results = self.estimate_many({'': board}, side, trials, executor, deadline, seed)
        return results['']

    def estimate_many(
        self,
        boards: Mapping[str, BoardState],
        side: str,
        trials: int,
        executor: Executor,
        deadline: Optional[float] = None,
        seed: Optional[int] = None,
        wave_size: Optional[int] = None,
    ) -> Dict[str, RolloutResult]:
        """
        Roll out several positions on a shared executor.

        Trials are submitted in waves of ``wave_size`` tasks, interleaved
        across positions (trial 0 of every position, then trial 1, ...),
        and each wave is gathered before the next is submitted. Once the
        deadline passes no further wave is submitted, so a huge trial
        count never queues more than one wave of work.

        Args:
            boards: Positions keyed by a stable name (the move description).
            side: Side whose winning chances are estimated.
            trials: Trials requested per position.
            executor: Pool the trials run on.
            deadline: time.monotonic() value after which no new trial starts.
            seed: Optional seed; trial i of key k always uses the same dice.
            wave_size: Tasks in flight at once; defaults to the worker count.

        Returns:
            RolloutResult per key.
        """
        wave_size = max(1, wave_size or self.max_workers or os.cpu_count() or 1)
        tasks = ((key, board, index) for index in range(trials) for key, board in boards.items())
        completed: Dict[str, List[TrialOutcome]] = {key: [] for key in boards}

        while deadline is None or time.monotonic() < deadline:
            wave = list(islice(tasks, wave_size))
            if not wave:
                break
            futures = [
                (key, executor.submit(self._scheduled_trial, board, side, key, index, deadline, seed))
                for key, board, index in wave
            ]
            for key, future in futures:
                outcome = future.result()
                if outcome is not None:
                    completed[key].append(outcome)

        results = {key: self._aggregate(outcomes, trials) for key, outcomes in completed.items()}

        skipped = trials * len(boards) - sum(len(outcomes) for outcomes in completed.values())
        if skipped:
            logger.warning(
                f"Deadline reached: skipped {skipped} of {trials * len(boards)} rollout trials"
            )
        return results

    def run_trial(self, board: BoardState, side: str, rng: random.Random) -> TrialOutcome:
        """
        Play one game forward from ``board``.

        The opponent of ``side`` rolls first. Returns the credit for
        ``side``: 1 for a win, 0 for a loss, and at the ply limit the
        side with the better heuristic score is credited.
        """
        opponent = opponent_of(side)
        players = {
            side: HeuristicPlayer(f'rollout_{side}', side, weights=self.weights, cache=self.cache),
            opponent: HeuristicPlayer(f'rollout_{opponent}', opponent, weights=self.weights, cache=self.cache),
        }

        state = board
        mover = opponent
        plies = 0
        winner = self.rules.check_winner(state)

        while winner is None and plies < self.max_plies:
            dice = (rng.randint(1, 6), rng.randint(1, 6))
            legal_plays = self.generator.generate(state, dice, mover)
            if legal_plays:
                state = players[mover].select_action(state, legal_plays).board
            mover = opponent_of(mover)
            plies += 1
            winner = self.rules.check_winner(state)

        if winner is not None:
            return TrialOutcome(
                credit=1.0 if winner == side else 0.0,
                plies=plies,
                winner=winner,
                win_type=self.rules.win_type(state, winner),
            )

        return TrialOutcome(credit=self._cutoff_credit(state, side), plies=plies)

    def _scheduled_trial(
        self,
        board: BoardState,
        side: str,
        key: str,
        index: int,
        deadline: Optional[float],
        seed: Optional[int],
    ) -> Optional[TrialOutcome]:
        """Run one trial unless the deadline has already passed."""
        if deadline is not None and time.monotonic() >= deadline:
            return None
        return self.run_trial(board, side, self._trial_rng(seed, key, index))

    @staticmethod
    def _trial_rng(seed: Optional[int], key: str, index: int) -> random.Random:
        if seed is None:
            return random.Random()
        return random.Random(f'{seed}:{key}:{index}')

    def _cutoff_credit(self, board: BoardState, side: str) -> float:
        own = cached_score(board, side, self.cache, self.weights)
        other = cached_score(board, opponent_of(side), self.cache, self.weights)
        if own > other:
            return 1.0
        if own < other:
            return 0.0
        return 0.5

    @staticmethod
    def _aggregate(completed: List[TrialOutcome], requested: int) -> RolloutResult:
        if not completed:
            return RolloutResult(probability=0.5, trials_completed=0, trials_requested=requested)

        credits = np.array([outcome.credit for outcome in completed], dtype=float)
        gammons = np.array(
            [outcome.credit == 1.0 and outcome.win_type in ('gammon', 'backgammon')
             for outcome in completed],
            dtype=float,
        )
        std_error = float(credits.std(ddof=1) / np.sqrt(len(credits))) if len(credits) > 1 else 0.0
        return RolloutResult(
            probability=float(credits.mean()),
            trials_completed=len(completed),
            trials_requested=requested,
            std_error=std_error,
            gammon_rate=float(gammons.mean()),
        )

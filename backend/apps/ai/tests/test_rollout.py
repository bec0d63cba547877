"""
Tests for Monte Carlo rollouts.

Tests RolloutEngine for:
- Terminal positions
- Seeded reproducibility
- Deadline handling and partial results
- Bounded submission waves
- Aggregated statistics and convergence
"""
import random
import statistics
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from apps.ai.simulation.rollout import RolloutEngine, RolloutResult, TrialOutcome
from apps.game.board import BoardState


@pytest.fixture
def engine(heuristic_cache):
    """Engine with short trials."""
    return RolloutEngine(cache=heuristic_cache, max_plies=4, max_workers=2)


class TestRunTrial:
    """Tests for single trials."""

    def test_finished_game_is_a_win(self, engine, white_won_board):
        outcome = engine.run_trial(white_won_board, 'white', random.Random(1))
        assert outcome.credit == 1.0
        assert outcome.plies == 0
        assert outcome.winner == 'white'
        assert outcome.win_type == 'gammon'

    def test_finished_game_is_a_loss_for_the_other_side(self, engine, white_won_board):
        outcome = engine.run_trial(white_won_board, 'black', random.Random(1))
        assert outcome.credit == 0.0
        assert outcome.winner == 'white'

    def test_ply_limit_scores_the_position(self, engine, initial_board):
        outcome = engine.run_trial(initial_board, 'white', random.Random(3))
        assert outcome.plies == 4
        assert outcome.winner is None
        assert outcome.credit in (0.0, 0.5, 1.0)

    def test_zero_plies_uses_heuristic_at_once(self, heuristic_cache, initial_board):
        engine = RolloutEngine(cache=heuristic_cache, max_plies=0)
        outcome = engine.run_trial(initial_board, 'white', random.Random(3))
        # Symmetric position: neither side scores higher
        assert outcome.plies == 0
        assert outcome.credit == 0.5

    def test_same_rng_same_outcome(self, engine, initial_board):
        first = engine.run_trial(initial_board, 'white', random.Random('7:x:0'))
        second = engine.run_trial(initial_board, 'white', random.Random('7:x:0'))
        assert first == second


class TestEstimate:
    """Tests for aggregated estimates."""

    def test_estimate_equity_on_won_position(self, engine, white_won_board):
        result = engine.estimate_equity(white_won_board, 'white', trials=5, seed=1)
        assert result.probability == 1.0
        assert result.trials_completed == 5
        assert result.std_error == 0.0
        assert result.gammon_rate == 1.0
        assert not result.partial

    def test_seeded_results_repeat(self, engine, initial_board):
        first = engine.estimate_equity(initial_board, 'white', trials=6, seed=42)
        second = engine.estimate_equity(initial_board, 'white', trials=6, seed=42)
        assert first == second

    def test_estimate_many_keys(self, engine, initial_board, white_won_board):
        boards = {'level': initial_board, 'won': white_won_board}
        with ThreadPoolExecutor(max_workers=2) as executor:
            results = engine.estimate_many(boards, 'white', 3, executor, seed=5)

        assert set(results) == {'level', 'won'}
        assert results['won'].probability == 1.0
        assert results['level'].trials_completed == 3

    def test_expired_deadline_skips_all_trials(self, engine, initial_board):
        result = engine.estimate_equity(
            initial_board, 'white', trials=5, deadline=time.monotonic() - 1.0, seed=1,
        )
        assert result.trials_completed == 0
        assert result.trials_requested == 5
        assert result.probability == 0.5
        assert result.partial

    def test_aggregate_statistics(self):
        outcomes = [
            TrialOutcome(credit=1.0, winner='white', win_type='gammon'),
            TrialOutcome(credit=0.0, winner='black', win_type='normal'),
            TrialOutcome(credit=1.0, winner='white', win_type='normal'),
            TrialOutcome(credit=0.0, winner='black', win_type='gammon'),
        ]
        result = RolloutEngine._aggregate(outcomes, 4)

        assert result.probability == pytest.approx(0.5)
        # Sample std of [1, 0, 1, 0] is sqrt(1/3); divided by sqrt(4)
        assert result.std_error == pytest.approx((1 / 3) ** 0.5 / 2)
        assert result.gammon_rate == pytest.approx(0.25)

    def test_single_trial_has_no_error_estimate(self):
        result = RolloutEngine._aggregate([TrialOutcome(credit=1.0)], 1)
        assert result.std_error == 0.0

    def test_result_to_dict(self):
        result = RolloutResult(probability=0.6, trials_completed=3, trials_requested=4)
        data = result.to_dict()
        assert data['probability'] == 0.6
        assert data['partial'] is True

    def test_error_shrinks_with_more_trials(self):
        few = RolloutEngine._aggregate([TrialOutcome(credit=c) for c in [1.0, 0.0] * 2], 4)
        many = RolloutEngine._aggregate([TrialOutcome(credit=c) for c in [1.0, 0.0] * 20], 40)
        assert few.probability == many.probability
        assert many.std_error < few.std_error


class RecordingExecutor(ThreadPoolExecutor):
    """Thread pool that records submissions and checks earlier waves finished."""

    def __init__(self, wave_size):
        super().__init__(max_workers=2)
        self.wave_size = wave_size
        self.submitted = []
        self.tasks = []
        self.overlapped = False

    def submit(self, fn, *args, **kwargs):
        finished_waves = len(self.submitted) // self.wave_size * self.wave_size
        if not all(future.done() for future in self.submitted[:finished_waves]):
            self.overlapped = True
        self.tasks.append((args[2], args[3]))
        future = super().submit(fn, *args, **kwargs)
        self.submitted.append(future)
        return future


class TestSubmissionWaves:
    """Tests for bounded submission of trials."""

    def test_trials_interleave_across_positions(self, engine, initial_board, white_won_board):
        boards = {'level': initial_board, 'won': white_won_board}
        with RecordingExecutor(wave_size=2) as executor:
            engine.estimate_many(boards, 'white', 3, executor, seed=5, wave_size=2)

        assert executor.tasks == [
            ('level', 0), ('won', 0),
            ('level', 1), ('won', 1),
            ('level', 2), ('won', 2),
        ]

    def test_each_wave_finishes_before_the_next(self, engine, initial_board):
        with RecordingExecutor(wave_size=3) as executor:
            results = engine.estimate_many({'a': initial_board}, 'white', 9, executor, seed=1, wave_size=3)

        assert len(executor.submitted) == 9
        assert not executor.overlapped
        assert results['a'].trials_completed == 9

    def test_waves_do_not_change_seeded_results(self, engine, initial_board):
        boards = {'a': initial_board}
        with ThreadPoolExecutor(max_workers=2) as executor:
            narrow = engine.estimate_many(boards, 'white', 6, executor, seed=3, wave_size=1)
            wide = engine.estimate_many(boards, 'white', 6, executor, seed=3, wave_size=6)
        assert narrow == wide

    def test_huge_request_stops_at_deadline(self, engine, initial_board):
        requested = 50_000
        started = time.monotonic()

        result = engine.estimate_equity(
            initial_board, 'white', trials=requested, deadline=started + 0.05, seed=1,
        )

        assert time.monotonic() - started < 5.0
        assert result.trials_requested == requested
        assert result.trials_completed < requested
        assert result.partial

    def test_expired_deadline_submits_nothing(self, engine, initial_board):
        with RecordingExecutor(wave_size=2) as executor:
            results = engine.estimate_many(
                {'a': initial_board}, 'white', 100, executor,
                deadline=time.monotonic() - 1.0, wave_size=2,
            )

        assert executor.submitted == []
        assert results['a'].trials_completed == 0


class TestConvergence:
    """Rollout estimates tighten as the trial count grows."""

    @pytest.fixture
    def race_board(self):
        # Short race: black rolls first and is usually ahead
        return BoardState.from_layout(white={6: 2, 4: 1}, black={20: 2, 22: 1})

    def test_more_trials_stay_closer_to_reference(self, heuristic_cache, race_board):
        engine = RolloutEngine(cache=heuristic_cache, max_plies=8, max_workers=2)
        reference = engine.estimate_equity(race_board, 'white', trials=2000, seed=999).probability
        assert 0.0 < reference < 1.0

        few, many = [], []
        for seed in range(5):
            few.append(engine.estimate_equity(race_board, 'white', trials=4, seed=seed).probability)
            many.append(engine.estimate_equity(race_board, 'white', trials=400, seed=seed).probability)

        few_error = statistics.mean(abs(p - reference) for p in few)
        many_error = statistics.mean(abs(p - reference) for p in many)
        assert many_error < few_error

    def test_reported_error_shrinks_with_trials(self, heuristic_cache, race_board):
        engine = RolloutEngine(cache=heuristic_cache, max_plies=8, max_workers=2)
        few = engine.estimate_equity(race_board, 'white', trials=40, seed=4)
        many = engine.estimate_equity(race_board, 'white', trials=1000, seed=4)

        assert many.trials_completed == 1000
        assert many.std_error < few.std_error

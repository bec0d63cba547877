"""
Tests for the backgammon position heuristics.

Tests the evaluation functions for:
- Known values at the opening position
- Exact shot counting
- Symmetry between the two sides
- Builders, anchors and opponent blots
- Per-factor breakdown
- Terminal positions and caching
"""
import pytest

from apps.ai.evaluation.backgammon import (
    DEFAULT_WEIGHTS,
    WIN_SCORE,
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
from apps.game.board import BoardState


class TestOpeningPosition:
    """Feature values at the starting position."""

    def test_pip_counts(self, initial_board):
        assert pip_count(initial_board, 'white') == 167
        assert pip_count(initial_board, 'black') == 167

    def test_no_blots(self, initial_board):
        assert blot_count(initial_board, 'white') == 0
        assert blot_exposure(initial_board, 'white') == 0.0

    def test_made_points(self, initial_board):
        assert made_points_count(initial_board, 'white') == 4
        assert home_board_strength(initial_board, 'white') == 1
        assert longest_prime(initial_board, 'white') == 1

    def test_not_a_race(self, initial_board):
        assert race_position(initial_board) is False

    def test_score_is_symmetric(self, initial_board):
        """Mirror-image positions score the same for either side."""
        assert score(initial_board, 'white') == score(initial_board, 'black')


class TestPipCount:
    """Tests for pip counting."""

    def test_bar_counts_twenty_five(self):
        board = BoardState.from_layout(
            white={6: 14}, black={19: 15}, white_bar=1,
        )
        assert pip_count(board, 'white') == 6 * 14 + 25

    def test_black_counts_from_its_side(self):
        board = BoardState.from_layout(white={6: 15}, black={19: 10, 24: 5})
        # Black's 19 and 24 are its 6 and 1 points
        assert pip_count(board, 'black') == 6 * 10 + 1 * 5


class TestShotCounting:
    """Tests for exact hit probabilities."""

    def test_direct_six(self):
        board = BoardState.from_layout(white={7: 1, 13: 14}, black={1: 1, 19: 14})
        assert hit_probability(board, 'white', 7) == pytest.approx(17 / 36)

    def test_direct_one(self):
        board = BoardState.from_layout(white={2: 1, 13: 14}, black={1: 1, 19: 14})
        assert hit_probability(board, 'white', 2) == pytest.approx(11 / 36)

    def test_out_of_range(self):
        board = BoardState.from_layout(white={7: 1, 13: 14}, black={19: 15})
        # Black's only checkers are past the blot
        assert hit_probability(board, 'white', 7) == 0.0

    def test_blocked_combination(self):
        """Blocked landing points stop every combination shot."""
        board = BoardState.from_layout(
            white={13: 1, 3: 2, 4: 2, 5: 2, 6: 2, 7: 2, 8: 2, 9: 2},
            black={1: 1, 19: 14},
        )
        # Distance 12 from black's checker on 1: 6-6 via 7 (blocked),
        # 4-4 via 5 and 9 (blocked), 3-3 via 4 (blocked)
        assert hit_probability(board, 'white', 13) == 0.0

    def test_bar_checker_attacks(self):
        board = BoardState.from_layout(
            white={3: 1, 13: 14}, black={19: 14}, black_bar=1,
        )
        # Entering black checker hits white's 3 point with any 3, 2-1 or 1-1
        assert hit_probability(board, 'white', 3) == pytest.approx(14 / 36)

    def test_exposure_weights_by_point(self):
        near_home = BoardState.from_layout(white={2: 1, 13: 14}, black={1: 1, 19: 14})
        assert blot_exposure(near_home, 'white') == pytest.approx(11 / 36 * (23 / 24))


class TestScore:
    """Tests for the combined score."""

    def test_finished_game(self, white_won_board):
        assert score(white_won_board, 'white') == WIN_SCORE
        assert score(white_won_board, 'black') == -WIN_SCORE

    def test_race_detected(self):
        board = BoardState.from_layout(white={1: 5, 2: 5, 3: 5}, black={22: 5, 23: 5, 24: 5})
        assert race_position(board) is True

    def test_race_lead_scores_higher(self):
        ahead = BoardState.from_layout(white={1: 5, 2: 5, 3: 5}, black={19: 5, 20: 5, 21: 5})
        # Same layout with the sides swapped
        behind = BoardState.from_layout(white={4: 5, 5: 5, 6: 5}, black={22: 5, 23: 5, 24: 5})
        assert score(ahead, 'white') > score(behind, 'white')

    def test_blot_lowers_score(self):
        safe = BoardState.from_layout(white={6: 2, 13: 13}, black={1: 1, 19: 14})
        exposed = BoardState.from_layout(white={7: 1, 6: 1, 13: 13}, black={1: 1, 19: 14})
        assert score(safe, 'white') > score(exposed, 'white')

    def test_custom_weights(self, initial_board):
        weights = dict(
            DEFAULT_WEIGHTS, flexibility=0.0, stack_penalty=0.0, home_board=0.0, anchors=0.0,
        )
        # Opening: equal pips, no blots, no bar, primes of one, no builders on 9-11
        assert score(initial_board, 'white', weights) == pytest.approx(0.0)

    def test_cached_matches_uncached(self, initial_board, heuristic_cache):
        expected = score(initial_board, 'white')
        assert cached_score(initial_board, 'white', heuristic_cache) == expected
        assert cached_score(initial_board, 'white', heuristic_cache) == expected
        assert heuristic_cache.hits == 1
        assert heuristic_cache.misses == 1

    def test_cache_keys_include_weights(self, initial_board, heuristic_cache):
        weights = dict(DEFAULT_WEIGHTS, home_board=5.0)
        cached_score(initial_board, 'white', heuristic_cache)
        cached_score(initial_board, 'white', heuristic_cache, weights)
        assert len(heuristic_cache) == 2


class TestContactFeatures:
    """Builders, anchors and opponent blots."""

    def test_opening_values(self, initial_board):
        # The 8 point holds three checkers, so it is not a builder
        assert builder_coverage(initial_board, 'white') == 0.0
        assert anchor_count(initial_board, 'white') == 1
        assert opponent_blot_count(initial_board, 'white') == 0
        assert anchor_count(initial_board, 'black') == 1

    def test_builder_coverage(self):
        board = BoardState.from_layout(
            white={6: 10, 8: 1, 9: 1, 10: 2, 11: 1},
            black={1: 2, 12: 5, 17: 3, 19: 5},
        )
        # 8 single 0.5, 9 single 1, 10 stacked 0.5, 11 single 1
        assert builder_coverage(board, 'white') == 3.0

    def test_builder_coverage_mirrors_for_black(self):
        # Black 16 and 15 are its 9 and 10 points
        board = BoardState.from_layout(
            white={1: 2, 12: 5, 17: 3, 19: 5},
            black={15: 1, 16: 1, 24: 2},
        )
        assert builder_coverage(board, 'black') == 2.0

    def test_opponent_blots(self):
        board = BoardState.from_layout(
            white={6: 5, 8: 3, 13: 5},
            black={1: 1, 12: 5, 17: 3, 19: 5, 24: 1},
        )
        assert opponent_blot_count(board, 'white') == 2
        assert opponent_blot_count(board, 'black') == 0

    def test_anchors_need_a_made_point(self):
        board = BoardState.from_layout(
            white={6: 5, 8: 3, 20: 2, 22: 1},
            black={12: 5, 17: 3, 19: 5},
        )
        assert anchor_count(board, 'white') == 1

    def test_builder_weight_moves_score(self):
        board = BoardState.from_layout(
            white={6: 10, 8: 1, 9: 1, 10: 2, 11: 1},
            black={1: 2, 12: 5, 17: 3, 19: 5},
        )
        without = dict(DEFAULT_WEIGHTS, builder_coverage=0.0)
        delta = score(board, 'white') - score(board, 'white', without)
        assert delta == pytest.approx(DEFAULT_WEIGHTS['builder_coverage'] * 3.0)

    def test_race_ignores_contact_terms(self):
        board = BoardState.from_layout(white={1: 5, 2: 5, 3: 5}, black={22: 5, 23: 5, 24: 5})
        weights = dict(DEFAULT_WEIGHTS, builder_coverage=9.0, opponent_blots=9.0, anchors=9.0)
        assert score(board, 'white', weights) == score(board, 'white')


class TestScoreBreakdown:
    """Tests for the per-factor breakdown."""

    CONTACT_FACTORS = [
        'pip_count', 'blot_exposure', 'home_board', 'prime_bonus', 'opponent_bar',
        'builder_coverage', 'opponent_blots', 'anchors', 'flexibility', 'stack_penalty',
    ]

    def test_contact_factors(self, initial_board):
        breakdown = score_breakdown(initial_board, 'white')
        assert list(breakdown) == self.CONTACT_FACTORS

    def test_race_factors(self):
        board = BoardState.from_layout(white={1: 5, 2: 5, 3: 5}, black={22: 5, 23: 5, 24: 5})
        assert list(score_breakdown(board, 'white')) == [
            'pip_count', 'race_pip', 'borne_off', 'flexibility', 'stack_penalty',
        ]

    @pytest.mark.parametrize('player', ['white', 'black'])
    def test_terms_sum_to_score(self, player):
        board = BoardState.from_layout(
            white={6: 4, 7: 1, 8: 3, 9: 1, 13: 4, 24: 2},
            black={1: 1, 12: 5, 17: 3, 19: 4, 20: 2},
        )
        breakdown = score_breakdown(board, player)
        assert sum(term['score'] for term in breakdown.values()) == score(board, player)

    def test_scores_are_weighted_values(self, initial_board):
        weights = dict(DEFAULT_WEIGHTS, home_board=2.0)
        term = score_breakdown(initial_board, 'white', weights)['home_board']

        # Only the 6 point is made in the opening home board
        assert term['value'] == 1
        assert term['score'] == pytest.approx(2.0)

    def test_finished_game(self, white_won_board):
        assert score_breakdown(white_won_board, 'white') == {
            'game_over': {'value': 1.0, 'score': WIN_SCORE},
        }
        assert score_breakdown(white_won_board, 'black')['game_over']['score'] == -WIN_SCORE

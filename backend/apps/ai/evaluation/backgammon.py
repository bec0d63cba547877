"""
Backgammon position evaluation functions.

These heuristics capture important aspects of backgammon positions:
- Pip count (race position)
- Blot exposure (exact shot counting over the 36 rolls)
- Home board strength (made points)
- Prime structures (blocking opponent)
- Timing and flexibility (spread versus stacking)
- Builders, anchors and opponent blots while contact remains
- Bear-off progress once contact is broken

Higher values are better for the specified player. Every function is
pure: the same board and player always give the same value.
"""
from typing import Dict, List, Optional, Tuple

from apps.game.board import BoardState, CHECKERS_PER_PLAYER
from apps.game.rulesets.backgammon import SideView

from .cache import HeuristicCache

WIN_SCORE = 100.0

DEFAULT_WEIGHTS = {
    'pip_count': 1.0,         # Per 100 pips of race lead
    'blot_exposure': -1.0,    # Shot probability weighted by pips lost
    'home_board': 0.15,       # Made points in the home board
    'prime_bonus': 0.2,       # Per point of prime beyond two
    'opponent_bar': 0.3,      # Opponent checkers waiting to enter
    'flexibility': 0.3,       # Share of checkers on distinct points
    'stack_penalty': -0.05,   # Per checker above three on a point
    'race_pip': 2.0,          # Extra pip weight once contact is broken
    'borne_off': 0.5,         # Borne-off lead (per 15 checkers) in a race
    'builder_coverage': 0.05, # Spare checkers on 8-11 ready to make new points
    'opponent_blots': 0.08,   # Opponent blots available to hit
    'anchors': 0.08,          # Made points in the opponent's home board
}


def _build_rolls() -> List[Tuple[int, int, int]]:
    """The 21 distinct rolls as (die1, die2, ways out of 36)."""
    return [
        (die1, die2, 1 if die1 == die2 else 2)
        for die1 in range(1, 7)
        for die2 in range(die1, 7)
    ]


def _build_shot_table(rolls) -> Dict[int, List[Tuple[int, Tuple[Tuple[int, ...], ...]]]]:
    """
    Map each distance to the rolls that can cover it.

    Each entry is (roll index, paths); a path lists the intermediate
    landing offsets that must be open for that way of hitting.
    """
    table = {distance: [] for distance in range(1, 25)}
    for index, (die1, die2, _) in enumerate(rolls):
        if die1 == die2:
            for steps in range(1, 5):
                intermediate = tuple(die1 * hop for hop in range(1, steps))
                table[die1 * steps].append((index, (intermediate,)))
        else:
            table[die1].append((index, ((),)))
            table[die2].append((index, ((),)))
            table[die1 + die2].append((index, ((die1,), (die2,))))
    return table


ROLLS = _build_rolls()
SHOTS = _build_shot_table(ROLLS)


def score(
    board: BoardState,
    player: str = 'white',
    weights: Optional[Dict[str, float]] = None,
) -> float:
    """
    Evaluate a backgammon position using weighted heuristics.

    Combines multiple evaluation factors into a single score.
    Higher scores are better for the specified player.

    Args:
        board: Position to evaluate.
        player: The player to evaluate for.
        weights: Optional custom weights for each factor.
                Default weights are tuned for reasonable play.

    Returns:
        Position evaluation score (higher is better). A finished game
        scores +/-WIN_SCORE.
    """
    return sum(term['score'] for term in score_breakdown(board, player, weights).values())


def score_breakdown(
    board: BoardState,
    player: str = 'white',
    weights: Optional[Dict[str, float]] = None,
) -> Dict[str, Dict[str, float]]:
    """
    Per-factor terms of score().

    Returns {factor: {'value': raw feature, 'score': weighted term}} in
    the order the terms are summed. Race positions carry the race terms,
    contact positions the blot, structure and builder terms. A finished
    game has a single 'game_over' term worth +/-WIN_SCORE.
    """
    w = weights or DEFAULT_WEIGHTS
    view = SideView.from_board(board, player)
    mine, theirs = view.mine, view.theirs

    if mine[0] == CHECKERS_PER_PLAYER:
        return {'game_over': {'value': 1.0, 'score': WIN_SCORE}}
    if theirs[25] == CHECKERS_PER_PLAYER:
        return {'game_over': {'value': -1.0, 'score': -WIN_SCORE}}

    pip_lead = (_opponent_pips(view) - _player_pips(view)) / 100.0

    features = {'pip_count': pip_lead}
    if _is_race(view):
        features['race_pip'] = pip_lead
        features['borne_off'] = (mine[0] - theirs[25]) / CHECKERS_PER_PLAYER
    else:
        features['blot_exposure'] = _blot_exposure(view)
        features['home_board'] = _made_points(view, range(1, 7))
        features['prime_bonus'] = max(0, _longest_prime(view) - 2)
        features['opponent_bar'] = theirs[0]
        features['builder_coverage'] = _builder_coverage(view)
        features['opponent_blots'] = _opponent_blots(view)
        features['anchors'] = _made_points(view, range(19, 25))

    occupied = sum(1 for point in range(1, 25) if mine[point])
    features['flexibility'] = occupied / CHECKERS_PER_PLAYER
    features['stack_penalty'] = sum(max(0, mine[point] - 3) for point in range(1, 25))

    return {
        name: {'value': value, 'score': w[name] * value}
        for name, value in features.items()
    }


def cached_score(
    board: BoardState,
    player: str,
    cache: Optional[HeuristicCache] = None,
    weights: Optional[Dict[str, float]] = None,
) -> float:
    """Score through ``cache`` when one is given; identical to score()."""
    if cache is None:
        return score(board, player, weights)
    weight_key = tuple(sorted(weights.items())) if weights else None
    key = (board.position_key(), player, weight_key)
    return cache.get_or_compute(key, lambda: score(board, player, weights))


def pip_count(board: BoardState, player: str) -> int:
    """
    Calculate the pip count for a player.

    Pip count is the total number of pips a player must move to bear
    off all checkers. A checker on the bar counts 25. Lower is better.
    """
    return _player_pips(SideView.from_board(board, player))


def blot_count(board: BoardState, player: str) -> int:
    """Count the number of blots (single checkers) for a player."""
    mine = SideView.from_board(board, player).mine
    return sum(1 for point in range(1, 25) if mine[point] == 1)


def made_points_count(board: BoardState, player: str) -> int:
    """Count the number of made points (2+ checkers) for a player."""
    return _made_points(SideView.from_board(board, player), range(1, 25))


def home_board_strength(board: BoardState, player: str) -> int:
    """
    Calculate home board strength (made points in home board).

    A strong home board makes it harder for opponent to re-enter
    from the bar.
    """
    return _made_points(SideView.from_board(board, player), range(1, 7))


def longest_prime(board: BoardState, player: str) -> int:
    """
    Find the longest prime (consecutive made points) for a player.

    A 6-prime completely blocks the opponent's checkers behind it.
    """
    return _longest_prime(SideView.from_board(board, player))


def builder_coverage(board: BoardState, player: str) -> float:
    """
    Score the builders bearing on the next points to make.

    A lone checker on 9, 10 or 11 counts 1, a stack there counts 0.5,
    and a lone checker on the 8 point counts 0.5.
    """
    return _builder_coverage(SideView.from_board(board, player))


def opponent_blot_count(board: BoardState, player: str) -> int:
    """Count the opponent's blots, seen from ``player``."""
    return _opponent_blots(SideView.from_board(board, player))


def anchor_count(board: BoardState, player: str) -> int:
    """Count made points in the opponent's home board."""
    return _made_points(SideView.from_board(board, player), range(19, 25))


def race_position(board: BoardState, player: str = 'white') -> bool:
    """
    Determine if the position is a "race" (no contact).

    A race occurs when neither player can hit the other,
    so it's purely about rolling dice and bearing off.
    """
    return _is_race(SideView.from_board(board, player))


def blot_exposure(board: BoardState, player: str) -> float:
    """
    Weighted blot exposure for a player.

    Sum over the player's blots of the chance the opponent's next roll
    hits it, times the share of the race the blot would lose.
    """
    return _blot_exposure(SideView.from_board(board, player))


def hit_probability(board: BoardState, player: str, point: int) -> float:
    """
    Probability that the opponent's next roll can hit ``point``.

    ``point`` is counted from ``player``'s side (1-24 toward home).
    """
    view = SideView.from_board(board, player)
    return _shot_probability(view, point, _attackers(view))


# Private helpers on the mover-relative view

def _player_pips(view: SideView) -> int:
    mine = view.mine
    return sum(point * mine[point] for point in range(1, 26))


def _opponent_pips(view: SideView) -> int:
    theirs = view.theirs
    return sum((25 - point) * theirs[point] for point in range(0, 25))


def _made_points(view: SideView, points) -> int:
    mine = view.mine
    return sum(1 for point in points if mine[point] >= 2)


def _longest_prime(view: SideView) -> int:
    mine = view.mine
    max_length = 0
    current_length = 0
    for point in range(1, 25):
        if mine[point] >= 2:
            current_length += 1
            max_length = max(max_length, current_length)
        else:
            current_length = 0
    return max_length


def _builder_coverage(view: SideView) -> float:
    mine = view.mine
    coverage = 0.5 if mine[8] == 1 else 0.0
    for point in (9, 10, 11):
        if mine[point] == 1:
            coverage += 1.0
        elif mine[point] > 1:
            coverage += 0.5
    return coverage


def _opponent_blots(view: SideView) -> int:
    theirs = view.theirs
    return sum(1 for point in range(1, 25) if theirs[point] == 1)


def _is_race(view: SideView) -> bool:
    """No checker of either side still has to pass an opposing one."""
    mine, theirs = view.mine, view.theirs
    my_rear = max((point for point in range(1, 26) if mine[point]), default=0)
    their_rear = min((point for point in range(0, 25) if theirs[point]), default=25)
    return my_rear < their_rear


def _attackers(view: SideView) -> List[int]:
    """Opponent checker locations in mover-relative points; 0 is their bar."""
    theirs = view.theirs
    return [point for point in range(0, 25) if theirs[point]]


def _shot_probability(view: SideView, target: int, attackers: List[int]) -> float:
    mine = view.mine
    hitting = set()
    for origin in attackers:
        distance = target - origin
        if distance < 1:
            continue
        for roll_index, paths in SHOTS.get(distance, ()):
            if roll_index in hitting:
                continue
            for path in paths:
                if all(mine[origin + step] < 2 for step in path):
                    hitting.add(roll_index)
                    break
    return sum(ROLLS[index][2] for index in hitting) / 36.0


def _hit_impact(point: int) -> float:
    """Share of a full race a blot on ``point`` gives up when hit."""
    return max(0.1, (25 - point) / 24.0)


def _blot_exposure(view: SideView) -> float:
    mine = view.mine
    attackers = _attackers(view)
    if not attackers:
        return 0.0

    exposure = 0.0
    for point in range(1, 25):
        if mine[point] == 1:
            exposure += _shot_probability(view, point, attackers) * _hit_impact(point)
    return exposure

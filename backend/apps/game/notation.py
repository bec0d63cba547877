"""
XGID position codec and move notation.

An XGID is ten colon-separated fields:

    board:cube:cube_owner:turn:dice:white_score:black_score:crawford_jacoby:match_length:max_cube

The board field has 26 symbols. Index 0 is black's bar, 1-24 are the
points and 25 is white's bar. '-' is an empty slot, 'A'-'O' are 1-15
white checkers and 'a'-'o' are 1-15 black checkers.

Example (opening position, white to play 6-5):

    -b----E-C---eE---c-e----B-:0:0:1:65:0:0:0:0:10

Decoding is strict: anything malformed raises ParseError instead of
being coerced, so encode(decode(x)) == x for every accepted string
written without the optional 'XGID=' prefix.
"""
import re
from itertools import groupby
from typing import Iterable, List, Optional, Tuple

from .board import BLACK, CENTER, CHECKERS_PER_PLAYER, WHITE, BoardState
from .exceptions import ParseError
from .moves import BAR_POINT, OFF_POINT, Submove

XGID_PREFIX = 'XGID='
FIELD_COUNT = 10
BOARD_LENGTH = 26
MAX_CUBE_EXPONENT = 12

EMPTY_SYMBOL = '-'

_INTEGER = re.compile(r'(?:0|-?[1-9][0-9]*)\Z')
_DICE = re.compile(r'(?:00|[1-6][1-6])\Z')
_SUBMOVE = re.compile(r'\s*(bar|[0-9]{1,2})/(off|[0-9]{1,2})\*?\s*\Z', re.IGNORECASE)

_CUBE_OWNERS = {1: WHITE, -1: BLACK, 0: CENTER}
_TURNS = {1: WHITE, -1: BLACK}


def decode(text: str) -> BoardState:
    """
    Parse an XGID string into a BoardState.

    Raises:
        ParseError: On a wrong field count, a board field that is not 26
            symbols, an unknown symbol, more than 15 checkers for a side,
            or any malformed or out-of-range scalar field.
    """
    if not isinstance(text, str):
        raise ParseError(f"Position must be a string, got {type(text).__name__}")

    body = text[len(XGID_PREFIX):] if text.startswith(XGID_PREFIX) else text
    fields = body.split(':')
    if len(fields) != FIELD_COUNT:
        raise ParseError(f"Expected {FIELD_COUNT} fields, got {len(fields)}")

    (board_field, cube_field, owner_field, turn_field, dice_field,
     white_score_field, black_score_field, flag_field,
     match_field, max_cube_field) = fields

    points, white_bar, black_bar = _decode_board(board_field)

    cube_exponent = _parse_int(cube_field, 'cube', 0, MAX_CUBE_EXPONENT)
    cube_owner = _CUBE_OWNERS[_parse_int(owner_field, 'cube owner', -1, 1)]
    turn_value = _parse_int(turn_field, 'turn', -1, 1)
    if turn_value not in _TURNS:
        raise ParseError(f"Turn must be 1 or -1, got {turn_field!r}")
    dice = _parse_dice(dice_field)
    match_length = _parse_int(match_field, 'match length', 0)
    flag = _parse_int(flag_field, 'crawford/jacoby', 0, 1 if match_length else 3)

    white_on = sum(count for count in points if count > 0) + white_bar
    black_on = -sum(count for count in points if count < 0) + black_bar
    for side, on_board in ((WHITE, white_on), (BLACK, black_on)):
        if on_board > CHECKERS_PER_PLAYER:
            raise ParseError(
                f"{side} has {on_board} checkers on the board, "
                f"at most {CHECKERS_PER_PLAYER} allowed"
            )

    return BoardState(
        points=points,
        white_bar=white_bar,
        black_bar=black_bar,
        white_off=CHECKERS_PER_PLAYER - white_on,
        black_off=CHECKERS_PER_PLAYER - black_on,
        turn=_TURNS[turn_value],
        cube_value=2 ** cube_exponent,
        cube_owner=cube_owner,
        dice=dice,
        white_score=_parse_int(white_score_field, 'white score', 0),
        black_score=_parse_int(black_score_field, 'black score', 0),
        crawford_jacoby=flag,
        match_length=match_length,
        max_cube=_parse_int(max_cube_field, 'max cube', 0, MAX_CUBE_EXPONENT),
    )


def encode(board: BoardState) -> str:
    """Write a BoardState as an XGID string (without the 'XGID=' prefix)."""
    cube_exponent = board.cube_value.bit_length() - 1
    if board.cube_value != 2 ** cube_exponent:
        raise ValueError(f"Cube value must be a power of two, got {board.cube_value}")

    symbols = [_black_symbol(board.black_bar)]
    for count in board.points:
        if count > 0:
            symbols.append(_white_symbol(count))
        else:
            symbols.append(_black_symbol(-count))
    symbols.append(_white_symbol(board.white_bar))

    owner = {WHITE: 1, BLACK: -1, CENTER: 0}[board.cube_owner]
    turn = 1 if board.turn == WHITE else -1
    dice = '00' if board.dice is None else f'{board.dice[0]}{board.dice[1]}'

    return ':'.join(str(part) for part in (
        ''.join(symbols),
        cube_exponent,
        owner,
        turn,
        dice,
        board.white_score,
        board.black_score,
        board.crawford_jacoby,
        board.match_length,
        board.max_cube,
    ))


def _decode_board(field: str) -> Tuple[Tuple[int, ...], int, int]:
    """Return (signed points, white bar, black bar) for the board field."""
    if len(field) != BOARD_LENGTH:
        raise ParseError(f"Board field must be {BOARD_LENGTH} symbols, got {len(field)}")

    signed = []
    for index, symbol in enumerate(field):
        if symbol == EMPTY_SYMBOL:
            signed.append(0)
        elif 'A' <= symbol <= 'O':
            signed.append(ord(symbol) - ord('A') + 1)
        elif 'a' <= symbol <= 'o':
            signed.append(-(ord(symbol) - ord('a') + 1))
        else:
            raise ParseError(f"Unrecognized symbol {symbol!r} at board index {index}")

    if signed[0] > 0:
        raise ParseError("White checkers cannot be on black's bar (index 0)")
    if signed[-1] < 0:
        raise ParseError("Black checkers cannot be on white's bar (index 25)")

    return tuple(signed[1:-1]), signed[-1], -signed[0]


def _white_symbol(count: int) -> str:
    return chr(ord('A') + count - 1) if count else EMPTY_SYMBOL


def _black_symbol(count: int) -> str:
    return chr(ord('a') + count - 1) if count else EMPTY_SYMBOL


def _parse_int(
    field: str,
    name: str,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> int:
    if not _INTEGER.match(field):
        raise ParseError(f"Invalid {name} field {field!r}")
    value = int(field)
    if minimum is not None and value < minimum:
        raise ParseError(f"{name.capitalize()} must be at least {minimum}, got {value}")
    if maximum is not None and value > maximum:
        raise ParseError(f"{name.capitalize()} must be at most {maximum}, got {value}")
    return value


def _parse_dice(field: str) -> Optional[Tuple[int, int]]:
    if not _DICE.match(field):
        raise ParseError(f"Invalid dice field {field!r}")
    if field == '00':
        return None
    return int(field[0]), int(field[1])


# Move notation

def format_point(point: int) -> str:
    if point == BAR_POINT:
        return 'bar'
    if point == OFF_POINT:
        return 'off'
    return str(point)


def format_submove(submove: Submove) -> str:
    text = f'{format_point(submove.origin)}/{format_point(submove.destination)}'
    return text + '*' if submove.hit else text


def parse_submove(text: str) -> Submove:
    """
    Parse mover-relative notation such as '13/7', 'bar/22' or '6/off'.

    The die and hit flag are left for the move generator to resolve.
    """
    match = _SUBMOVE.match(text) if isinstance(text, str) else None
    if match is None:
        raise ParseError(f"Invalid submove {text!r}")

    origin_text, destination_text = (group.lower() for group in match.groups())
    origin = BAR_POINT if origin_text == 'bar' else int(origin_text)
    destination = OFF_POINT if destination_text == 'off' else int(destination_text)

    if not 1 <= origin <= BAR_POINT:
        raise ParseError(f"Submove origin out of range in {text!r}")
    if not OFF_POINT <= destination <= 24 or destination >= origin:
        raise ParseError(f"Submove destination out of range in {text!r}")
    if origin - destination > 6 and destination != OFF_POINT:
        raise ParseError(f"Submove {text!r} covers more than one die")
    return Submove(origin=origin, destination=destination)


def describe(submoves: Iterable[Submove]) -> str:
    """
    Canonical description of a play.

    Bar entries come first, then higher origins, then higher
    destinations. Repeated submoves are grouped ("8/5(2)") and a hit
    is marked with '*'.
    """
    ordered = sorted(submoves, key=lambda s: (-s.origin, -s.destination))
    parts: List[str] = []
    for (origin, destination), group in groupby(ordered, key=lambda s: (s.origin, s.destination)):
        group = list(group)
        text = f'{format_point(origin)}/{format_point(destination)}'
        if any(submove.hit for submove in group):
            text += '*'
        if len(group) > 1:
            text += f'({len(group)})'
        parts.append(text)
    return ' '.join(parts)

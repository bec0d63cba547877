"""
Management command to analyze a position from the command line.

Usage:
    python manage.py analyze_position --position <xgid> --top 5 [--player 1]
        [--dice 6 5] [--simulations 100] [--heuristic-weight 0.5] [--mc-weight 0.5]

Most XGIDs start with '-' (an empty black bar), so the position is an option
rather than a positional argument. Both ``--position <xgid>`` and
``--position=<xgid>`` work.

Prints the same JSON the HTTP endpoint returns.
"""
import json

from django.core.management.base import BaseCommand, CommandError

from apps.ai.conf import EngineConfig
from apps.ai.services.analysis import EvaluationRequest, analyze
from apps.game.exceptions import InvariantViolation
from apps.game.notation import parse_submove

POSITION_FLAGS = ('--position', '-p')


def attach_position(argv):
    """Join a position flag with its value so argparse keeps a leading '-'."""
    joined = []
    tokens = iter(argv)
    for token in tokens:
        if token in POSITION_FLAGS:
            value = next(tokens, None)
            joined.append(token if value is None else f'--position={value}')
        else:
            joined.append(token)
    return joined


class Command(BaseCommand):
    help = 'Rank the legal plays for an XGID position'

    def run_from_argv(self, argv):
        super().run_from_argv(attach_position(argv))

    def add_arguments(self, parser):
        parser.add_argument(
            *POSITION_FLAGS,
            dest='position',
            type=str,
            required=True,
            help='Position in XGID format',
        )
        parser.add_argument(
            '--player',
            type=int,
            default=1,
            choices=[1, 2],
            help='Player to move: 1 for white, 2 for black (default: 1)',
        )
        parser.add_argument(
            '--dice',
            type=int,
            nargs=2,
            default=None,
            help='Dice to play (default: dice in the position)',
        )
        parser.add_argument(
            '--used',
            type=str,
            nargs='*',
            default=[],
            help='Submoves already played this turn, e.g. 8/5',
        )
        parser.add_argument(
            '--top',
            type=int,
            required=True,
            help='Number of moves to print',
        )
        parser.add_argument(
            '--simulations',
            type=int,
            default=0,
            help='Rollout trials per candidate (default: 0)',
        )
        parser.add_argument(
            '--heuristic-weight',
            type=float,
            default=1.0,
            help='Weight of the heuristic score (default: 1.0)',
        )
        parser.add_argument(
            '--mc-weight',
            type=float,
            default=0.0,
            help='Weight of the rollout win rate (default: 0.0)',
        )
        parser.add_argument(
            '--seed',
            type=int,
            default=None,
            help='Seed for reproducible rollouts',
        )
        parser.add_argument(
            '--debug',
            action='store_true',
            help='Also print every ranked candidate',
        )

    def handle(self, *args, **options):
        try:
            request = EvaluationRequest(
                position=options['position'],
                player_to_move=options['player'],
                dice=tuple(options['dice']) if options['dice'] else None,
                heuristic_weight=options['heuristic_weight'],
                mc_weight=options['mc_weight'],
                max_top_moves=options['top'],
                already_used_submoves=tuple(parse_submove(text) for text in options['used']),
                num_simulations=options['simulations'],
                debug=options['debug'],
                seed=options['seed'],
            )
            result = analyze(request, config=EngineConfig.from_settings())
        except InvariantViolation as e:
            raise CommandError(f"Internal error: {e}")
        except ValueError as e:
            raise CommandError(str(e))

        self.stdout.write(json.dumps(result.to_dict(), indent=2))

"""
Engine configuration.

Knobs are read from the ``BACKGAMMON_ENGINE`` dict in Django settings:

    BACKGAMMON_ENGINE = {
        'HEURISTIC_CACHE_SIZE': 100000,
        'HEURISTIC_SCALE': 1.0,
        'ROLLOUT_MAX_PLIES': 40,
        'MAX_WORKERS': None,  # defaults to os.cpu_count()
        'DEFAULT_DEADLINE_SECONDS': 30.0,
        'MAX_SIMULATIONS': 10000,  # per candidate, per request
    }

Services take an EngineConfig argument so they also run outside Django.
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


@dataclass(frozen=True)
class EngineConfig:
    """Tunable limits for analysis requests."""

    heuristic_cache_size: int = 100_000
    heuristic_scale: float = 1.0
    rollout_max_plies: int = 40
    max_workers: Optional[int] = None
    default_deadline_seconds: float = 30.0
    max_simulations: int = 10_000

    @property
    def worker_count(self) -> int:
        return self.max_workers or os.cpu_count() or 1

    @classmethod
    def from_settings(cls) -> 'EngineConfig':
        """Build a config from ``settings.BACKGAMMON_ENGINE``."""
        from django.conf import settings

        options = getattr(settings, 'BACKGAMMON_ENGINE', {})
        return cls(
            heuristic_cache_size=options.get('HEURISTIC_CACHE_SIZE', cls.heuristic_cache_size),
            heuristic_scale=options.get('HEURISTIC_SCALE', cls.heuristic_scale),
            rollout_max_plies=options.get('ROLLOUT_MAX_PLIES', cls.rollout_max_plies),
            max_workers=options.get('MAX_WORKERS', cls.max_workers),
            default_deadline_seconds=options.get(
                'DEFAULT_DEADLINE_SECONDS', cls.default_deadline_seconds,
            ),
            max_simulations=options.get('MAX_SIMULATIONS', cls.max_simulations),
        )


@lru_cache(maxsize=None)
def shared_heuristic_cache():
    """
    Process-wide heuristic cache for the HTTP endpoint.

    Sized once from settings on first use.
    """
    from .evaluation.cache import HeuristicCache

    return HeuristicCache(max_entries=EngineConfig.from_settings().heuristic_cache_size)

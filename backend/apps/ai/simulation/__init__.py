"""
Rollout simulation.

Plays candidate positions forward with random dice to estimate
winning chances.
"""
from .rollout import RolloutEngine, RolloutResult, TrialOutcome

__all__ = [
    'RolloutEngine',
    'RolloutResult',
    'TrialOutcome',
]

"""
Player abstractions for rollouts.

A player picks one play out of the legal plays for a roll. Rollouts use
the HeuristicPlayer for both sides.
"""
from .base import BasePlayer
from .heuristic import HeuristicPlayer

__all__ = [
    'BasePlayer',
    'HeuristicPlayer',
]

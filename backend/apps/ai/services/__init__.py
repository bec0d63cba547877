"""AI services."""
from .analysis import EvaluationRequest, EvaluationResult, analyze

__all__ = [
    'EvaluationRequest',
    'EvaluationResult',
    'analyze',
]

"""Game services."""
from .move_generator import LegalPlay, MoveGenerator

__all__ = [
    'LegalPlay',
    'MoveGenerator',
]

"""
Backgammon rules.

Usage:
    from apps.game.rulesets import BackgammonRuleSet, SideView

    rules = BackgammonRuleSet()
    view = SideView.from_board(board, 'white')
    for submove in rules.legal_submoves(view, die=5):
        ...
"""
from .backgammon import BackgammonRuleSet, SideView

__all__ = [
    'BackgammonRuleSet',
    'SideView',
]

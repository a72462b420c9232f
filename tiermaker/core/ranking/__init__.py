"""
Ranking module - Interactive binary-insertion ranking

This module provides:
- RankingState snapshots and their validation
- The answer-driven ranking engine
- An undo history of snapshots
- Reconciliation of saved progress with an edited item list
"""

from .state import RankingState, validate
from .engine import RankingEngine, Choice, Comparison, Transition
from .history import History
from .reconcile import reconcile, Reconciliation

__all__ = [
    'RankingState',
    'validate',
    'RankingEngine',
    'Choice',
    'Comparison',
    'Transition',
    'History',
    'reconcile',
    'Reconciliation',
]

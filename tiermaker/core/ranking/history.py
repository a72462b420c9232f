"""
history.py - Undo stack of ranking snapshots
"""

from typing import Iterable, List, Tuple

from .state import RankingState


class History:
    """Snapshots oldest first. The bottom snapshot is never popped, so there
    is always a state to resume from."""

    def __init__(self, snapshots: Iterable[RankingState]):
        self._stack: List[RankingState] = list(snapshots)
        if not self._stack:
            raise ValueError("History needs at least one snapshot")

    @property
    def current(self) -> RankingState:
        return self._stack[-1]

    @property
    def depth(self) -> int:
        return len(self._stack)

    def snapshots(self) -> Tuple[RankingState, ...]:
        return tuple(self._stack)

    def push(self, state: RankingState) -> None:
        self._stack.append(state)

    def pop(self) -> bool:
        """Drop the newest snapshot. No-op (returns False) at depth 1."""
        if len(self._stack) < 2:
            return False
        self._stack.pop()
        return True

    def reset(self, state: RankingState) -> None:
        self._stack = [state]

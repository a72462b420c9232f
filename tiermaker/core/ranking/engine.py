"""
engine.py - Binary-insertion sort driven by external answers

The engine never calls a comparator. It exposes the pair it needs judged
(``current_pair``) and advances one step each time an answer is delivered.
Items are placed one by one into ``state.sorted_names``; each placement is a
binary search over the items already ranked.
"""

from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Tuple

from .state import RankingState
from tiermaker.utils.logging_helper import get_logger

log = get_logger()


class Choice(str, Enum):
    CANDIDATE = "candidate"   # the item being placed is better
    PIVOT = "pivot"           # the already-ranked item is better (or equal)


class Comparison(NamedTuple):
    candidate: str
    pivot: str


class Transition(NamedTuple):
    before: RankingState
    after: RankingState
    inserted: Tuple[str, ...]


def narrow(state: RankingState, choice: Choice) -> RankingState:
    """Apply one answer to the search window."""
    mid = state.mid
    if choice is Choice.CANDIDATE:
        return state.evolve(end=max(mid, state.start))
    return state.evolve(start=min(mid + 1, state.end))


def settle(state: RankingState, items: Sequence[str]) -> Tuple[RankingState, List[str]]:
    """Insert candidates while the window is collapsed.

    Returns the settled state and the items placed on the way. The first item
    of a session (and every item of a one-item list) is placed without a
    question because the window over an empty prefix is already collapsed.
    """
    inserted: List[str] = []
    while not state.is_complete and state.start == state.end:
        if state.next_index >= len(items):
            raise IndexError(
                f"next_index {state.next_index} is past the {len(items)} queued items"
            )
        name = items[state.next_index]
        names = list(state.sorted_names)
        names.insert(state.start, name)
        log.debug(f"Placed {name!r} at rank {state.start + 1} of {len(names)}")
        state = RankingState(
            sorted_names=tuple(names),
            start=0,
            end=len(names),
            next_index=state.next_index + 1,
            required_length=state.required_length,
        )
        inserted.append(name)
    return state, inserted


class RankingEngine:
    """Resumable binary-insertion sort over a fixed working item order.

    ``items`` is the working order: the first ``state.next_index`` entries
    have been placed, the rest wait in line.
    """

    def __init__(self, items: Sequence[str], state: Optional[RankingState] = None):
        self.items: Tuple[str, ...] = tuple(items)
        if state is None:
            state = RankingState.fresh(len(self.items))
        self.state, _ = settle(state, self.items)
        self.comparisons = 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def is_done(self) -> bool:
        return self.state.is_complete

    @property
    def remaining(self) -> int:
        return self.state.remaining

    @property
    def sorted_names(self) -> Tuple[str, ...]:
        return self.state.sorted_names

    def current_pair(self) -> Optional[Comparison]:
        if self.is_done:
            return None
        return Comparison(
            candidate=self.items[self.state.next_index],
            pivot=self.state.sorted_names[self.state.mid],
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def answer(self, choice: Choice, pair: Optional[Comparison] = None) -> Optional[Transition]:
        """Apply *choice* to the pending comparison.

        Returns None (and changes nothing) once the ranking is done, or when
        *pair* names a comparison that is no longer the pending one, e.g. a
        repeated key press for a question already answered.
        """
        current = self.current_pair()
        if current is None:
            return None
        if pair is not None and tuple(pair) != tuple(current):
            log.debug(f"Ignoring answer for stale pair {tuple(pair)!r} (pending {tuple(current)!r})")
            return None

        before = self.state
        after, inserted = settle(narrow(before, Choice(choice)), self.items)
        self.state = after
        self.comparisons += 1
        return Transition(before, after, tuple(inserted))

    def prefer_candidate(self) -> Optional[Transition]:
        return self.answer(Choice.CANDIDATE)

    def prefer_pivot(self) -> Optional[Transition]:
        return self.answer(Choice.PIVOT)

    def restore(self, state: RankingState) -> None:
        """Jump back to an earlier settled snapshot (used by undo)."""
        self.state, _ = settle(state, self.items)

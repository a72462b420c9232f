"""
state.py - Ranking progress snapshot

A RankingState is everything needed to resume a binary-insertion sort that
is driven one human answer at a time: the order established so far and the
search window for the item currently being placed.
"""

from collections import Counter
from dataclasses import dataclass, replace
from typing import Any, Dict, Sequence, Tuple


@dataclass(frozen=True)
class RankingState:
    """
    sorted_names:    items ranked so far, best first
    start, end:      search window inside sorted_names (end exclusive);
                     start == end is the insertion point
    next_index:      position in the working item order of the next item to place
    required_length: number of items the finished ranking will hold
    """
    sorted_names: Tuple[str, ...] = ()
    start: int = 0
    end: int = 0
    next_index: int = 0
    required_length: int = 0

    @classmethod
    def fresh(cls, total: int) -> "RankingState":
        return cls(required_length=total)

    @property
    def mid(self) -> int:
        return (self.start + self.end) // 2

    @property
    def is_complete(self) -> bool:
        return len(self.sorted_names) == self.required_length

    @property
    def remaining(self) -> int:
        return self.required_length - len(self.sorted_names)

    def evolve(self, **changes: Any) -> "RankingState":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sorted_names": list(self.sorted_names),
            "start": self.start,
            "end": self.end,
            "next_index": self.next_index,
            "required_length": self.required_length,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RankingState":
        """Build a state from its dict form; TypeError/ValueError on bad shapes."""
        if not isinstance(data, dict):
            raise TypeError(f"state must be an object, got {type(data).__name__}")
        names = data["sorted_names"]
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            raise TypeError("sorted_names must be a list of strings")
        ints = {}
        for key in ("start", "end", "next_index", "required_length"):
            value = data[key]
            # bool is an int subclass; a checkpoint with true/false here is damaged
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{key} must be an integer, got {value!r}")
            ints[key] = value
        return cls(sorted_names=tuple(names), **ints)


def validate(state: RankingState, items: Sequence[str]) -> bool:
    """Check that *state* describes an unfinished ranking of *items*."""
    total = len(items)
    placed = len(state.sorted_names)
    if not 0 <= state.start <= state.end <= placed:
        return False
    if not 0 <= state.next_index <= total:
        return False
    if state.next_index != placed:
        return False
    if placed >= state.required_length:
        return False
    if state.required_length != total:
        return False
    # the ranked names must be exactly the items already taken from the queue
    if Counter(state.sorted_names) != Counter(items[:state.next_index]):
        return False
    return True

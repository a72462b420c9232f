"""
reconcile.py - Carry ranking progress over to a changed item list

When the titles file is edited between runs, the saved ranking no longer
matches it. Rather than throwing the work away we keep every ranked item
that still exists (in its ranked order), forget the ones that were removed,
and queue the new ones for insertion. A renamed item counts as one removal
plus one addition.
"""

from collections import Counter
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .state import RankingState, validate
from ..errors import ReconcileError
from tiermaker.utils.logging_helper import get_logger

log = get_logger()


@dataclass(frozen=True)
class Reconciliation:
    state: RankingState
    order: Tuple[str, ...]      # working order: retained ranking, then added items
    added: Tuple[str, ...]
    dropped: Tuple[str, ...]

    @property
    def retained(self) -> Tuple[str, ...]:
        return self.state.sorted_names


def diff_sorted(old: Sequence[str], new: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Walk lexicographically sorted copies of *old* and *new* with two cursors.

    Returns (only_in_old, only_in_new). Equal names are paired off one to one,
    so duplicates behave as distinct tokens.
    """
    a, b = sorted(old), sorted(new)
    i = j = 0
    only_old: List[str] = []
    only_new: List[str] = []
    while i < len(a) and j < len(b):
        if a[i] == b[j]:
            i += 1
            j += 1
        elif a[i] < b[j]:
            only_old.append(a[i])
            i += 1
        else:
            only_new.append(b[j])
            j += 1
    only_old.extend(a[i:])
    only_new.extend(b[j:])
    return only_old, only_new


def _take(sequence: Sequence[str], wanted: Counter, keep: bool) -> List[str]:
    """Filter *sequence* in order, consuming one count of *wanted* per match.

    keep=True returns the matched entries, keep=False everything else.
    """
    pending = Counter(wanted)
    out: List[str] = []
    for name in sequence:
        hit = pending[name] > 0
        if hit:
            pending[name] -= 1
        if hit == keep:
            out.append(name)
    return out


def reconcile(state: RankingState, items: Sequence[str]) -> Reconciliation:
    """Rebuild a session over *items* from the progress recorded in *state*."""
    only_old, only_new = diff_sorted(state.sorted_names, items)

    retained = _take(state.sorted_names, Counter(only_old), keep=False)
    added = _take(items, Counter(only_new), keep=True)

    rebuilt = RankingState(
        sorted_names=tuple(retained),
        start=0,
        end=len(retained),
        next_index=len(retained),
        required_length=len(items),
    )
    order = tuple(retained) + tuple(added)

    # A list that only lost items can already be fully ranked.
    if not rebuilt.is_complete and not validate(rebuilt, order):
        raise ReconcileError(f"Reconciled state is inconsistent: {rebuilt}")

    log.info(f"Reconciled ranking: kept {len(retained)} ranked, "
             f"dropped {len(only_old)}, queued {len(added)} new")
    return Reconciliation(
        state=rebuilt,
        order=order,
        added=tuple(added),
        dropped=tuple(only_old),
    )

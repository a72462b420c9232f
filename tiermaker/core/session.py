"""
session.py - One ranking session: engine + checkpoint + undo + results

Every answer goes through the session, which applies it to the engine,
records it in the undo history and saves the checkpoint before returning.
If the save fails the answer is rolled back and CheckpointWriteError
propagates: the caller must stop rather than keep asking questions whose
answers would be lost.
"""

from collections import Counter
from typing import Callable, Iterable, Optional, Sequence, Tuple

from .checkpoint import Checkpoint, FileStore, Store
from .errors import CheckpointWriteError, NoItemsError, TierMakerError
from .items import read_items
from .ranking import (
    Choice,
    Comparison,
    History,
    RankingEngine,
    RankingState,
    reconcile as reconcile_state,
    validate,
)
from tiermaker.utils.logging_helper import get_logger

log = get_logger()

ResultSink = Callable[[Sequence[str]], None]

FRESH = "fresh"
RESUMED = "resumed"
RECONCILED = "reconciled"


class Session:
    def __init__(self, engine: RankingEngine, store: Store,
                 history: Optional[History] = None, origin: str = FRESH):
        self.engine = engine
        self.store = store
        self.history = history
        self.origin = origin
        self.finished = False

    # ── read-only view ───────────────────────────────────────────────────
    @property
    def state(self) -> RankingState:
        return self.engine.state

    @property
    def items(self) -> Tuple[str, ...]:
        return self.engine.items

    @property
    def sorted_names(self) -> Tuple[str, ...]:
        return self.engine.sorted_names

    @property
    def is_done(self) -> bool:
        return self.engine.is_done

    @property
    def remaining(self) -> int:
        return self.engine.remaining

    @property
    def can_undo(self) -> bool:
        return self.history is not None and self.history.depth > 1 and not self.finished

    def current_pair(self) -> Optional[Comparison]:
        if self.finished:
            return None
        return self.engine.current_pair()

    def checkpoint(self) -> Checkpoint:
        states = self.history.snapshots() if self.history is not None else (self.state,)
        return Checkpoint.of(self.items, states)

    # ── transitions ──────────────────────────────────────────────────────
    def save(self) -> None:
        self.store.save(self.checkpoint())

    def answer(self, choice: Choice, pair: Optional[Comparison] = None) -> bool:
        """Apply an answer; False when it was ignored (done, or stale *pair*)."""
        if self.finished:
            return False
        transition = self.engine.answer(choice, pair)
        if transition is None:
            return False

        if self.history is not None:
            self.history.push(transition.after)
        if self.is_done:
            log.info(f"Ranking complete after {self.engine.comparisons} comparisons this session")
            return True
        try:
            self.save()
        except CheckpointWriteError:
            self.engine.restore(transition.before)
            if self.history is not None:
                self.history.pop()
            raise
        return True

    def prefer_candidate(self, pair: Optional[Comparison] = None) -> bool:
        return self.answer(Choice.CANDIDATE, pair)

    def prefer_pivot(self, pair: Optional[Comparison] = None) -> bool:
        return self.answer(Choice.PIVOT, pair)

    def undo(self) -> bool:
        """Revert the last answer (and the insertion it caused). No-op at the start."""
        if not self.can_undo:
            return False
        undone = self.history.current
        self.history.pop()
        self.engine.restore(self.history.current)
        try:
            self.save()
        except CheckpointWriteError:
            self.history.push(undone)
            self.engine.restore(undone)
            raise
        log.debug(f"Undo: back to {len(self.sorted_names)} ranked, window {self.state.start}..{self.state.end}")
        return True

    def finish(self, sink: ResultSink) -> Tuple[str, ...]:
        """Hand the final order to *sink* once, then delete the checkpoint."""
        if not self.is_done:
            raise TierMakerError(f"Ranking is not finished ({self.remaining} items left)")
        if not self.finished:
            sink(self.sorted_names)
            self.store.clear()
            self.finished = True
        return self.sorted_names


def _resumable(checkpoint: Checkpoint, items: Sequence[str]) -> bool:
    if Counter(checkpoint.order) != Counter(items):
        return False
    return all(validate(s, checkpoint.order) for s in checkpoint.states)


def open_session(items: Iterable[str], store: Store, *,
                 history: bool = True, reconcile: bool = True) -> Session:
    """Start or resume ranking *items* with progress kept in *store*.

    A saved checkpoint for the same items resumes exactly (undo history
    included). One for a different item list is reconciled, or quarantined
    when reconciliation is switched off. The settled opening state is saved
    straight away unless the ranking is already complete.
    """
    items = tuple(items)
    saved = store.load()

    if saved is None:
        order, snapshots, origin = items, [RankingState.fresh(len(items))], FRESH
    elif _resumable(saved, items):
        order, snapshots, origin = saved.order, list(saved.states), RESUMED
    elif reconcile:
        result = reconcile_state(saved.current, items)
        if result.added or result.dropped:
            log.info(f"Item list changed: +{len(result.added)} new, -{len(result.dropped)} removed")
        order, snapshots, origin = result.order, [result.state], RECONCILED
    else:
        store.quarantine("checkpoint does not match the current item list")
        order, snapshots, origin = items, [RankingState.fresh(len(items))], FRESH

    engine = RankingEngine(order, snapshots[-1])
    snapshots[-1] = engine.state
    tracker = History(snapshots) if history else None

    session = Session(engine, store, tracker, origin)
    log.info(f"Session {origin}: {len(session.sorted_names)}/{len(items)} ranked")
    if not session.is_done:
        session.save()
    return session


def open_file_session(items_file, checkpoint_file, *,
                      history: bool = True, reconcile: bool = True) -> Session:
    """open_session() over an items file and a FileStore checkpoint."""
    items = read_items(items_file)
    if not items:
        raise NoItemsError(f"No items to rank in {items_file}")
    return open_session(items, FileStore(checkpoint_file), history=history, reconcile=reconcile)


__all__ = [
    "Session",
    "open_session",
    "open_file_session",
    "FRESH",
    "RESUMED",
    "RECONCILED",
]

"""
checkpoint.py - Durable ranking progress

A checkpoint is a small JSON document written after every answer:

    {"format": "tiermaker-checkpoint", "version": 1,
     "order": [...working item order...],
     "states": [{...RankingState...}, ...]}

``states`` is the undo history, oldest first; without undo it holds a single
state. A file that cannot be parsed is renamed aside (never deleted) so it can
be inspected, and the session starts over.
"""

import json
import pathlib
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, Union

from .errors import CheckpointWriteError, CorruptCheckpointError
from .ranking.state import RankingState
from tiermaker.utils.io_helpers import atomic_write_utf8, quarantine, read_utf8
from tiermaker.utils.logging_helper import get_logger

log = get_logger()

FORMAT = "tiermaker-checkpoint"
VERSION = 1


@dataclass(frozen=True)
class Checkpoint:
    order: Tuple[str, ...]
    states: Tuple[RankingState, ...]

    @classmethod
    def of(cls, order: Sequence[str], states: Sequence[RankingState]) -> "Checkpoint":
        return cls(order=tuple(order), states=tuple(states))

    @property
    def current(self) -> RankingState:
        return self.states[-1]


def serialize(checkpoint: Checkpoint) -> str:
    doc = {
        "format": FORMAT,
        "version": VERSION,
        "order": list(checkpoint.order),
        "states": [s.to_dict() for s in checkpoint.states],
    }
    return json.dumps(doc, ensure_ascii=False) + "\n"


def deserialize(text: str) -> Checkpoint:
    """Parse a checkpoint document. Raises CorruptCheckpointError on any defect."""
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptCheckpointError(f"not valid JSON: {e}") from e

    if not isinstance(doc, dict) or doc.get("format") != FORMAT:
        raise CorruptCheckpointError("missing checkpoint format marker")
    if doc.get("version") != VERSION:
        raise CorruptCheckpointError(f"unsupported checkpoint version {doc.get('version')!r}")

    order = doc.get("order")
    if not isinstance(order, list) or not all(isinstance(n, str) for n in order):
        raise CorruptCheckpointError("'order' must be a list of strings")

    raw_states = doc.get("states")
    if not isinstance(raw_states, list) or not raw_states:
        raise CorruptCheckpointError("'states' must be a non-empty list")
    states: List[RankingState] = []
    for i, raw in enumerate(raw_states):
        try:
            states.append(RankingState.from_dict(raw))
        except (KeyError, TypeError, ValueError) as e:
            raise CorruptCheckpointError(f"state #{i} is malformed: {e}") from e

    return Checkpoint.of(order, states)


class Store(Protocol):
    def load(self) -> Optional[Checkpoint]: ...

    def save(self, checkpoint: Checkpoint) -> None: ...

    def clear(self) -> None: ...

    def quarantine(self, reason: str) -> Optional[Any]: ...


class FileStore:
    """Checkpoint kept in a single file, replaced atomically on every save."""

    def __init__(self, path: Union[str, pathlib.Path]):
        self.path = pathlib.Path(path)

    def load(self) -> Optional[Checkpoint]:
        if not self.path.exists():
            return None
        try:
            return deserialize(read_utf8(self.path))
        except CorruptCheckpointError as e:
            self.quarantine(str(e))
            return None

    def save(self, checkpoint: Checkpoint) -> None:
        try:
            atomic_write_utf8(self.path, serialize(checkpoint))
        except OSError as e:
            log.error(f"Could not save checkpoint {self.path}: {e}")
            raise CheckpointWriteError(f"couldn't save ranking progress to {self.path}: {e}") from e

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            log.info(f"Removed checkpoint {self.path}")

    def quarantine(self, reason: str) -> Optional[pathlib.Path]:
        if not self.path.exists():
            return None
        moved = quarantine(self.path)
        log.warning(f"Quarantined checkpoint {self.path} -> {moved.name} ({reason})")
        return moved


class MemoryStore:
    """In-memory Store with the same contract as FileStore.

    Holds the serialized text so every save/load goes through the real codec.
    Set ``fail_writes`` to simulate a disk that refuses writes.
    """

    def __init__(self, text: Optional[str] = None):
        self.text = text
        self.quarantined: List[Dict[str, str]] = []
        self.saves = 0
        self.fail_writes = False

    def load(self) -> Optional[Checkpoint]:
        if self.text is None:
            return None
        try:
            return deserialize(self.text)
        except CorruptCheckpointError as e:
            self.quarantine(str(e))
            return None

    def save(self, checkpoint: Checkpoint) -> None:
        if self.fail_writes:
            raise CheckpointWriteError("couldn't save ranking progress (memory store refuses writes)")
        self.text = serialize(checkpoint)
        self.saves += 1

    def clear(self) -> None:
        self.text = None

    def quarantine(self, reason: str) -> Optional[Dict[str, str]]:
        if self.text is None:
            return None
        entry = {"text": self.text, "reason": reason}
        self.quarantined.append(entry)
        self.text = None
        log.warning(f"Quarantined in-memory checkpoint ({reason})")
        return entry

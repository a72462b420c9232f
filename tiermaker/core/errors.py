"""
errors.py - Exceptions raised by the ranking core

Only CorruptCheckpointError is recovered from locally (the checkpoint is
quarantined and the session starts fresh). The others stop the session.
"""


class TierMakerError(RuntimeError):
    pass


class NoItemsError(TierMakerError):
    """The item source is missing or holds no non-blank lines."""


class CorruptCheckpointError(TierMakerError):
    """A checkpoint could not be deserialized."""


class CheckpointWriteError(TierMakerError):
    """Progress could not be persisted; continuing would lose answers."""


class ReconcileError(TierMakerError):
    """A stale checkpoint could not be rebuilt into a consistent session."""

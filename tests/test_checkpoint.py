import json

import pytest

from conftest import oracle
from tiermaker.core.checkpoint import (
    Checkpoint,
    FileStore,
    MemoryStore,
    deserialize,
    serialize,
)
from tiermaker.core.errors import CheckpointWriteError, CorruptCheckpointError
from tiermaker.core.ranking import RankingEngine, RankingState
from tiermaker.core.session import FRESH, open_session

ITEMS = ["Alpha", "Beta", "Gamma", "Delta"]


def reachable_checkpoint():
    """Checkpoint holding the history of a half-finished ranking."""
    engine = RankingEngine(ITEMS)
    judge = oracle(["Gamma", "Alpha", "Delta", "Beta"])
    states = [engine.state]
    for _ in range(2):
        engine.answer(judge(engine.current_pair()))
        states.append(engine.state)
    return Checkpoint.of(ITEMS, states)


def test_round_trip():
    checkpoint = reachable_checkpoint()
    assert deserialize(serialize(checkpoint)) == checkpoint


def test_round_trip_keeps_unicode_names():
    state = RankingState(("Pokémon", "東方"), 0, 2, 2, 3)
    checkpoint = Checkpoint.of(["東方", "Pokémon", "Zoë"], [state])
    text = serialize(checkpoint)
    assert "Pokémon" in text
    assert deserialize(text) == checkpoint


def test_resave_is_byte_identical(tmp_path):
    store = FileStore(tmp_path / "TierMaker.tmp")
    store.save(reachable_checkpoint())
    first = store.path.read_bytes()

    store.save(store.load())
    assert store.path.read_bytes() == first


def test_file_store_missing_file_loads_none(tmp_path):
    assert FileStore(tmp_path / "nothing.tmp").load() is None


def test_save_leaves_no_temp_files(tmp_path):
    store = FileStore(tmp_path / "TierMaker.tmp")
    store.save(reachable_checkpoint())
    store.save(reachable_checkpoint())
    assert sorted(p.name for p in tmp_path.iterdir()) == ["TierMaker.tmp"]


def test_save_failure_is_fatal(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    store = FileStore(blocker / "TierMaker.tmp")
    with pytest.raises(CheckpointWriteError):
        store.save(reachable_checkpoint())


def test_clear_removes_checkpoint(tmp_path):
    store = FileStore(tmp_path / "TierMaker.tmp")
    store.save(reachable_checkpoint())
    store.clear()
    assert not store.path.exists()
    store.clear()  # nothing left to remove


@pytest.mark.parametrize("text", [
    "",
    "{",
    "[]",
    json.dumps({"format": "something-else", "version": 1, "order": [], "states": []}),
    json.dumps({"format": "tiermaker-checkpoint", "version": 99, "order": [], "states": []}),
    json.dumps({"format": "tiermaker-checkpoint", "version": 1, "order": ["a"], "states": []}),
    json.dumps({"format": "tiermaker-checkpoint", "version": 1, "order": [1], "states": [{}]}),
    json.dumps({"format": "tiermaker-checkpoint", "version": 1, "order": ["a"],
                "states": [{"sorted_names": [], "start": 0}]}),
    json.dumps({"format": "tiermaker-checkpoint", "version": 1, "order": ["a"],
                "states": [{"sorted_names": [], "start": "0", "end": 0,
                            "next_index": 0, "required_length": 1}]}),
])
def test_deserialize_rejects_malformed(text):
    with pytest.raises(CorruptCheckpointError):
        deserialize(text)


def test_truncated_file_is_quarantined_and_session_starts_fresh(tmp_path):
    path = tmp_path / "TierMaker.tmp"
    full = serialize(reachable_checkpoint())
    truncated = full[: len(full) // 2]
    path.write_text(truncated, encoding="utf-8")

    session = open_session(ITEMS, FileStore(path))

    assert session.origin == FRESH
    # fresh sessions begin from an empty window; the first item is then placed
    assert RankingState.fresh(len(ITEMS)) == RankingState((), 0, 0, 0, len(ITEMS))
    assert session.state == RankingState(("Alpha",), 0, 1, 1, len(ITEMS))

    quarantined = tmp_path / "TierMaker.tmp.quarantine"
    assert quarantined.read_text(encoding="utf-8") == truncated
    # the new session has written its own checkpoint next to it
    assert deserialize(path.read_text(encoding="utf-8")).current == session.state


def test_quarantine_never_overwrites(tmp_path):
    store = FileStore(tmp_path / "TierMaker.tmp")
    for i in range(3):
        store.path.write_text(f"broken {i}", encoding="utf-8")
        assert store.load() is None

    names = sorted(p.name for p in tmp_path.iterdir())
    assert names == [
        "TierMaker.tmp.quarantine",
        "TierMaker.tmp.quarantine1",
        "TierMaker.tmp.quarantine2",
    ]
    assert store.quarantine("nothing there") is None


def test_memory_store_contract():
    store = MemoryStore()
    assert store.load() is None

    checkpoint = reachable_checkpoint()
    store.save(checkpoint)
    assert store.saves == 1
    assert store.load() == checkpoint

    store.clear()
    assert store.load() is None

    store.text = "garbage"
    assert store.load() is None
    assert store.quarantined[0]["text"] == "garbage"

    store.fail_writes = True
    with pytest.raises(CheckpointWriteError):
        store.save(checkpoint)

import os
import sys
import tempfile
from pathlib import Path

# Keep log files and default paths out of the working tree. Must run before
# anything imports tiermaker.utils.paths.
os.environ.setdefault("TIERMAKER_ROOT", tempfile.mkdtemp(prefix="tiermaker-tests-"))

# Ensure project root itself is importable so the "tiermaker" package can be found
repo_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(repo_root))

import pytest

from tiermaker.core.ranking import Choice


def oracle(truth):
    """Answer comparisons the way someone holding the order *truth* would."""
    rank = {name: i for i, name in enumerate(truth)}

    def judge(pair):
        if rank[pair.candidate] < rank[pair.pivot]:
            return Choice.CANDIDATE
        return Choice.PIVOT

    return judge


def drive(ranker, judge, limit=10_000):
    """Feed *judge*'s answers to an engine or session until it is done.

    Returns the list of pairs that were asked.
    """
    asked = []
    while not ranker.is_done:
        pair = ranker.current_pair()
        asked.append(pair)
        assert ranker.answer(judge(pair), pair)
        assert len(asked) < limit, "ranking did not converge"
    return asked


@pytest.fixture()
def items_file(tmp_path):
    def write(*lines, name="titles.txt"):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return write

import math
import random

import pytest

from conftest import drive, oracle
from tiermaker.core.ranking import Choice, Comparison, RankingEngine, RankingState, validate
from tiermaker.core.ranking.engine import narrow


def test_empty_list_is_done_without_questions():
    engine = RankingEngine([])
    assert engine.is_done
    assert engine.current_pair() is None
    assert engine.sorted_names == ()


def test_single_item_needs_no_comparison():
    engine = RankingEngine(["Only"])
    assert engine.is_done
    assert engine.sorted_names == ("Only",)
    assert engine.answer(Choice.CANDIDATE) is None


def test_first_item_is_placed_without_asking():
    engine = RankingEngine(["Cat", "Dog"])
    # the window over the empty prefix is collapsed, so Cat is bootstrapped
    assert engine.sorted_names == ("Cat",)
    assert engine.current_pair() == Comparison(candidate="Dog", pivot="Cat")


def test_two_items_candidate_wins():
    engine = RankingEngine(["Cat", "Dog"])
    transition = engine.prefer_candidate()
    assert transition.inserted == ("Dog",)
    assert engine.is_done
    assert engine.sorted_names == ("Dog", "Cat")


def test_three_items_follow_binary_search_path():
    engine = RankingEngine(["A", "B", "C"])
    asked = drive(engine, oracle(["C", "B", "A"]))

    assert asked == [
        Comparison("B", "A"),
        Comparison("C", "A"),   # mid of [B, A] is A
        Comparison("C", "B"),
    ]
    assert engine.sorted_names == ("C", "B", "A")


@pytest.mark.parametrize("n", range(0, 12))
def test_any_consistent_order_is_reproduced(n):
    rng = random.Random(n)
    items = [f"item-{i}" for i in range(n)]
    truth = items[:]
    rng.shuffle(truth)

    engine = RankingEngine(items)
    asked = drive(engine, oracle(truth))

    assert list(engine.sorted_names) == truth
    # binary insertion: placing the k-th item costs at most ceil(log2(k + 1)) answers
    assert len(asked) <= sum(math.ceil(math.log2(k + 1)) for k in range(1, n))


def test_pivot_wins_keeps_insertion_order():
    engine = RankingEngine(["A", "B", "C", "D"])
    while not engine.is_done:
        engine.prefer_pivot()
    assert engine.sorted_names == ("A", "B", "C", "D")


def test_contradictory_answers_still_converge():
    # "the new one is always better" is not a consistent order, but every item
    # still ends up placed exactly once
    engine = RankingEngine(["A", "B", "C", "D", "E"])
    while not engine.is_done:
        engine.prefer_candidate()
    assert engine.sorted_names == ("E", "D", "C", "B", "A")


def test_stale_pair_is_ignored():
    engine = RankingEngine(["A", "B", "C"])
    first = engine.current_pair()
    assert engine.answer(Choice.CANDIDATE, first)
    before = engine.state

    # a repeated key press for the question just answered
    assert engine.answer(Choice.CANDIDATE, first) is None
    assert engine.state == before


def test_answers_after_completion_are_ignored():
    engine = RankingEngine(["Cat", "Dog"])
    engine.prefer_pivot()
    assert engine.is_done
    done = engine.state
    assert engine.prefer_candidate() is None
    assert engine.state == done


def test_choice_accepts_plain_strings():
    engine = RankingEngine(["Cat", "Dog"])
    engine.answer("candidate")
    assert engine.sorted_names == ("Dog", "Cat")


def test_narrow_clamps_window():
    state = RankingState(sorted_names=("A", "B", "C"), start=2, end=3,
                         next_index=3, required_length=5)
    assert narrow(state, Choice.PIVOT).start == 3
    assert narrow(state, Choice.CANDIDATE).end == 2

    collapsed = state.evolve(start=3, end=3)
    assert narrow(collapsed, Choice.PIVOT).start == 3
    assert narrow(collapsed, Choice.CANDIDATE).end == 3


def test_every_reachable_state_validates():
    items = ["a", "b", "c", "d", "e", "f"]
    engine = RankingEngine(items)
    judge = oracle(["d", "a", "f", "c", "e", "b"])
    while not engine.is_done:
        assert validate(engine.state, items)
        engine.answer(judge(engine.current_pair()))


def test_restore_resumes_from_snapshot():
    items = ["A", "B", "C", "D"]
    engine = RankingEngine(items)
    engine.prefer_candidate()
    snapshot = engine.state
    engine.prefer_pivot()

    engine.restore(snapshot)
    assert engine.state == snapshot
    assert engine.current_pair() == RankingEngine(items, snapshot).current_pair()


def test_state_validation_rules():
    items = ["A", "B", "C"]
    good = RankingState(sorted_names=("A",), start=0, end=1, next_index=1, required_length=3)
    assert validate(good, items)

    assert not validate(good.evolve(start=2), items)                  # start > end
    assert not validate(good.evolve(end=2), items)                    # end past prefix
    assert not validate(good.evolve(start=-1), items)
    assert not validate(good.evolve(next_index=4), items)             # past the list
    assert not validate(good.evolve(next_index=0), items)             # disagrees with prefix
    assert not validate(good.evolve(required_length=4), items)        # list length changed
    assert not validate(good, ["A", "B"])
    assert not validate(good.evolve(sorted_names=("X",)), items)      # not taken from the queue
    assert not validate(good, ["B", "A", "C"])                        # prefix is someone else
    finished = RankingState(("A", "B", "C"), 0, 3, 3, 3)
    assert not validate(finished, items)


def test_state_dict_form_rejects_wrong_types():
    state = RankingState(("A",), 0, 1, 1, 2)
    data = state.to_dict()
    assert RankingState.from_dict(data) == state

    with pytest.raises(TypeError):
        RankingState.from_dict({**data, "start": True})
    with pytest.raises(TypeError):
        RankingState.from_dict({**data, "sorted_names": ["A", 3]})
    with pytest.raises(KeyError):
        RankingState.from_dict({k: v for k, v in data.items() if k != "end"})

"""Reorder planning around continuity chains."""
from __future__ import annotations

from shotchain.engine.continuity import ContinuityIndex
from shotchain.engine.intents import Refusal, Rejected
from shotchain.engine.reorder import ReorderPlan, array_move, plan_move
from shotchain.models import ContinuityGroup, Shot


def _index(order, chains) -> ContinuityIndex:
    groups = [ContinuityGroup(id=f"g{n}", shot_ids=c, status="approved") for n, c in enumerate(chains)]
    return ContinuityIndex({"intro": [Shot(id=s) for s in order]}, {"intro": groups})


def test_array_move() -> None:
    assert array_move(["A", "B", "C", "D"], 0, 2) == ["B", "C", "A", "D"]
    assert array_move(["A", "B", "C", "D"], 3, 1) == ["A", "D", "B", "C"]


def test_chain_locked_shot_is_rejected() -> None:
    order = ["A", "B", "C"]
    result = plan_move("intro", order, 0, 2, _index(order, [["A", "B"]]))
    assert isinstance(result, Rejected)
    assert result.reason is Refusal.CHAIN_LOCKED
    assert result.shot_ids == ("A", "B", "C")
    assert order == ["A", "B", "C"]


def test_free_shot_moves() -> None:
    order = ["A", "B", "C", "D"]
    result = plan_move("intro", order, 3, 0, _index(order, [["B", "C"]]))
    assert isinstance(result, ReorderPlan)
    assert result.shot_ids == ("D", "A", "B", "C")
    assert result.moved_shot_id == "D"


def test_dropping_into_a_chain_is_rejected() -> None:
    order = ["A", "B", "C"]
    result = plan_move("intro", order, 2, 1, _index(order, [["A", "B"]]))
    assert isinstance(result, Rejected)
    assert result.reason is Refusal.SPLITS_CHAIN


def test_out_of_range_and_unchanged_moves() -> None:
    order = ["A", "B"]
    index = _index(order, [])
    assert plan_move("intro", order, 0, 5, index).reason is Refusal.OUT_OF_RANGE
    assert plan_move("intro", order, -1, 0, index).reason is Refusal.OUT_OF_RANGE
    assert plan_move("intro", order, 1, 1, index).reason is Refusal.UNCHANGED

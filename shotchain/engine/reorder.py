"""Drag-and-drop reorder planning.

The planner is advisory: it returns the complete new order for the host to
persist, or a rejection. Chain-locked shots never move, and no move may
separate two shots that are currently linked.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple, TypeVar, Union

from shotchain.engine.continuity import ContinuityIndex
from shotchain.engine.intents import Refusal, Rejected

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ReorderPlan:
    scene_id: str
    shot_ids: Tuple[str, ...]
    moved_shot_id: str


def array_move(items: Sequence[T], from_index: int, to_index: int) -> List[T]:
    moved = list(items)
    moved.insert(to_index, moved.pop(from_index))
    return moved


def _keeps_links(new_order: Sequence[str], pairs: Sequence[Tuple[str, str]]) -> bool:
    position = {shot_id: i for i, shot_id in enumerate(new_order)}
    return all(position[b] == position[a] + 1 for a, b in pairs if a in position and b in position)


def plan_move(
    scene_id: str,
    shot_ids: Sequence[str],
    from_index: int,
    to_index: int,
    continuity: ContinuityIndex,
) -> Union[ReorderPlan, Rejected]:
    current = tuple(shot_ids)
    if not (0 <= from_index < len(current) and 0 <= to_index < len(current)):
        return Rejected(Refusal.OUT_OF_RANGE, current)
    if from_index == to_index:
        return Rejected(Refusal.UNCHANGED, current)
    if continuity.is_part_of_any_chain(scene_id, from_index):
        logger.warning("Refusing to move chain-locked shot %s in scene %s", current[from_index], scene_id)
        return Rejected(Refusal.CHAIN_LOCKED, current)

    new_order = array_move(current, from_index, to_index)
    if not _keeps_links(new_order, continuity.linked_pairs(scene_id)):
        return Rejected(Refusal.SPLITS_CHAIN, current)
    return ReorderPlan(scene_id, tuple(new_order), current[from_index])

"""Adjacency queries over approved continuity groups.

Two neighbouring shots of a scene are linked when both appear in the same
approved group and the successor's position in that group immediately follows
the predecessor's. A shot that sits anywhere in an approved group is chain
locked: it cannot be dragged or deleted.

When several approved groups claim the same shot, the first group in the
host's iteration order wins.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from shotchain.models.continuity import ContinuityGroup
from shotchain.models.shot import Shot
from shotchain.models.state import StoryboardState


@dataclass(frozen=True)
class ChainPosition:
    group_id: str
    position: int
    length: int

    @property
    def is_first(self) -> bool:
        return self.position == 0

    @property
    def is_last(self) -> bool:
        return self.position == self.length - 1


@dataclass
class _SceneLinks:
    """Link table of one scene, aligned with the host's index array.

    ``slots`` holds ``None`` for ids the snapshot has no shot record for. Such
    a slot keeps its index but never links to either neighbour.
    """

    ids: List[str]
    slots: List[Optional[Shot]]
    positions: Dict[str, int] = field(default_factory=dict)
    next_group: List[Optional[str]] = field(default_factory=list)
    membership: Dict[str, ChainPosition] = field(default_factory=dict)


def _approved_for(scene_id: str, groups: Iterable[ContinuityGroup]) -> List[ContinuityGroup]:
    return [g for g in groups if g.is_approved and g.scene_id in (None, scene_id)]


def _build_links(
    scene_id: str, entries: Sequence[Union[Shot, str]], groups: Iterable[ContinuityGroup]
) -> _SceneLinks:
    links = _SceneLinks(
        ids=[entry if isinstance(entry, str) else entry.id for entry in entries],
        slots=[None if isinstance(entry, str) else entry for entry in entries],
    )
    for index, shot_id in enumerate(links.ids):
        links.positions.setdefault(shot_id, index)

    pair_group: Dict[Tuple[str, str], str] = {}
    for group in _approved_for(scene_id, groups):
        first_position: Dict[str, int] = {}
        for position, shot_id in enumerate(group.shot_ids):
            first_position.setdefault(shot_id, position)
        for shot_id, position in first_position.items():
            links.membership.setdefault(shot_id, ChainPosition(group.id, position, len(group.shot_ids)))
            if position == 0:
                continue
            previous_id = group.shot_ids[position - 1]
            if first_position[previous_id] == position - 1:
                pair_group.setdefault((previous_id, shot_id), group.id)

    slots = links.slots
    links.next_group = [
        pair_group.get((links.ids[i], links.ids[i + 1]))
        if slots[i] is not None and slots[i + 1] is not None
        else None
        for i in range(len(slots) - 1)
    ]
    links.next_group.append(None)
    return links


class ContinuityIndex:
    """Per-scene link table, built once and queried by shot index.

    Scene entries are shot records in index-array order. A bare id stands for
    an entry the host lists but has no record for; it occupies an index so
    indices match the host's array, and it breaks adjacency around it.
    """

    def __init__(
        self,
        scenes: Mapping[str, Sequence[Union[Shot, str]]],
        groups: Mapping[str, Sequence[ContinuityGroup]],
    ) -> None:
        self._scenes: Dict[str, _SceneLinks] = {
            scene_id: _build_links(scene_id, entries, groups.get(scene_id, ()))
            for scene_id, entries in scenes.items()
        }

    @classmethod
    def from_state(cls, state: StoryboardState, continuity_locked: bool = True) -> "ContinuityIndex":
        scenes = {
            scene.id: [state.shots.get(shot_id, shot_id) for shot_id in scene.shot_ids]
            for scene in state.scenes
        }
        groups = state.continuity_groups if continuity_locked else {}
        return cls(scenes, groups)

    def _shot_at(self, scene_id: str, index: int) -> Tuple[Optional[_SceneLinks], Optional[Shot]]:
        links = self._scenes.get(scene_id)
        if links is None or not 0 <= index < len(links.slots):
            return links, None
        return links, links.slots[index]

    def shot_ids(self, scene_id: str) -> List[str]:
        """The scene's full index array, unresolved ids included."""

        links = self._scenes.get(scene_id)
        return list(links.ids) if links else []

    def placed_shots(self, scene_id: str) -> List[Tuple[int, Shot]]:
        """Resolved shots with their index in the host's array."""

        links = self._scenes.get(scene_id)
        if links is None:
            return []
        return [(index, shot) for index, shot in enumerate(links.slots) if shot is not None]

    def shots(self, scene_id: str) -> List[Shot]:
        return [shot for _, shot in self.placed_shots(scene_id)]

    def shot_at(self, scene_id: str, index: int) -> Optional[Shot]:
        return self._shot_at(scene_id, index)[1]

    def index_of(self, scene_id: str, shot_id: str) -> Optional[int]:
        links = self._scenes.get(scene_id)
        if links is None:
            return None
        return links.positions.get(shot_id)

    def link_group(self, scene_id: str, index: int) -> Optional[str]:
        """Id of the group linking the shot at ``index`` to the next shot."""

        links, shot = self._shot_at(scene_id, index)
        if shot is None:
            return None
        return links.next_group[index]

    def is_linked_to_next(self, scene_id: str, index: int) -> bool:
        return self.link_group(scene_id, index) is not None

    def is_linked_to_previous(self, scene_id: str, index: int) -> bool:
        return index > 0 and self.is_linked_to_next(scene_id, index - 1)

    def is_part_of_any_chain(self, scene_id: str, index: int) -> bool:
        return self.chain_position(scene_id, index) is not None

    def chain_position(self, scene_id: str, index: int) -> Optional[ChainPosition]:
        links, shot = self._shot_at(scene_id, index)
        if shot is None:
            return None
        return links.membership.get(shot.id)

    def is_standalone(self, scene_id: str, index: int) -> bool:
        """True when the shot is outside every chain or closes its chain."""

        position = self.chain_position(scene_id, index)
        return position is None or position.is_last

    def next_linked(self, scene_id: str, index: int) -> Optional[Shot]:
        if not self.is_linked_to_next(scene_id, index):
            return None
        return self._scenes[scene_id].slots[index + 1]

    def previous_linked(self, scene_id: str, index: int) -> Optional[Shot]:
        if not self.is_linked_to_previous(scene_id, index):
            return None
        return self._scenes[scene_id].slots[index - 1]

    def linked_pairs(self, scene_id: str) -> List[Tuple[str, str]]:
        links = self._scenes.get(scene_id)
        if links is None:
            return []
        return [
            (links.ids[i], links.ids[i + 1])
            for i, group_id in enumerate(links.next_group)
            if group_id is not None
        ]

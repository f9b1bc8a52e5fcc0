"""Shared storyboard fixtures."""
from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional

import pytest

from shotchain.models import ContinuityGroup, FrameMode, Scene, Shot, ShotVersion, StoryboardState


def version(shot_id: str, number: int, **fields) -> ShotVersion:
    return ShotVersion(id=f"{shot_id}-v{number}", shot_id=shot_id, version_number=number, **fields)


def build_state(
    shot_ids: Iterable[str],
    versions: Optional[Dict[str, List[ShotVersion]]] = None,
    groups: Iterable[List[str]] = (),
    group_status: str = "approved",
    inherited: Iterable[str] = (),
    current: Optional[Dict[str, str]] = None,
    frame_modes: Optional[Dict[str, FrameMode]] = None,
    scene_id: str = "intro",
    **state_fields,
) -> StoryboardState:
    ids = list(shot_ids)
    versions = versions or {}
    current = current or {}
    frame_modes = frame_modes or {}
    shots = {}
    for number, shot_id in enumerate(ids, start=1):
        known = versions.get(shot_id, [])
        shots[shot_id] = Shot(
            id=shot_id,
            scene_id=scene_id,
            shot_number=number,
            frame_mode=frame_modes.get(shot_id),
            current_version_id=current.get(shot_id, known[-1].id if known else None),
        )
    return StoryboardState(
        scenes=[Scene(id=scene_id, title="Intro", shot_ids=ids)],
        shots=shots,
        versions=versions,
        continuity_groups={
            scene_id: [
                ContinuityGroup(id=f"g{n}", scene_id=scene_id, group_number=n, shot_ids=members, status=group_status)
                for n, members in enumerate(groups, start=1)
            ]
        },
        inherited_start_frames=set(inherited),
        **state_fields,
    )


@pytest.fixture
def make_state() -> Callable[..., StoryboardState]:
    return build_state


@pytest.fixture
def make_version() -> Callable[..., ShotVersion]:
    return version

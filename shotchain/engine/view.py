"""Derived per-shot view state and scene-wide planning helpers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from shotchain.engine.continuity import ContinuityIndex
from shotchain.engine.frames import EndFrame, StartFrame
from shotchain.engine.intents import FrameSlot
from shotchain.engine.versions import ResolutionReason
from shotchain.models.shot import FrameMode, ShotVersion


@dataclass(frozen=True)
class ShotView:
    shot_id: str
    scene_id: str
    index: int
    mode: FrameMode
    active_version_id: Optional[str]
    displayed_version_id: Optional[str]
    resolution: ResolutionReason
    previewing: bool
    image_url: Optional[str]
    image_prompt: Optional[str]
    start_frame: Optional[StartFrame]
    end_frame: Optional[EndFrame]
    video_url: Optional[str]
    linked_to_next: bool
    linked_to_previous: bool
    chain_locked: bool
    deletable: bool
    show_end_frame: bool
    image_model: Optional[str]
    video_model: Optional[str]
    open_edit: Optional[FrameSlot] = None

    @property
    def draggable(self) -> bool:
        return not self.chain_locked

    @property
    def has_versions(self) -> bool:
        return self.active_version_id is not None


@dataclass(frozen=True)
class GenerationStep:
    shot_id: str
    frame: FrameSlot
    depends_on: Optional[str] = None


def resolve_model(shot_value: Optional[str], scene_value: Optional[str], default: Optional[str]) -> Optional[str]:
    """Shot setting first, then the scene's, then the session default."""

    return shot_value or scene_value or default


def is_ready_to_animate(mode: FrameMode, version: Optional[ShotVersion], start_frame: Optional[StartFrame]) -> bool:
    if version is None:
        return False
    if mode is FrameMode.SINGLE_IMAGE:
        return bool(version.image_url)
    return start_frame is not None and start_frame.generated


def plan_scene_generation(
    scene_id: str,
    continuity: ContinuityIndex,
    version_of: Callable[[str], Optional[ShotVersion]],
    mode_of: Callable[[str], FrameMode],
    start_of: Callable[[str], Optional[StartFrame]],
) -> List[GenerationStep]:
    """Frames still missing in a scene, in the order they must be generated.

    A shot whose start frame is inherited only needs its end frame, and that
    step waits on the predecessor's end frame.
    """

    steps: List[GenerationStep] = []
    for shot in continuity.shots(scene_id):
        version = version_of(shot.id)
        if mode_of(shot.id) is FrameMode.SINGLE_IMAGE:
            if version is None or not version.image_url:
                steps.append(GenerationStep(shot.id, FrameSlot.IMAGE))
            continue

        start = start_of(shot.id)
        has_end = version is not None and bool(version.end_frame_url)
        if start is not None and start.locked:
            if not has_end:
                steps.append(GenerationStep(shot.id, FrameSlot.END, depends_on=start.inherited_from))
            continue
        if version is None or not version.start_frame_url:
            steps.append(GenerationStep(shot.id, FrameSlot.START))
        if not has_end:
            steps.append(GenerationStep(shot.id, FrameSlot.END))
    return steps

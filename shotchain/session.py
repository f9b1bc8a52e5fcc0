"""Editor session: event handling over a host snapshot.

The session owns the ephemeral state of the storyboard editor (previews,
locally cached versions, the frame currently open for editing) and turns UI
events into intents for the host. Events are handled synchronously in arrival
order. Nothing here performs I/O; accepted intents go to an ``IntentSink`` and
the host answers with a fresh snapshot through :meth:`EditorSession.refresh`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from shotchain.config import ShotchainSettings, settings as default_settings
from shotchain.engine.cache import VersionCache
from shotchain.engine.continuity import ContinuityIndex
from shotchain.engine.frames import EndFrame, StartFrame, effective_end_frame, effective_start_frame
from shotchain.engine.intents import (
    DeleteShot,
    Forbidden,
    FrameSlot,
    Intent,
    RecordLocalVersion,
    Refusal,
    Rejected,
    ReorderShots,
    RequestAnimate,
    RequestEdit,
    RequestGenerate,
    SetActiveVersion,
    SetPreviewVersion,
    UpdateVersionFields,
)
from shotchain.engine.narrative import classify
from shotchain.engine.reorder import ReorderPlan, plan_move
from shotchain.engine.versions import ResolutionReason, VersionResolution, explain_active, explain_previewed
from shotchain.engine.view import GenerationStep, ShotView, is_ready_to_animate, plan_scene_generation, resolve_model
from shotchain.host import IntentSink, RecordingSink
from shotchain.models.shot import FrameMode, Shot, ShotVersion
from shotchain.models.state import StoryboardState

logger = logging.getLogger(__name__)

PROMPT_FIELDS = {
    FrameSlot.IMAGE: "image_prompt",
    FrameSlot.START: "start_frame_prompt",
    FrameSlot.END: "end_frame_prompt",
}

URL_FIELDS = {
    FrameSlot.IMAGE: "image_url",
    FrameSlot.START: "start_frame_url",
    FrameSlot.END: "end_frame_url",
}


@dataclass(frozen=True)
class _Placement:
    shot: Shot
    scene_id: Optional[str]
    index: Optional[int]


class EditorSession:
    def __init__(
        self,
        state: StoryboardState,
        sink: Optional[IntentSink] = None,
        settings: Optional[ShotchainSettings] = None,
    ) -> None:
        self.settings = settings or default_settings
        self.sink = sink if sink is not None else RecordingSink()
        self._cache = VersionCache()
        self._previews: Dict[str, str] = {}
        self._open_edits: Dict[str, FrameSlot] = {}
        self.refresh(state)

    # -- snapshot ---------------------------------------------------------

    @property
    def state(self) -> StoryboardState:
        return self._state

    @property
    def continuity(self) -> ContinuityIndex:
        return self._continuity

    @property
    def default_frame_mode(self) -> FrameMode:
        return self._state.default_frame_mode or self.settings.default_frame_mode

    @property
    def continuity_locked(self) -> bool:
        if self._state.continuity_locked is not None:
            return self._state.continuity_locked
        return self.settings.continuity_locked

    def refresh(self, state: StoryboardState) -> None:
        """Adopt a new host snapshot; the host is authoritative from here on."""

        self._state = state
        for shot_id in self._cache.shot_ids():
            if shot_id in state.shots:
                self._cache.reconcile(shot_id, state.versions_for(shot_id))
            else:
                self._cache.discard(shot_id)
        for shot_id in [s for s in self._previews if s not in state.shots]:
            del self._previews[shot_id]
        for shot_id in [s for s in self._open_edits if s not in state.shots]:
            del self._open_edits[shot_id]
        self._continuity = ContinuityIndex.from_state(state, self.continuity_locked)

    def _place(self, shot_id: str) -> Optional[_Placement]:
        shot = self._state.shot(shot_id)
        if shot is None:
            return None
        scene = self._state.scene_of(shot_id)
        if scene is None:
            return _Placement(shot, None, None)
        return _Placement(shot, scene.id, self._continuity.index_of(scene.id, shot_id))

    def _emit(self, intent: Intent) -> Intent:
        logger.info("Emitting %s", intent)
        self.sink.dispatch(intent)
        return intent

    def _refuse(self, shot_id: Optional[str], reason: Refusal) -> Forbidden:
        logger.info("Refused command for shot %s: %s", shot_id, reason.value)
        return Forbidden(shot_id, reason)

    # -- versions ---------------------------------------------------------

    def versions_for(self, shot_id: str) -> List[ShotVersion]:
        return self._cache.merged_versions(shot_id, self._state.versions_for(shot_id))

    def cached_versions(self, shot_id: str) -> List[ShotVersion]:
        return self._cache.cached(shot_id)

    def preview_of(self, shot_id: str) -> Optional[str]:
        return self._previews.get(shot_id)

    def open_edit_of(self, shot_id: str) -> Optional[FrameSlot]:
        return self._open_edits.get(shot_id)

    def _explain_active(self, shot: Shot) -> VersionResolution:
        resolution = explain_active(shot, self.versions_for(shot.id))
        if resolution.is_fallback:
            logger.debug(
                "Shot %s: current version %s not found, showing version %s",
                shot.id,
                shot.current_version_id,
                resolution.version.id if resolution.version else None,
            )
        return resolution

    def _explain_displayed(self, shot: Shot) -> VersionResolution:
        return explain_previewed(
            shot,
            self._state.versions_for(shot.id),
            self._cache.cached(shot.id),
            self._previews.get(shot.id),
        )

    def active_version(self, shot_id: str) -> Optional[ShotVersion]:
        shot = self._state.shot(shot_id)
        if shot is None:
            return None
        return self._explain_active(shot).version

    def previewed_version(self, shot_id: str) -> Optional[ShotVersion]:
        shot = self._state.shot(shot_id)
        if shot is None:
            return None
        return self._explain_displayed(shot).version

    def _has_version(self, shot_id: str, version_id: str) -> bool:
        return any(v.id == version_id for v in self.versions_for(shot_id))

    def select_preview(self, shot_id: str, version_id: Optional[str]) -> Union[SetPreviewVersion, Forbidden]:
        if self._state.shot(shot_id) is None:
            return self._refuse(shot_id, Refusal.UNKNOWN_SHOT)
        if version_id is None:
            self._previews.pop(shot_id, None)
        elif not self._has_version(shot_id, version_id):
            return self._refuse(shot_id, Refusal.UNKNOWN_VERSION)
        else:
            self._previews[shot_id] = version_id
        return self._emit(SetPreviewVersion(shot_id, version_id))

    def set_active_version(self, shot_id: str, version_id: str) -> Union[SetActiveVersion, Forbidden]:
        if self._state.shot(shot_id) is None:
            return self._refuse(shot_id, Refusal.UNKNOWN_SHOT)
        if not self._has_version(shot_id, version_id):
            return self._refuse(shot_id, Refusal.UNKNOWN_VERSION)
        return self._emit(SetActiveVersion(shot_id, version_id))

    def commit_preview(self, shot_id: str) -> Union[SetActiveVersion, Forbidden]:
        preview = self._previews.get(shot_id)
        if preview is None:
            return self._refuse(shot_id, Refusal.UNKNOWN_VERSION)
        result = self.set_active_version(shot_id, preview)
        if isinstance(result, SetActiveVersion):
            del self._previews[shot_id]
        return result

    def edit_completed(self, shot_id: str, version: ShotVersion) -> Union[RecordLocalVersion, Forbidden]:
        """Show an edit result right away, before the host lists it."""

        if self._state.shot(shot_id) is None:
            return self._refuse(shot_id, Refusal.UNKNOWN_SHOT)
        self._cache.record_local(shot_id, version)
        self._open_edits.pop(shot_id, None)
        return self._emit(RecordLocalVersion(shot_id, version))

    def open_edit(self, shot_id: str, frame: FrameSlot) -> Optional[Forbidden]:
        if self._state.shot(shot_id) is None:
            return self._refuse(shot_id, Refusal.UNKNOWN_SHOT)
        self._open_edits[shot_id] = frame
        return None

    def abandon(self, shot_id: str) -> None:
        """Drop the preview and open edit of a shot whose dialog was closed."""

        self._previews.pop(shot_id, None)
        self._open_edits.pop(shot_id, None)

    # -- frames -----------------------------------------------------------

    def mode_of(self, shot_id: str) -> FrameMode:
        shot = self._state.shot(shot_id)
        if shot is None:
            return self.default_frame_mode
        return classify(shot, self._explain_active(shot).version, self.default_frame_mode)

    def _start_frame(self, place: _Placement, version: Optional[ShotVersion]) -> StartFrame:
        previous = None
        previous_version = None
        if place.scene_id is not None and place.index is not None:
            previous = self._continuity.previous_linked(place.scene_id, place.index)
        if previous is not None:
            previous_version = self.active_version(previous.id)
        return effective_start_frame(
            place.shot,
            version,
            previous,
            previous_version,
            self._state.was_marked_inherited(place.shot.id),
        )

    def _end_frame(self, place: _Placement, version: Optional[ShotVersion]) -> EndFrame:
        following = None
        following_version = None
        if place.scene_id is not None and place.index is not None:
            following = self._continuity.next_linked(place.scene_id, place.index)
        if following is not None:
            following_version = self.active_version(following.id)
        return effective_end_frame(place.shot, version, following, following_version)

    def start_frame(self, shot_id: str) -> Optional[StartFrame]:
        place = self._place(shot_id)
        if place is None:
            return None
        return self._start_frame(place, self.previewed_version(shot_id))

    def end_frame(self, shot_id: str) -> Optional[EndFrame]:
        place = self._place(shot_id)
        if place is None:
            return None
        return self._end_frame(place, self.previewed_version(shot_id))

    def _resolve_frame(self, mode: FrameMode, frame: Optional[FrameSlot]) -> Optional[FrameSlot]:
        if frame is None:
            return FrameSlot.IMAGE if mode is FrameMode.SINGLE_IMAGE else FrameSlot.START
        if (mode is FrameMode.SINGLE_IMAGE) != (frame is FrameSlot.IMAGE):
            return None
        return frame

    # -- generation commands ----------------------------------------------

    def request_generate(
        self, shot_id: str, frame: Optional[FrameSlot] = None
    ) -> Union[RequestGenerate, Forbidden]:
        place = self._place(shot_id)
        if place is None:
            return self._refuse(shot_id, Refusal.UNKNOWN_SHOT)
        slot = self._resolve_frame(self.mode_of(shot_id), frame)
        if slot is None:
            return self._refuse(shot_id, Refusal.FRAME_NOT_IN_MODE)
        if slot is not FrameSlot.IMAGE:
            start = self._start_frame(place, self.previewed_version(shot_id))
            if slot is FrameSlot.START and start.locked:
                return self._refuse(shot_id, Refusal.FRAME_IS_INHERITED)
            if slot is FrameSlot.END and not start.generated:
                return self._refuse(shot_id, Refusal.MISSING_START_FRAME)
        return self._emit(RequestGenerate(shot_id, slot))

    def request_edit(
        self, shot_id: str, instruction: str, frame: Optional[FrameSlot] = None
    ) -> Union[RequestEdit, Forbidden]:
        place = self._place(shot_id)
        if place is None:
            return self._refuse(shot_id, Refusal.UNKNOWN_SHOT)
        version = self.previewed_version(shot_id)
        if version is None:
            return self._refuse(shot_id, Refusal.NO_ACTIVE_VERSION)
        slot = self._resolve_frame(self.mode_of(shot_id), frame)
        if slot is None:
            return self._refuse(shot_id, Refusal.FRAME_NOT_IN_MODE)
        if slot is FrameSlot.START and self._start_frame(place, version).locked:
            return self._refuse(shot_id, Refusal.FRAME_IS_INHERITED)
        if not getattr(version, URL_FIELDS[slot]):
            return self._refuse(shot_id, Refusal.MISSING_IMAGE)
        self._open_edits[shot_id] = slot
        return self._emit(RequestEdit(shot_id, version.id, instruction, slot))

    def request_animate(self, shot_id: str) -> Union[RequestAnimate, Forbidden]:
        place = self._place(shot_id)
        if place is None:
            return self._refuse(shot_id, Refusal.UNKNOWN_SHOT)
        version = self.active_version(shot_id)
        if version is None:
            return self._refuse(shot_id, Refusal.NO_ACTIVE_VERSION)
        mode = self.mode_of(shot_id)
        start = self._start_frame(place, version) if mode is FrameMode.START_END else None
        if not is_ready_to_animate(mode, version, start):
            reason = Refusal.MISSING_IMAGE if mode is FrameMode.SINGLE_IMAGE else Refusal.MISSING_START_FRAME
            return self._refuse(shot_id, reason)
        return self._emit(RequestAnimate(shot_id, version.id))

    def update_prompt(
        self, shot_id: str, frame: FrameSlot, text: str
    ) -> Union[UpdateVersionFields, Forbidden]:
        place = self._place(shot_id)
        if place is None:
            return self._refuse(shot_id, Refusal.UNKNOWN_SHOT)
        version = self.active_version(shot_id)
        if version is None:
            return self._refuse(shot_id, Refusal.NO_ACTIVE_VERSION)
        if self._resolve_frame(self.mode_of(shot_id), frame) is None:
            return self._refuse(shot_id, Refusal.FRAME_NOT_IN_MODE)
        if frame is FrameSlot.START and self._start_frame(place, version).locked:
            return self._refuse(shot_id, Refusal.FRAME_IS_INHERITED)
        return self._emit(UpdateVersionFields(shot_id, version.id, {PROMPT_FIELDS[frame]: text}))

    def update_video_prompt(self, shot_id: str, text: str) -> Union[UpdateVersionFields, Forbidden]:
        if self._state.shot(shot_id) is None:
            return self._refuse(shot_id, Refusal.UNKNOWN_SHOT)
        version = self.active_version(shot_id)
        if version is None:
            return self._refuse(shot_id, Refusal.NO_ACTIVE_VERSION)
        return self._emit(UpdateVersionFields(shot_id, version.id, {"video_prompt": text}))

    # -- ordering ---------------------------------------------------------

    def move_shot(self, scene_id: str, from_index: int, to_index: int) -> Union[ReorderShots, Rejected]:
        if self._state.scene(scene_id) is None:
            return Rejected(Refusal.UNKNOWN_SCENE)
        shot_ids = self._continuity.shot_ids(scene_id)
        plan = plan_move(scene_id, shot_ids, from_index, to_index, self._continuity)
        if not isinstance(plan, ReorderPlan):
            logger.info("Reorder in scene %s rejected: %s", scene_id, plan.reason.value)
            return plan
        return self._emit(ReorderShots(scene_id, plan.shot_ids))

    def drop_shot(self, scene_id: str, shot_id: str, over_shot_id: str) -> Union[ReorderShots, Rejected]:
        """Adapt a drag gesture (dragged shot dropped over another) to a move."""

        from_index = self._continuity.index_of(scene_id, shot_id)
        to_index = self._continuity.index_of(scene_id, over_shot_id)
        if from_index is None or to_index is None:
            if self._state.scene(scene_id) is None:
                return Rejected(Refusal.UNKNOWN_SCENE)
            current = tuple(self._continuity.shot_ids(scene_id))
            return Rejected(Refusal.OUT_OF_RANGE, current)
        return self.move_shot(scene_id, from_index, to_index)

    def delete_shot(self, shot_id: str) -> Union[DeleteShot, Forbidden]:
        place = self._place(shot_id)
        if place is None:
            return self._refuse(shot_id, Refusal.UNKNOWN_SHOT)
        if place.scene_id is None or place.index is None:
            return self._refuse(shot_id, Refusal.UNKNOWN_SCENE)
        if len(self._continuity.shots(place.scene_id)) <= 1:
            return self._refuse(shot_id, Refusal.LAST_SHOT_IN_SCENE)
        if self._continuity.is_part_of_any_chain(place.scene_id, place.index):
            return self._refuse(shot_id, Refusal.CHAIN_LOCKED)
        return self._emit(DeleteShot(place.scene_id, shot_id))

    # -- derived view -----------------------------------------------------

    def _build_view(self, scene_id: str, index: int, shot: Shot) -> ShotView:
        continuity = self._continuity
        scene = self._state.scene(scene_id)
        active = self._explain_active(shot)
        displayed = self._explain_displayed(shot)
        version = displayed.version
        mode = classify(shot, active.version, self.default_frame_mode)
        place = _Placement(shot, scene_id, index)

        start = end = None
        if mode is FrameMode.START_END:
            start = self._start_frame(place, version)
            end = self._end_frame(place, version)

        chain_locked = continuity.is_part_of_any_chain(scene_id, index)
        linked_to_next = continuity.is_linked_to_next(scene_id, index)
        return ShotView(
            shot_id=shot.id,
            scene_id=scene_id,
            index=index,
            mode=mode,
            active_version_id=active.version.id if active.version else None,
            displayed_version_id=version.id if version else None,
            resolution=displayed.reason,
            previewing=displayed.reason is ResolutionReason.PREVIEW,
            image_url=version.image_url if version else None,
            image_prompt=version.image_prompt if version else None,
            start_frame=start,
            end_frame=end,
            video_url=version.video_url if version else None,
            linked_to_next=linked_to_next,
            linked_to_previous=continuity.is_linked_to_previous(scene_id, index),
            chain_locked=chain_locked,
            deletable=len(continuity.shots(scene_id)) > 1 and not chain_locked,
            show_end_frame=mode is FrameMode.START_END
            and (linked_to_next or continuity.is_standalone(scene_id, index)),
            image_model=resolve_model(
                shot.image_model,
                scene.image_model if scene else None,
                self._state.default_image_model or self.settings.default_image_model,
            ),
            video_model=resolve_model(
                shot.video_model,
                scene.video_model if scene else None,
                self._state.default_video_model or self.settings.default_video_model,
            ),
            open_edit=self._open_edits.get(shot.id),
        )

    def shot_view(self, shot_id: str) -> Optional[ShotView]:
        place = self._place(shot_id)
        if place is None or place.scene_id is None or place.index is None:
            return None
        return self._build_view(place.scene_id, place.index, place.shot)

    def scene_view(self, scene_id: str) -> List[ShotView]:
        return [
            self._build_view(scene_id, index, shot)
            for index, shot in self._continuity.placed_shots(scene_id)
        ]

    def generation_plan(self, scene_id: str) -> List[GenerationStep]:
        def start_of(shot_id: str) -> Optional[StartFrame]:
            place = self._place(shot_id)
            if place is None:
                return None
            return self._start_frame(place, self.active_version(shot_id))

        return plan_scene_generation(scene_id, self._continuity, self.active_version, self.mode_of, start_of)

    def animation_candidates(self, scene_id: str) -> List[str]:
        """Shots ready to animate that have no video yet."""

        candidates: List[str] = []
        for index, shot in self._continuity.placed_shots(scene_id):
            version = self.active_version(shot.id)
            if version is None or version.video_url:
                continue
            mode = self.mode_of(shot.id)
            start = None
            if mode is FrameMode.START_END:
                start = self._start_frame(_Placement(shot, scene_id, index), version)
            if is_ready_to_animate(mode, version, start):
                candidates.append(shot.id)
        return candidates

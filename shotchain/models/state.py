"""Host snapshot of a storyboard and its JSON round trip."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from pydantic import Field, ValidationError, field_validator

from shotchain.errors import SnapshotError, UnknownShotError
from shotchain.models.base import HostModel
from shotchain.models.continuity import ContinuityGroup
from shotchain.models.shot import FrameMode, Scene, Shot, ShotVersion
from shotchain.utils.io import log_path, read_json, write_json


class StoryboardState(HostModel):
    """Everything the host knows about a storyboard at one refresh.

    Derived values (modes, inheritance, lock status) are never stored here;
    they are recomputed from this object on every query.
    """

    scenes: List[Scene] = Field(default_factory=list)
    shots: Dict[str, Shot] = Field(default_factory=dict)
    versions: Dict[str, List[ShotVersion]] = Field(default_factory=dict)
    continuity_groups: Dict[str, List[ContinuityGroup]] = Field(default_factory=dict)
    inherited_start_frames: Set[str] = Field(default_factory=set)

    default_frame_mode: Optional[FrameMode] = None
    continuity_locked: Optional[bool] = None
    default_image_model: Optional[str] = None
    default_video_model: Optional[str] = None

    @field_validator("shots", mode="before")
    @classmethod
    def shots_by_id(cls, value: Any) -> Any:
        if isinstance(value, list):
            return {_record_id(item): item for item in value}
        return value

    @field_validator("versions", mode="before")
    @classmethod
    def versions_by_shot(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        grouped: Dict[str, List[Any]] = {}
        for item in value:
            shot_id = _record_field(item, "shot_id", "shotId")
            if shot_id is None:
                raise ValueError("Flat version lists require a shotId on every version")
            grouped.setdefault(shot_id, []).append(item)
        return grouped

    def scene(self, scene_id: str) -> Optional[Scene]:
        for scene in self.scenes:
            if scene.id == scene_id:
                return scene
        return None

    def scene_of(self, shot_id: str) -> Optional[Scene]:
        shot = self.shots.get(shot_id)
        if shot is not None and shot.scene_id is not None:
            found = self.scene(shot.scene_id)
            if found is not None:
                return found
        for scene in self.scenes:
            if shot_id in scene.shot_ids:
                return scene
        return None

    def shot(self, shot_id: str) -> Optional[Shot]:
        return self.shots.get(shot_id)

    def require_shot(self, shot_id: str) -> Shot:
        try:
            return self.shots[shot_id]
        except KeyError:
            raise UnknownShotError(shot_id) from None

    def ordered_shots(self, scene_id: str) -> List[Shot]:
        """Shots of a scene in index-array order; ids without a record are skipped."""

        scene = self.scene(scene_id)
        if scene is None:
            return []
        return [self.shots[shot_id] for shot_id in scene.shot_ids if shot_id in self.shots]

    def versions_for(self, shot_id: str) -> List[ShotVersion]:
        return list(self.versions.get(shot_id, []))

    def groups_for(self, scene_id: str) -> List[ContinuityGroup]:
        return list(self.continuity_groups.get(scene_id, []))

    def was_marked_inherited(self, shot_id: str) -> bool:
        return shot_id in self.inherited_start_frames


def _record_field(item: Any, name: str, alias: str) -> Any:
    if isinstance(item, dict):
        return item.get(alias, item.get(name))
    return getattr(item, name, None)


def _record_id(item: Any) -> str:
    record_id = _record_field(item, "id", "id")
    if record_id is None:
        raise ValueError("Every shot record needs an id")
    return record_id


def load_state(path: Path) -> StoryboardState:
    data = read_json(path)
    try:
        return StoryboardState.model_validate(data)
    except ValidationError as exc:
        raise SnapshotError(f"Invalid storyboard snapshot {path}: {exc}") from exc


def save_state(path: Path, state: StoryboardState) -> Path:
    write_json(path, state.model_dump(mode="json", by_alias=True))
    log_path(path)
    return path

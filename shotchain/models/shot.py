"""Scenes, shots and their generated versions."""
from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import ConfigDict, Field, field_validator

from shotchain.models.base import HostModel


class FrameMode(str, Enum):
    SINGLE_IMAGE = "single-image"
    START_END = "start-end"


class Scene(HostModel):
    id: str
    title: str = ""
    scene_number: int = 0
    image_model: Optional[str] = None
    video_model: Optional[str] = None
    shot_ids: List[str] = Field(default_factory=list)

    @field_validator("shot_ids", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class Shot(HostModel):
    id: str
    scene_id: Optional[str] = None
    shot_number: int = 0
    frame_mode: Optional[FrameMode] = None
    current_version_id: Optional[str] = None
    transition: Optional[str] = "cut"
    description: Optional[str] = None
    image_model: Optional[str] = None
    video_model: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=0)

    @field_validator("frame_mode", mode="before")
    @classmethod
    def legacy_image_reference(cls, value: Any) -> Any:
        # older hosts still send the pre-rename value
        if value == "image-reference":
            return FrameMode.SINGLE_IMAGE
        return value


class ShotVersion(HostModel):
    """One generated artifact attempt for a shot.

    Versions are immutable; a host-applied field patch produces a new
    instance through :meth:`with_fields`.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    shot_id: Optional[str] = None
    version_number: int = Field(default=0, ge=0)

    image_prompt: Optional[str] = None
    image_url: Optional[str] = None

    start_frame_prompt: Optional[str] = None
    start_frame_url: Optional[str] = None
    end_frame_prompt: Optional[str] = None
    end_frame_url: Optional[str] = None

    video_prompt: Optional[str] = None
    video_url: Optional[str] = None
    video_duration: Optional[int] = None

    status: str = "draft"
    needs_rerender: bool = False

    @property
    def has_single_image_fields(self) -> bool:
        return bool(self.image_prompt or self.image_url)

    @property
    def has_start_end_fields(self) -> bool:
        return bool(
            self.start_frame_prompt
            or self.end_frame_prompt
            or self.start_frame_url
            or self.end_frame_url
        )

    def with_fields(self, **changes: Any) -> "ShotVersion":
        unknown = set(changes) - set(type(self).model_fields)
        if unknown:
            raise ValueError(f"Unknown version fields: {', '.join(sorted(unknown))}")
        return self.model_copy(update=changes)

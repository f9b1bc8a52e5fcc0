"""Commands emitted to the host and the refusals returned instead of them."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from shotchain.models.shot import ShotVersion


class FrameSlot(str, Enum):
    IMAGE = "image"
    START = "start"
    END = "end"


class Refusal(str, Enum):
    CHAIN_LOCKED = "chain-locked"
    FRAME_IS_INHERITED = "frame-is-inherited"
    FRAME_NOT_IN_MODE = "frame-not-in-mode"
    LAST_SHOT_IN_SCENE = "last-shot-in-scene"
    MISSING_IMAGE = "missing-image"
    MISSING_START_FRAME = "missing-start-frame"
    NO_ACTIVE_VERSION = "no-active-version"
    OUT_OF_RANGE = "out-of-range"
    SPLITS_CHAIN = "splits-chain"
    UNCHANGED = "unchanged"
    UNKNOWN_SCENE = "unknown-scene"
    UNKNOWN_SHOT = "unknown-shot"
    UNKNOWN_VERSION = "unknown-version"


@dataclass(frozen=True)
class ReorderShots:
    scene_id: str
    shot_ids: Tuple[str, ...]


@dataclass(frozen=True)
class SetActiveVersion:
    shot_id: str
    version_id: str


@dataclass(frozen=True)
class SetPreviewVersion:
    shot_id: str
    version_id: Optional[str]


@dataclass(frozen=True)
class RecordLocalVersion:
    shot_id: str
    version: ShotVersion


@dataclass(frozen=True)
class RequestGenerate:
    shot_id: str
    frame: FrameSlot


@dataclass(frozen=True)
class RequestEdit:
    shot_id: str
    version_id: str
    instruction: str
    frame: FrameSlot


@dataclass(frozen=True)
class RequestAnimate:
    shot_id: str
    version_id: str


@dataclass(frozen=True)
class UpdateVersionFields:
    shot_id: str
    version_id: str
    fields: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeleteShot:
    scene_id: str
    shot_id: str


@dataclass(frozen=True)
class Forbidden:
    """A command refused before any intent reached the host."""

    shot_id: Optional[str]
    reason: Refusal


@dataclass(frozen=True)
class Rejected:
    """A reorder request refused as a whole; ``shot_ids`` is the unchanged order."""

    reason: Refusal
    shot_ids: Tuple[str, ...] = ()


Intent = Union[
    ReorderShots,
    SetActiveVersion,
    SetPreviewVersion,
    RecordLocalVersion,
    RequestGenerate,
    RequestEdit,
    RequestAnimate,
    UpdateVersionFields,
    DeleteShot,
]

"""Engine exports."""
from .cache import VersionCache, merge_versions
from .continuity import ChainPosition, ContinuityIndex
from .frames import EndFrame, EndFrameSource, PromptSource, StartFrame, effective_end_frame, effective_start_frame
from .intents import (
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
from .narrative import classify
from .reorder import ReorderPlan, array_move, plan_move
from .versions import ResolutionReason, VersionResolution, resolve_active, resolve_previewed
from .view import GenerationStep, ShotView

__all__ = [
    "ChainPosition",
    "ContinuityIndex",
    "DeleteShot",
    "EndFrame",
    "EndFrameSource",
    "Forbidden",
    "FrameSlot",
    "GenerationStep",
    "Intent",
    "PromptSource",
    "RecordLocalVersion",
    "Refusal",
    "Rejected",
    "ReorderPlan",
    "ReorderShots",
    "RequestAnimate",
    "RequestEdit",
    "RequestGenerate",
    "ResolutionReason",
    "SetActiveVersion",
    "SetPreviewVersion",
    "ShotView",
    "StartFrame",
    "UpdateVersionFields",
    "VersionCache",
    "VersionResolution",
    "array_move",
    "classify",
    "effective_end_frame",
    "effective_start_frame",
    "merge_versions",
    "plan_move",
    "resolve_active",
    "resolve_previewed",
]

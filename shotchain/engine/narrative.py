"""Per-shot narrative mode classification."""
from __future__ import annotations

from typing import Optional

from shotchain.models.shot import FrameMode, Shot, ShotVersion


def classify(shot: Shot, active_version: Optional[ShotVersion], default_mode: FrameMode) -> FrameMode:
    """Decide whether a shot runs as a single image or a start/end frame pair.

    An explicit ``frame_mode`` on the shot always wins. Otherwise the populated
    fields of the active version decide, and the session default covers
    shots without a version or with an empty one.
    """

    if shot.frame_mode is not None:
        return shot.frame_mode
    if active_version is None:
        return default_mode
    if active_version.has_single_image_fields and not active_version.has_start_end_fields:
        return FrameMode.SINGLE_IMAGE
    if active_version.has_start_end_fields:
        return FrameMode.START_END
    return default_mode

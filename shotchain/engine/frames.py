"""Start/end frame inheritance along continuity chains.

In start-end mode a chained shot's start frame mirrors its predecessor's end
frame, and a shot's displayed end frame mirrors what its successor starts
with. Missing data never raises; it yields a placeholder (``url is None``).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from shotchain.models.shot import Shot, ShotVersion

logger = logging.getLogger(__name__)


class PromptSource(str, Enum):
    OWN = "own"
    INHERITED = "inherited"


class EndFrameSource(str, Enum):
    NEXT_START = "next-start"
    OWN = "own"
    NONE = "none"


@dataclass(frozen=True)
class StartFrame:
    prompt_source: PromptSource
    url: Optional[str]
    prompt: Optional[str]
    locked: bool
    synced: bool = False
    inherited_from: Optional[str] = None

    @property
    def generated(self) -> bool:
        return self.url is not None


@dataclass(frozen=True)
class EndFrame:
    url: Optional[str]
    source: EndFrameSource
    prompt: Optional[str] = None

    @property
    def generated(self) -> bool:
        return self.url is not None


def own_start_url(version: Optional[ShotVersion]) -> Optional[str]:
    if version is None:
        return None
    return version.start_frame_url or version.image_url or None


def predecessor_end_url(version: Optional[ShotVersion]) -> Optional[str]:
    if version is None:
        return None
    return version.end_frame_url or version.image_url or None


def effective_start_frame(
    shot: Shot,
    version: Optional[ShotVersion],
    previous_linked_shot: Optional[Shot],
    previous_linked_version: Optional[ShotVersion],
    was_marked_inherited: bool,
) -> StartFrame:
    own_prompt = version.start_frame_prompt if version else None
    if previous_linked_shot is None or not was_marked_inherited:
        return StartFrame(PromptSource.OWN, own_start_url(version), own_prompt, locked=False)

    inherited_url = predecessor_end_url(previous_linked_version)
    own_url = version.start_frame_url if version else None
    if not own_url or own_url == inherited_url:
        prompt = previous_linked_version.end_frame_prompt if previous_linked_version else None
        return StartFrame(
            PromptSource.INHERITED,
            inherited_url,
            prompt,
            locked=True,
            synced=True,
            inherited_from=previous_linked_shot.id,
        )

    # independently generated before or after the link was approved
    logger.debug(
        "Shot %s keeps its own start frame; predecessor %s ends on a different frame",
        shot.id,
        previous_linked_shot.id,
    )
    return StartFrame(
        PromptSource.INHERITED,
        own_url,
        own_prompt,
        locked=True,
        synced=False,
        inherited_from=previous_linked_shot.id,
    )


def effective_end_frame(
    shot: Shot,
    version: Optional[ShotVersion],
    next_linked_shot: Optional[Shot],
    next_linked_version: Optional[ShotVersion],
) -> EndFrame:
    if next_linked_shot is not None:
        successor_start = own_start_url(next_linked_version)
        if successor_start:
            prompt = next_linked_version.start_frame_prompt if next_linked_version else None
            return EndFrame(successor_start, EndFrameSource.NEXT_START, prompt)

    if version is None or not version.end_frame_url:
        return EndFrame(None, EndFrameSource.NONE)
    if version.end_frame_url == version.start_frame_url:
        logger.debug("Shot %s stores the same image as start and end frame", shot.id)
        return EndFrame(None, EndFrameSource.NONE)
    return EndFrame(version.end_frame_url, EndFrameSource.OWN, version.end_frame_prompt)

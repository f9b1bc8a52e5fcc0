"""Active and previewed version resolution.

Identifiers coming back from the generation service do not always agree with
the ids the editor holds. Resolution therefore never fails for a shot that has
versions: a dangling ``current_version_id`` falls back to the latest version.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from shotchain.models.shot import Shot, ShotVersion


class ResolutionReason(str, Enum):
    NO_VERSIONS = "no-versions"
    CURRENT = "current"
    LATEST = "latest"
    LATEST_FALLBACK = "latest-fallback"
    PREVIEW = "preview"


@dataclass(frozen=True)
class VersionResolution:
    version: Optional[ShotVersion]
    reason: ResolutionReason

    @property
    def is_fallback(self) -> bool:
        return self.reason is ResolutionReason.LATEST_FALLBACK


def latest_version(versions: Iterable[ShotVersion]) -> Optional[ShotVersion]:
    ordered = sorted(versions, key=lambda v: v.version_number)
    return ordered[-1] if ordered else None


def _find(versions: Iterable[ShotVersion], version_id: str) -> Optional[ShotVersion]:
    for candidate in versions:
        if candidate.id == version_id:
            return candidate
    return None


def explain_active(shot: Shot, versions: Sequence[ShotVersion]) -> VersionResolution:
    if not versions:
        return VersionResolution(None, ResolutionReason.NO_VERSIONS)
    if shot.current_version_id:
        found = _find(versions, shot.current_version_id)
        if found is not None:
            return VersionResolution(found, ResolutionReason.CURRENT)
        return VersionResolution(latest_version(versions), ResolutionReason.LATEST_FALLBACK)
    return VersionResolution(latest_version(versions), ResolutionReason.LATEST)


def resolve_active(shot: Shot, versions: Sequence[ShotVersion]) -> Optional[ShotVersion]:
    return explain_active(shot, versions).version


def working_set(versions: Sequence[ShotVersion], cached: Sequence[ShotVersion]) -> List[ShotVersion]:
    """Host versions plus cached versions the host does not list yet."""

    known = {v.id for v in versions}
    return list(versions) + [v for v in cached if v.id not in known]


def explain_previewed(
    shot: Shot,
    versions: Sequence[ShotVersion],
    cached: Sequence[ShotVersion],
    preview_version_id: Optional[str],
) -> VersionResolution:
    candidates = working_set(versions, cached)
    if preview_version_id:
        found = _find(candidates, preview_version_id)
        if found is not None:
            return VersionResolution(found, ResolutionReason.PREVIEW)
    return explain_active(shot, candidates)


def resolve_previewed(
    shot: Shot,
    versions: Sequence[ShotVersion],
    cached: Sequence[ShotVersion],
    preview_version_id: Optional[str],
) -> Optional[ShotVersion]:
    """Version to display: the preview if it resolves, else the active one.

    Pure; selecting a preview never touches ``shot.current_version_id``.
    """

    return explain_previewed(shot, versions, cached, preview_version_id).version

"""Local cache for versions the host has not round-tripped yet."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from shotchain.models.shot import ShotVersion

logger = logging.getLogger(__name__)


def merge_versions(
    server_versions: Sequence[ShotVersion],
    local_versions: Sequence[ShotVersion],
) -> List[ShotVersion]:
    """Union by id, server copy wins, ordered by version number."""

    merged: Dict[str, ShotVersion] = {v.id: v for v in local_versions}
    merged.update({v.id: v for v in server_versions})
    return sorted(merged.values(), key=lambda v: v.version_number)


class VersionCache:
    def __init__(self) -> None:
        self._entries: Dict[str, List[ShotVersion]] = {}

    def record_local(self, shot_id: str, version: ShotVersion) -> None:
        entries = [v for v in self._entries.get(shot_id, []) if v.id != version.id]
        entries.append(version)
        self._entries[shot_id] = entries
        logger.debug("Cached local version %s for shot %s", version.id, shot_id)

    def reconcile(self, shot_id: str, server_versions: Iterable[ShotVersion]) -> None:
        entries = self._entries.get(shot_id)
        if not entries:
            return
        confirmed = {v.id for v in server_versions}
        remaining = [v for v in entries if v.id not in confirmed]
        if len(remaining) != len(entries):
            logger.debug("Shot %s: %d cached version(s) confirmed by host", shot_id, len(entries) - len(remaining))
        if remaining:
            self._entries[shot_id] = remaining
        else:
            del self._entries[shot_id]

    def cached(self, shot_id: str) -> List[ShotVersion]:
        return list(self._entries.get(shot_id, []))

    def merged_versions(self, shot_id: str, server_versions: Sequence[ShotVersion]) -> List[ShotVersion]:
        return merge_versions(server_versions, self._entries.get(shot_id, []))

    def discard(self, shot_id: str) -> None:
        self._entries.pop(shot_id, None)

    def shot_ids(self) -> List[str]:
        return list(self._entries)

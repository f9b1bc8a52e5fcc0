"""Continuity groups as supplied by the host."""
from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import Field, field_validator

from shotchain.models.base import HostModel


class GroupStatus(str, Enum):
    PROPOSED = "proposed"
    APPROVED = "approved"
    DECLINED = "declined"


class ContinuityGroup(HostModel):
    """An ordered chain of shots within one scene.

    Only approved groups link shots; proposed and declined groups are carried
    for display but never affect inheritance or locking.
    """

    id: str
    scene_id: Optional[str] = None
    group_number: int = 0
    shot_ids: List[str] = Field(default_factory=list)
    status: str = GroupStatus.PROPOSED.value
    description: Optional[str] = None
    transition_type: Optional[str] = None

    @field_validator("shot_ids", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def is_approved(self) -> bool:
        return self.status == GroupStatus.APPROVED.value

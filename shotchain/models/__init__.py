"""Host-supplied storyboard records."""
from .continuity import ContinuityGroup, GroupStatus
from .shot import FrameMode, Scene, Shot, ShotVersion
from .state import StoryboardState, load_state, save_state

__all__ = [
    "ContinuityGroup",
    "FrameMode",
    "GroupStatus",
    "Scene",
    "Shot",
    "ShotVersion",
    "StoryboardState",
    "load_state",
    "save_state",
]

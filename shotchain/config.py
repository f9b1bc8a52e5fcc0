"""Global configuration helpers for shotchain."""
from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shotchain.models.shot import FrameMode


class ShotchainSettings(BaseSettings):
    """Runtime defaults resolved from environment variables.

    Values carried on a ``StoryboardState`` take precedence over these.
    """

    default_frame_mode: FrameMode = FrameMode.SINGLE_IMAGE
    continuity_locked: bool = True
    default_image_model: Optional[str] = Field(default=None)
    default_video_model: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(env_prefix="SHOTCHAIN_", env_file=".env", extra="ignore")


settings = ShotchainSettings()

"""Shared pydantic configuration for host-supplied records."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class HostModel(BaseModel):
    """Base for records the host hands over as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

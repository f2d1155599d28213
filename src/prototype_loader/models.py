"""Shared pydantic base for the loader's contract models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class _StrictModel(BaseModel):
    """Shared strict model settings for loader contracts."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

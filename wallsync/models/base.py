"""Pydantic base for wallsync records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class WallsyncModel(BaseModel):
    """Shared model settings.

    Relay payloads may use camelCase aliases or field names, unknown keys are
    dropped, and assignments are re-validated so task state stays in range.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        validate_assignment=True,
    )

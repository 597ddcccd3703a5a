"""Configuration data models"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ConfigUpdateRequest(BaseModel):
    """Request to update diff configuration"""

    unchangedContextLimit: int | None = Field(default=None, ge=0)
    emitNavigation: bool | None = None
    unbounded: bool = False  # clear the limit so all unchanged text is shown


class ConfigResponse(BaseModel):
    """Diff configuration response"""

    unchangedContextLimit: int | None
    emitNavigation: bool

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SyncResult(BaseModel):
    success: bool
    message: str = ""
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    created: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

    @field_validator("date", mode="before")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        if isinstance(v, datetime) and v.tzinfo is None:
            raise ValueError("date must be timezone-aware")
        return v

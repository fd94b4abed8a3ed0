from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class BookmarkList(BaseModel):
    name: str = Field(..., min_length=1, description="List name, unique per repository")
    notify: bool = Field(default=False, description="Notify on new bookmarks from sync")

    model_config = ConfigDict(frozen=True)

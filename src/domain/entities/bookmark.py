from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..value_objects.ids import BookmarkId


class BookmarkRecord(BaseModel):
    """The four interchange fields of a bookmark.

    Only these fields survive encoding; anything else a stored bookmark
    carries has to be reattached by the caller.
    """

    title: str = ""
    list_name: str = ""
    url: str
    notes: str = ""

    model_config = ConfigDict(frozen=True)


class Bookmark(BaseModel):
    id: BookmarkId | None = Field(default=None, description="Repository identifier")
    title: str = ""
    list_name: str = ""
    url: str
    notes: str = ""
    favorite: bool = False
    click_counter: int = Field(default=0, ge=0)
    creation_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(frozen=True)

    @field_validator("creation_date", mode="before")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        if isinstance(v, datetime) and v.tzinfo is None:
            raise ValueError("creation_date must be timezone-aware")
        return v

    @field_validator("creation_date")
    @classmethod
    def _to_utc(cls, v: datetime) -> datetime:
        return v.astimezone(timezone.utc)

    def to_record(self) -> BookmarkRecord:
        return BookmarkRecord(
            title=self.title,
            list_name=self.list_name,
            url=self.url,
            notes=self.notes,
        )

    @classmethod
    def from_record(
        cls,
        record: BookmarkRecord,
        *,
        id: BookmarkId | None = None,
        favorite: bool = False,
        click_counter: int = 0,
        creation_date: datetime | None = None,
    ) -> "Bookmark":
        """Build a bookmark from decoded fields, reattaching repository attributes."""
        data: dict[str, object] = {
            "id": id,
            "title": record.title,
            "list_name": record.list_name,
            "url": record.url,
            "notes": record.notes,
            "favorite": favorite,
            "click_counter": click_counter,
        }
        if creation_date is not None:
            data["creation_date"] = creation_date
        return cls(**data)

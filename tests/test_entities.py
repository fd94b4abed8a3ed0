from datetime import datetime, timedelta, timezone

import pytest

from src.domain.entities import Bookmark, BookmarkList, BookmarkRecord, SyncResult
from src.domain.value_objects.ids import BookmarkId


def test_record_defaults_and_required_url() -> None:
    record = BookmarkRecord(url="http://ex.com")
    assert (record.title, record.list_name, record.notes) == ("", "", "")
    with pytest.raises(ValueError):
        BookmarkRecord(title="no url")


def test_record_is_frozen_value() -> None:
    a = BookmarkRecord(title="t", url="http://x")
    assert a == BookmarkRecord(title="t", url="http://x")
    with pytest.raises(ValueError):
        a.title = "other"  # type: ignore[misc]


def test_bookmark_requires_aware_date_and_normalises_to_utc() -> None:
    with pytest.raises(ValueError):
        Bookmark(url="http://x", creation_date=datetime(2024, 1, 1))
    cet = timezone(timedelta(hours=1))
    bm = Bookmark(url="http://x", creation_date=datetime(2024, 1, 1, 1, tzinfo=cet))
    assert bm.creation_date == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert bm.creation_date.utcoffset() == timedelta(0)


def test_bookmark_click_counter_non_negative() -> None:
    with pytest.raises(ValueError):
        Bookmark(url="http://x", click_counter=-1)


def test_record_conversion_drops_and_reattaches_attributes() -> None:
    when = datetime(2023, 5, 1, tzinfo=timezone.utc)
    bm = Bookmark(
        id=BookmarkId("b1"),
        title="T",
        list_name="L",
        url="http://x",
        notes="N",
        favorite=True,
        click_counter=4,
        creation_date=when,
    )
    record = bm.to_record()
    assert record == BookmarkRecord(title="T", list_name="L", url="http://x", notes="N")
    plain = Bookmark.from_record(record)
    assert plain.id is None and plain.favorite is False and plain.click_counter == 0
    again = Bookmark.from_record(
        record, id=bm.id, favorite=True, click_counter=4, creation_date=when
    )
    assert again == bm


def test_list_and_sync_result_models() -> None:
    with pytest.raises(ValueError):
        BookmarkList(name="")
    assert BookmarkList(name="Work").notify is False
    result = SyncResult(success=True, message="ok", created=2)
    assert result.date.tzinfo is not None
    with pytest.raises(ValueError):
        SyncResult(success=True, date=datetime(2024, 1, 1))

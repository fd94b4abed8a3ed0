from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from src.application.services.bookmarks_service import (
    BookmarksService,
    filter_bookmarks,
    process_url,
    sort_bookmarks,
)
from src.domain.entities import Bookmark
from src.domain.value_objects.enums import ContentSelection, SortOrder
from src.repositories.sqlite.bookmarks_sqlite import BookmarksRepoSqlite
from src.serialization import MissingFieldError

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _repo() -> BookmarksRepoSqlite:
    return BookmarksRepoSqlite(sqlite3.connect(":memory:"))


def _seed(repo: BookmarksRepoSqlite) -> list[Bookmark]:
    return [
        repo.create_record(
            Bookmark(title="beta", url="http://b.example", list_name="Work", creation_date=T0)
        ),
        repo.create_record(
            Bookmark(
                title="Alpha",
                url="a.example",
                favorite=True,
                notes="python docs",
                creation_date=T0 + timedelta(days=2),
            )
        ),
        repo.create_record(
            Bookmark(title="gamma", url="http://g.example", creation_date=T0 + timedelta(days=1))
        ),
    ]


def test_select_all_sorted_by_title_case_insensitive() -> None:
    repo = _repo()
    _seed(repo)
    view = BookmarksService(repo).select_content()
    assert view.selection == ContentSelection.ALL
    assert [b.title for b in view.bookmarks] == ["Alpha", "beta", "gamma"]


def test_select_favorites_and_list() -> None:
    repo = _repo()
    _seed(repo)
    svc = BookmarksService(repo)
    assert [b.title for b in svc.select_content(ContentSelection.FAVORITES).bookmarks] == ["Alpha"]
    view = svc.select_content(ContentSelection.LIST, "Work")
    assert view.selection == ContentSelection.LIST
    assert view.list_name == "Work"
    assert [b.title for b in view.bookmarks] == ["beta"]


def test_select_empty_list_falls_back_to_all() -> None:
    repo = _repo()
    _seed(repo)
    view = BookmarksService(repo).select_content(ContentSelection.LIST, "Nope")
    assert view.selection == ContentSelection.ALL
    assert view.list_name == ""
    assert len(view.bookmarks) == 3


def test_sort_orders_and_filter() -> None:
    repo = _repo()
    items = _seed(repo)
    newest = sort_bookmarks(items, SortOrder.DATE_LAST)
    oldest = sort_bookmarks(items, SortOrder.DATE_OLD)
    assert [b.title for b in newest] == ["Alpha", "gamma", "beta"]
    assert [b.title for b in oldest] == ["beta", "gamma", "Alpha"]
    assert [b.title for b in filter_bookmarks(items, "PYTHON")] == ["Alpha"]
    assert [b.title for b in filter_bookmarks(items, "work")] == ["beta"]
    assert filter_bookmarks(items, "") == items


def test_sort_order_parse_defaults_to_title() -> None:
    assert SortOrder.parse("date_old") == SortOrder.DATE_OLD
    assert SortOrder.parse("whatever") == SortOrder.TITLE
    assert SortOrder.parse(None) == SortOrder.TITLE


def test_open_bookmark_counts_and_normalises() -> None:
    repo = _repo()
    alpha = _seed(repo)[1]
    svc = BookmarksService(repo)
    assert svc.open_bookmark(alpha.id) == "http://a.example"
    assert repo.get_by_id(alpha.id).click_counter == 1
    with pytest.raises(LookupError):
        svc.open_bookmark("missing")


def test_open_bookmark_still_returns_url_when_counter_fails() -> None:
    class FailingRepo(BookmarksRepoSqlite):
        def increment_click_counter(self, bookmark_id: str) -> None:
            raise RuntimeError("db locked")

    repo = FailingRepo(sqlite3.connect(":memory:"))
    created = repo.create_record(Bookmark(url="https://x.example"))
    assert BookmarksService(repo).open_bookmark(created.id) == "https://x.example"


def test_process_url() -> None:
    assert process_url(" example.com ") == "http://example.com"
    assert process_url("https://example.com") == "https://example.com"


def test_toggle_favorite_respects_smart_favorites() -> None:
    repo = _repo()
    beta = _seed(repo)[0]
    assert BookmarksService(repo).toggle_favorite(beta.id) is True
    assert repo.get_by_id(beta.id).favorite is True
    assert BookmarksService(repo, smart_favorites=True).toggle_favorite(beta.id) is None
    assert repo.get_by_id(beta.id).favorite is True
    assert BookmarksService(repo).toggle_favorite(beta.id) is False


def test_delete_and_undo_restores_exact_bookmark() -> None:
    repo = _repo()
    alpha = _seed(repo)[1]
    repo.increment_click_counter(alpha.id)
    stored = repo.get_by_id(alpha.id)
    svc = BookmarksService(repo)

    removed = svc.delete(alpha.id)
    assert removed == stored
    assert repo.get_by_id(alpha.id) is None
    assert svc.can_undo

    restored = svc.undo_delete()
    assert restored == stored
    assert repo.get_by_id(alpha.id) == stored
    assert not svc.can_undo
    with pytest.raises(LookupError):
        svc.undo_delete()


def test_undo_recreates_list_dropped_on_delete() -> None:
    repo = _repo()
    beta = _seed(repo)[0]
    svc = BookmarksService(repo)
    svc.delete(beta.id)
    assert repo.get_list("Work") is None
    svc.undo_delete()
    assert repo.get_list("Work") is not None


def test_undo_keeps_notification_flag_of_dropped_list() -> None:
    repo = _repo()
    beta = _seed(repo)[0]
    repo.set_list_notification("Work", True)
    svc = BookmarksService(repo)
    svc.delete(beta.id)
    assert repo.get_list("Work") is None
    svc.undo_delete()
    assert repo.get_list("Work").notify is True


def test_delete_unknown_raises() -> None:
    with pytest.raises(LookupError):
        BookmarksService(_repo()).delete("missing")


def test_undo_token_and_restore() -> None:
    repo = _repo()
    beta = _seed(repo)[0]
    svc = BookmarksService(repo)
    token = svc.undo_token(svc.delete(beta.id))
    assert json.loads(token) == {
        "title": "beta",
        "list": "Work",
        "url": "http://b.example",
        "notes": "",
    }
    restored = svc.restore(token)
    assert restored.id != beta.id
    assert restored.to_record() == beta.to_record()
    with pytest.raises(MissingFieldError):
        svc.restore('{"title": "x"}')


def test_set_list_notification_delegates() -> None:
    repo = _repo()
    _seed(repo)
    svc = BookmarksService(repo)
    svc.set_list_notification("Work", True)
    assert repo.get_list("Work").notify is True
    with pytest.raises(LookupError):
        svc.set_list_notification("Nope", True)

from __future__ import annotations

import sqlite3
from typing import Any, List

import pytest
import requests

from src.application.services.sync_service import OFFLINE_MESSAGE, SyncService
from src.domain.entities import Bookmark, SyncResult
from src.infrastructure.savedio_client import APIError
from src.repositories.sqlite.bookmarks_sqlite import BookmarksRepoSqlite


class _FakeClient:
    def __init__(self, payload: Any = None, error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.calls = 0

    def list_bookmarks(self) -> Any:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.payload


def _repo() -> BookmarksRepoSqlite:
    return BookmarksRepoSqlite(sqlite3.connect(":memory:"))


def test_offline_returns_failed_result_without_calling_client() -> None:
    client = _FakeClient(payload=[])
    svc = SyncService(_repo(), client, online=False)
    result = svc.sync()
    assert result.success is False
    assert result.message == OFFLINE_MESSAGE
    assert client.calls == 0
    assert svc.last_result == result


def test_sync_creates_new_bookmarks_and_skips_known() -> None:
    repo = _repo()
    repo.create_record(Bookmark(url="http://known", list_name="Work"))
    repo.set_list_notification("Work", True)
    payload = [
        {"bk_title": "Known", "bk_url": "http://known", "bk_list": "Work"},
        {"title": "New", "url": "http://new", "list": {"name": "Work"}, "note": "n"},
        {"title": "Loose", "url": "http://loose"},
        {"title": "No url"},
        "garbage",
    ]
    result = SyncService(repo, _FakeClient(payload=payload), online=True).sync()

    assert result.success is True
    assert result.created == 2
    assert result.skipped == 2
    assert "New in: Work" in result.message
    new = repo.find_by_url("http://new", "Work")
    assert [b.notes for b in new] == ["n"]
    assert repo.find_by_url("http://loose", "")


def test_sync_accepts_wrapped_payload() -> None:
    repo = _repo()
    payload = {"bookmarks": [{"url": "http://a"}]}
    result = SyncService(repo, _FakeClient(payload=payload), online=True).sync()
    assert result.created == 1


def test_api_error_becomes_failed_result() -> None:
    client = _FakeClient(error=APIError("API error 401: bad key", status_code=401))
    result = SyncService(_repo(), client, online=True).sync()
    assert result.success is False
    assert "401" in result.message


def test_listeners_receive_results_until_unsubscribed() -> None:
    seen: List[SyncResult] = []
    svc = SyncService(_repo(), _FakeClient(payload=[]), online=True)
    svc.subscribe(seen.append)
    svc.subscribe(seen.append)
    svc.sync()
    svc.unsubscribe(seen.append)
    svc.sync()
    assert len(seen) == 1
    assert seen[0].success is True


@pytest.mark.parametrize(
    "error",
    [
        requests.exceptions.JSONDecodeError("Expecting value", "", 0),
        requests.TooManyRedirects("redirect loop"),
    ],
)
def test_raw_request_errors_become_failed_result(error: Exception) -> None:
    repo = _repo()
    result = SyncService(repo, _FakeClient(error=error), online=True).sync()
    assert result.success is False
    assert result.created == 0
    assert repo.list_all() == []

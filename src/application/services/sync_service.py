from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Protocol

import requests

from src.domain.entities import Bookmark, BookmarkRecord, SyncResult
from src.logging_config import get_logger
from src.repositories.bookmarks import BookmarksRepo

SyncListener = Callable[[SyncResult], None]

OFFLINE_MESSAGE = "Offline mode: no API key configured"


class _ClientProto(Protocol):
    def list_bookmarks(self) -> Any: ...


class SyncService:
    """Pull remote bookmarks into the local repository.

    - Fetches the user's bookmarks from saved.io
    - Creates the ones not stored yet (same URL in the same list)
    - Never raises on network failure; the outcome is a :class:`SyncResult`
    - Listeners registered with :meth:`subscribe` receive every result
    """

    def __init__(
        self,
        repo: BookmarksRepo,
        client: Optional[_ClientProto] = None,
        *,
        online: Optional[bool] = None,
    ) -> None:
        self._repo = repo
        self._client = client
        if online is None:
            from src.config.settings import settings

            online = settings.online
        self._online = online
        self._listeners: list[SyncListener] = []
        self.last_result: Optional[SyncResult] = None
        self._logger = get_logger("sync")

    def subscribe(self, listener: SyncListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: SyncListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def sync(self) -> SyncResult:
        if not self._online:
            result = SyncResult(success=False, message=OFFLINE_MESSAGE)
        else:
            result = self._pull()
        self.last_result = result
        for listener in list(self._listeners):
            listener(result)
        return result

    def _pull(self) -> SyncResult:
        # Lazy import to avoid building a real HTTP session when a fake client is injected
        from src.infrastructure.savedio_client import APIError

        if self._client is None:
            from src.infrastructure.savedio_client import SavedIoClient

            self._client = SavedIoClient()
        try:
            payload = self._client.list_bookmarks()
        except (APIError, requests.RequestException) as exc:
            self._logger.warning("Sync failed", extra={"error": str(exc)})
            return SyncResult(success=False, message=str(exc))

        created = 0
        skipped = 0
        notified: set[str] = set()
        for item in _extract_items(payload):
            record = _item_to_record(item)
            if record is None or self._repo.find_by_url(record.url, record.list_name):
                skipped += 1
                continue
            self._repo.create_record(Bookmark.from_record(record))
            created += 1
            if record.list_name:
                lst = self._repo.get_list(record.list_name)
                if lst is not None and lst.notify:
                    notified.add(record.list_name)

        message = f"{created} new bookmarks, {skipped} skipped"
        if notified:
            message = f"{message}. New in: {', '.join(sorted(notified))}"
        self._logger.info("Sync finished", extra={"created": created, "skipped": skipped})
        return SyncResult(success=True, message=message, created=created, skipped=skipped)


def _extract_items(payload: Any) -> list[Mapping[str, Any]]:
    if isinstance(payload, Mapping):
        for key in ("bookmarks", "response", "data"):
            lst = payload.get(key)
            if isinstance(lst, list):
                payload = lst
                break
    if isinstance(payload, list):
        return [item for item in payload if isinstance(item, Mapping)]
    return []


def _first_text(item: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = item.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def _item_to_record(item: Mapping[str, Any]) -> Optional[BookmarkRecord]:
    url = _first_text(item, "url", "bk_url")
    if not url:
        return None
    list_value = item.get("list")
    if isinstance(list_value, Mapping):
        list_name = _first_text(list_value, "name", "list_name")
    else:
        list_name = _first_text(item, "list", "list_name", "bk_list")
    return BookmarkRecord(
        title=_first_text(item, "title", "bk_title"),
        list_name=list_name,
        url=url,
        notes=_first_text(item, "notes", "note", "bk_note"),
    )

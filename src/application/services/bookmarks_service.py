from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from src.domain.entities import Bookmark
from src.domain.value_objects.enums import ContentSelection, SortOrder
from src.logging_config import get_logger
from src.repositories.bookmarks import BookmarksRepo
from src.serialization import decode_record, encode_record


@dataclass
class ContentView:
    """Bookmarks shown for a content selection.

    ``selection`` and ``list_name`` reflect what was actually shown, which
    differs from the request when an empty list fell back to all bookmarks.
    """

    selection: ContentSelection
    list_name: str
    bookmarks: list[Bookmark] = field(default_factory=list)


class BookmarksService:
    """Application flows over the bookmark repository.

    - Content selection (all, favorites, one list) with sorting and text filter
    - Opening a bookmark (click counter + URL normalisation)
    - Favorite toggling, disabled when smart favorites are on
    - Deletion with an in-memory undo buffer
    """

    def __init__(
        self,
        repo: BookmarksRepo,
        *,
        sort_order: SortOrder = SortOrder.TITLE,
        smart_favorites: bool = False,
    ) -> None:
        self._repo = repo
        self.sort_order = sort_order
        self.smart_favorites = smart_favorites
        # Deleted bookmark plus the notify flag of its list at deletion time
        self._undo: list[tuple[Bookmark, bool]] = []
        self._logger = get_logger("bookmarks")

    def select_content(
        self,
        selection: ContentSelection = ContentSelection.ALL,
        list_name: str = "",
        *,
        filter_text: Optional[str] = None,
        sort_order: Optional[SortOrder] = None,
    ) -> ContentView:
        if selection == ContentSelection.FAVORITES:
            bookmarks = self._repo.list_favorites()
            list_name = ""
        elif selection == ContentSelection.LIST and list_name:
            bookmarks = self._repo.list_by_list(list_name)
            if not bookmarks:
                # Empty or unknown list: show everything instead
                selection, list_name = ContentSelection.ALL, ""
                bookmarks = self._repo.list_all()
        else:
            selection, list_name = ContentSelection.ALL, ""
            bookmarks = self._repo.list_all()

        bookmarks = filter_bookmarks(bookmarks, filter_text)
        bookmarks = sort_bookmarks(bookmarks, sort_order or self.sort_order)
        return ContentView(selection=selection, list_name=list_name, bookmarks=bookmarks)

    def open_bookmark(self, bookmark_id: str) -> str:
        """Count a click on the bookmark and return the URL to open."""
        bookmark = self._require(bookmark_id)
        try:
            self._repo.increment_click_counter(bookmark_id)
        except Exception:
            self._logger.exception(
                "There was an error incrementing bookmark click counter",
                extra={"bookmark_id": bookmark_id},
            )
        return process_url(bookmark.url)

    def toggle_favorite(self, bookmark_id: str) -> Optional[bool]:
        """Flip the favorite flag and return the new value.

        Returns None without touching the bookmark when smart favorites are on.
        """
        if self.smart_favorites:
            return None
        bookmark = self._require(bookmark_id)
        favorite = not bookmark.favorite
        self._repo.set_favorite(bookmark_id, favorite)
        return favorite

    def set_list_notification(self, list_name: str, notify: bool) -> None:
        self._repo.set_list_notification(list_name, notify)

    def create(self, bookmark: Bookmark) -> Bookmark:
        return self._repo.create_record(bookmark)

    def delete(self, bookmark_id: str) -> Bookmark:
        """Delete a bookmark and keep it for :meth:`undo_delete`."""
        current = self._repo.get_by_id(bookmark_id)
        owner = self._repo.get_list(current.list_name) if current and current.list_name else None
        removed = self._repo.delete_record(bookmark_id)
        if removed is None:
            self._logger.error(
                "There is no bookmark with that ID", extra={"bookmark_id": bookmark_id}
            )
            raise LookupError(f"No bookmark with id {bookmark_id}")
        self._undo.append((removed, owner.notify if owner else False))
        return removed

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    def undo_delete(self) -> Bookmark:
        """Re-insert the most recently deleted bookmark, keeping all its attributes.

        A list dropped by the deletion comes back with its notification flag.
        """
        if not self._undo:
            raise LookupError("Nothing to undo")
        bookmark, notify = self._undo.pop()
        try:
            restored = self._repo.create_record(bookmark)
        except Exception:
            self._logger.exception(
                "There was an error inserting a bookmark", extra={"bookmark_id": bookmark.id}
            )
            self._undo.append((bookmark, notify))
            raise
        if notify and restored.list_name:
            self._repo.set_list_notification(restored.list_name, True)
        return restored

    def undo_token(self, bookmark: Bookmark) -> str:
        """Encode a bookmark's interchange fields for a later :meth:`restore`."""
        return encode_record(bookmark.to_record())

    def restore(self, token: str) -> Bookmark:
        """Re-create a bookmark from an undo token as a new bookmark."""
        return self._repo.create_record(Bookmark.from_record(decode_record(token)))

    def _require(self, bookmark_id: str) -> Bookmark:
        bookmark = self._repo.get_by_id(bookmark_id)
        if bookmark is None:
            raise LookupError(f"No bookmark with id {bookmark_id}")
        return bookmark


def process_url(url: str) -> str:
    """Return ``url`` stripped and with ``http://`` added when it has no scheme.

    >>> process_url("example.com")
    'http://example.com'
    """
    url = url.strip()
    if "://" not in url:
        return f"http://{url}"
    return url


def filter_bookmarks(bookmarks: Iterable[Bookmark], text: Optional[str]) -> list[Bookmark]:
    if not text:
        return list(bookmarks)
    needle = text.casefold()
    return [
        b
        for b in bookmarks
        if any(needle in value.casefold() for value in (b.title, b.url, b.notes, b.list_name))
    ]


def sort_bookmarks(bookmarks: Iterable[Bookmark], order: SortOrder) -> list[Bookmark]:
    if order == SortOrder.DATE_LAST:
        return sorted(bookmarks, key=lambda b: b.creation_date, reverse=True)
    if order == SortOrder.DATE_OLD:
        return sorted(bookmarks, key=lambda b: b.creation_date)
    return sorted(bookmarks, key=lambda b: (b.title.casefold(), b.creation_date))

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import Bookmark, BookmarkList


class BookmarksRepo(ABC):
    """Repository interface for bookmarks and the lists they belong to.

    A list exists while at least one bookmark references it by name. Bookmarks
    with an empty ``list_name`` belong to no list.
    """

    @abstractmethod
    def create_record(self, bookmark: Bookmark) -> Bookmark:
        """
        Persist a new bookmark, creating its list if needed.

        Example:
            >>> repo.create_record(Bookmark(url="http://ex.com"))
            Bookmark(id='3f2a...', url='http://ex.com', ...)

        :param bookmark: Bookmark to store. A missing id is generated.
        :return: The stored bookmark, with its identifier set.
        """

    @abstractmethod
    def delete_record(self, bookmark_id: str) -> Optional[Bookmark]:
        """
        Remove a bookmark, dropping its list when it becomes empty.
        A dropped list loses its notification flag; creating a bookmark in it
        again starts the list with notifications off.

        Example:
            >>> repo.delete_record("3f2a...")
            Bookmark(id='3f2a...', ...)

        :param bookmark_id: Identifier of the bookmark to delete.
        :return: The removed bookmark, or None if no bookmark had that id.
        """

    @abstractmethod
    def set_favorite(self, bookmark_id: str, favorite: bool) -> None:
        """Set the favorite flag. Raises ``LookupError`` for an unknown id."""

    @abstractmethod
    def set_list_notification(self, list_name: str, notify: bool) -> None:
        """Set the notification flag of a list. Raises ``LookupError`` for an unknown list."""

    @abstractmethod
    def increment_click_counter(self, bookmark_id: str) -> None:
        """Add one to the click counter. Raises ``LookupError`` for an unknown id."""

    @abstractmethod
    def get_by_id(self, bookmark_id: str) -> Optional[Bookmark]:
        """Retrieve a bookmark by identifier."""

    @abstractmethod
    def list_all(self) -> list[Bookmark]:
        """List every bookmark in insertion order."""

    @abstractmethod
    def list_favorites(self) -> list[Bookmark]:
        """List bookmarks flagged as favorite."""

    @abstractmethod
    def list_by_list(self, list_name: str) -> list[Bookmark]:
        """List bookmarks belonging to the named list."""

    @abstractmethod
    def find_by_url(self, url: str, list_name: str | None = None) -> list[Bookmark]:
        """Find bookmarks with the given URL, optionally within one list."""

    @abstractmethod
    def get_list(self, list_name: str) -> Optional[BookmarkList]:
        """Retrieve a list by name."""

    @abstractmethod
    def list_lists(self) -> list[BookmarkList]:
        """List all bookmark lists ordered by name."""

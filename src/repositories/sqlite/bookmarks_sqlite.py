from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime
from typing import Any, Optional, Sequence

from src.domain.entities import Bookmark, BookmarkList
from src.domain.value_objects.ids import BookmarkId

from ..bookmarks import BookmarksRepo

_COLUMNS = "bookmark_id, title, list_name, url, notes, favorite, click_counter, creation_date"


class BookmarksRepoSqlite(BookmarksRepo):
    """SQLite implementation of :class:`BookmarksRepo`."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._conn.execute("PRAGMA foreign_keys = ON;")
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS bookmark_lists (
                name TEXT PRIMARY KEY,
                notify INTEGER NOT NULL DEFAULT 0
            )
            """
        )
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS bookmarks (
                bookmark_id TEXT PRIMARY KEY,
                title TEXT NOT NULL DEFAULT '',
                list_name TEXT NOT NULL DEFAULT '',
                url TEXT NOT NULL,
                notes TEXT NOT NULL DEFAULT '',
                favorite INTEGER NOT NULL DEFAULT 0,
                click_counter INTEGER NOT NULL DEFAULT 0,
                creation_date TEXT NOT NULL
            )
            """
        )
        self._conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_bookmarks_list_name ON bookmarks(list_name)"
        )
        self._conn.commit()

    def create_record(self, bookmark: Bookmark) -> Bookmark:
        if bookmark.id is None:
            bookmark = bookmark.model_copy(update={"id": BookmarkId(uuid.uuid4().hex)})
        try:
            if bookmark.list_name:
                self._conn.execute(
                    "INSERT OR IGNORE INTO bookmark_lists (name) VALUES (?)",
                    (bookmark.list_name,),
                )
            cur = self._conn.execute(
                f"INSERT INTO bookmarks ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    bookmark.id,
                    bookmark.title,
                    bookmark.list_name,
                    bookmark.url,
                    bookmark.notes,
                    int(bookmark.favorite),
                    bookmark.click_counter,
                    bookmark.creation_date.isoformat(),
                ),
            )
        except sqlite3.Error:
            self._conn.rollback()
            raise
        self._conn.commit()
        if cur.lastrowid is None:
            raise RuntimeError("SQLite insert failed: no lastrowid (table: bookmarks)")
        return bookmark

    def delete_record(self, bookmark_id: str) -> Optional[Bookmark]:
        bookmark = self.get_by_id(bookmark_id)
        if bookmark is None:
            return None
        try:
            self._conn.execute("DELETE FROM bookmarks WHERE bookmark_id = ?", (bookmark_id,))
            if bookmark.list_name:
                self._conn.execute(
                    """
                    DELETE FROM bookmark_lists
                    WHERE name = ?
                      AND NOT EXISTS (SELECT 1 FROM bookmarks WHERE list_name = ?)
                    """,
                    (bookmark.list_name, bookmark.list_name),
                )
        except sqlite3.Error:
            self._conn.rollback()
            raise
        self._conn.commit()
        return bookmark

    def set_favorite(self, bookmark_id: str, favorite: bool) -> None:
        cur = self._conn.execute(
            "UPDATE bookmarks SET favorite = ? WHERE bookmark_id = ?",
            (int(favorite), bookmark_id),
        )
        self._conn.commit()
        if cur.rowcount == 0:
            raise LookupError(f"No bookmark with id {bookmark_id}")

    def set_list_notification(self, list_name: str, notify: bool) -> None:
        cur = self._conn.execute(
            "UPDATE bookmark_lists SET notify = ? WHERE name = ?",
            (int(notify), list_name),
        )
        self._conn.commit()
        if cur.rowcount == 0:
            raise LookupError(f"No bookmark list named {list_name!r}")

    def increment_click_counter(self, bookmark_id: str) -> None:
        cur = self._conn.execute(
            "UPDATE bookmarks SET click_counter = click_counter + 1 WHERE bookmark_id = ?",
            (bookmark_id,),
        )
        self._conn.commit()
        if cur.rowcount == 0:
            raise LookupError(f"No bookmark with id {bookmark_id}")

    def get_by_id(self, bookmark_id: str) -> Optional[Bookmark]:
        cur = self._conn.execute(
            f"SELECT {_COLUMNS} FROM bookmarks WHERE bookmark_id = ?", (bookmark_id,)
        )
        row = cur.fetchone()
        if row:
            return _row_to_bookmark(row)
        return None

    def list_all(self) -> list[Bookmark]:
        return self._select("", ())

    def list_favorites(self) -> list[Bookmark]:
        return self._select("WHERE favorite = 1", ())

    def list_by_list(self, list_name: str) -> list[Bookmark]:
        return self._select("WHERE list_name = ?", (list_name,))

    def find_by_url(self, url: str, list_name: str | None = None) -> list[Bookmark]:
        if list_name is None:
            return self._select("WHERE url = ?", (url,))
        return self._select("WHERE url = ? AND list_name = ?", (url, list_name))

    def get_list(self, list_name: str) -> Optional[BookmarkList]:
        cur = self._conn.execute(
            "SELECT name, notify FROM bookmark_lists WHERE name = ?", (list_name,)
        )
        row = cur.fetchone()
        if row:
            return BookmarkList(name=row[0], notify=bool(row[1]))
        return None

    def list_lists(self) -> list[BookmarkList]:
        cur = self._conn.execute("SELECT name, notify FROM bookmark_lists ORDER BY name")
        return [BookmarkList(name=name, notify=bool(notify)) for name, notify in cur.fetchall()]

    def _select(self, where: str, params: Sequence[Any]) -> list[Bookmark]:
        cur = self._conn.execute(
            f"SELECT {_COLUMNS} FROM bookmarks {where} ORDER BY rowid", tuple(params)
        )
        return [_row_to_bookmark(row) for row in cur.fetchall()]


def _row_to_bookmark(row: Sequence[Any]) -> Bookmark:
    bookmark_id, title, list_name, url, notes, favorite, clicks, created = row
    return Bookmark(
        id=BookmarkId(bookmark_id),
        title=title,
        list_name=list_name,
        url=url,
        notes=notes,
        favorite=bool(favorite),
        click_counter=int(clicks),
        creation_date=datetime.fromisoformat(created),
    )

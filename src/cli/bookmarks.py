from __future__ import annotations

import argparse
import sqlite3
import sys
from pathlib import Path
from typing import Iterable, List, Sequence

from src.application.services.backup_service import BackupService
from src.application.services.bookmarks_service import BookmarksService
from src.application.services.sync_service import SyncService
from src.config.settings import settings
from src.domain.entities import Bookmark
from src.domain.value_objects.enums import ContentSelection, SortOrder
from src.repositories.sqlite.bookmarks_sqlite import BookmarksRepoSqlite
from src.serialization import SerializationError
from src.serialization.messages import message_for


def _format_rows(bookmarks: Iterable[Bookmark]) -> str:
    out_lines: List[str] = []
    for b in bookmarks:
        star = " *" if b.favorite else ""
        lst = b.list_name or "-"
        out_lines.append(f"[{b.id}] {b.title or b.url} <{b.url}> list={lst}{star}")
    return "\n".join(out_lines)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Manage saved bookmarks")
    p.add_argument(
        "--db", type=Path, default=settings.db_path, help="Path to the SQLite bookmark store"
    )
    sub = p.add_subparsers(dest="command", required=True)

    ls = sub.add_parser("list", help="List bookmarks")
    g = ls.add_mutually_exclusive_group()
    g.add_argument("--favorites", action="store_true", help="Only favorite bookmarks")
    g.add_argument("--list", dest="list_name", metavar="NAME", help="Only bookmarks of a list")
    ls.add_argument(
        "--sort",
        choices=[s.value for s in SortOrder],
        default=settings.sort_order.value,
        help="Sort order",
    )
    ls.add_argument("--filter", dest="filter_text", help="Case-insensitive text filter")

    add = sub.add_parser("add", help="Add a bookmark")
    add.add_argument("--url", required=True)
    add.add_argument("--title", default="")
    add.add_argument("--list", dest="list_name", default="")
    add.add_argument("--notes", default="")

    rm = sub.add_parser("delete", help="Delete a bookmark and print its undo token")
    rm.add_argument("id")

    restore = sub.add_parser("restore", help="Re-create a bookmark from an undo token")
    restore.add_argument("token")

    fav = sub.add_parser("favorite", help="Toggle the favorite flag")
    fav.add_argument("id")

    op = sub.add_parser("open", help="Count a click and print the URL to open")
    op.add_argument("id")

    notify = sub.add_parser("notify", help="Set the notification flag of a list")
    notify.add_argument("list_name", metavar="LIST")
    notify.add_argument("state", choices=["on", "off"])

    exp = sub.add_parser("export", help="Export all bookmarks to a file")
    exp.add_argument("path", type=Path)

    imp = sub.add_parser("import", help="Import bookmarks from an exported file")
    imp.add_argument("path", type=Path)
    imp.add_argument(
        "--keep-duplicates", action="store_true", help="Also import URLs already stored"
    )

    sub.add_parser("sync", help="Pull bookmarks from saved.io")
    return p


def _run(args: argparse.Namespace, repo: BookmarksRepoSqlite) -> int:
    svc = BookmarksService(
        repo, sort_order=settings.sort_order, smart_favorites=settings.smart_favorites
    )

    if args.command == "list":
        if args.favorites:
            selection = ContentSelection.FAVORITES
        elif args.list_name:
            selection = ContentSelection.LIST
        else:
            selection = ContentSelection.ALL
        view = svc.select_content(
            selection,
            args.list_name or "",
            filter_text=args.filter_text,
            sort_order=SortOrder(args.sort),
        )
        if selection == ContentSelection.LIST and view.selection != selection:
            print(f"List '{args.list_name}' is empty, showing all bookmarks.")
        if not view.bookmarks:
            print("No bookmarks found.")
        else:
            print(_format_rows(view.bookmarks))
        return 0

    if args.command == "add":
        created = svc.create(
            Bookmark(title=args.title, list_name=args.list_name, url=args.url, notes=args.notes)
        )
        print(f"Added {created.id}")
        return 0

    if args.command == "delete":
        removed = svc.delete(args.id)
        print(f"Deleted {removed.id}")
        print(f"Undo token: {svc.undo_token(removed)}")
        return 0

    if args.command == "restore":
        restored = svc.restore(args.token)
        print(f"Restored {restored.id}")
        return 0

    if args.command == "favorite":
        state = svc.toggle_favorite(args.id)
        if state is None:
            print("Favorites are managed automatically (smart favorites enabled).")
        else:
            print(f"Favorite: {'yes' if state else 'no'}")
        return 0

    if args.command == "open":
        print(svc.open_bookmark(args.id))
        return 0

    if args.command == "notify":
        svc.set_list_notification(args.list_name, args.state == "on")
        print(f"Notifications for '{args.list_name}': {args.state}")
        return 0

    if args.command == "export":
        target = BackupService(repo).export_to_file(args.path)
        print(f"Exported to {target}")
        return 0

    if args.command == "import":
        created_list = BackupService(repo).import_from_file(
            args.path, skip_existing=not args.keep_duplicates
        )
        print(f"Imported {len(created_list)} bookmarks")
        return 0

    # sync
    result = SyncService(repo).sync()
    print(f"Sync result:\n{result.message}")
    return 0 if result.success else 1


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    db_path = Path(args.db)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        return _run(args, BookmarksRepoSqlite(conn))
    except SerializationError as exc:
        print(message_for(exc), file=sys.stderr)
        return 2
    except LookupError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"File error: {exc}", file=sys.stderr)
        return 1
    finally:
        conn.close()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

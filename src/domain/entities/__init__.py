from .bookmark import Bookmark, BookmarkRecord
from .bookmark_list import BookmarkList
from .sync_result import SyncResult

__all__ = [
    "Bookmark",
    "BookmarkList",
    "BookmarkRecord",
    "SyncResult",
]

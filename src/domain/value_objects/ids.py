from typing import NewType

BookmarkId = NewType("BookmarkId", str)

from enum import Enum


class ContentSelection(str, Enum):
    ALL = "all"
    FAVORITES = "favorites"
    LIST = "list"


class SortOrder(str, Enum):
    TITLE = "title"
    DATE_LAST = "date_last"
    DATE_OLD = "date_old"

    @classmethod
    def parse(cls, value: str | None) -> "SortOrder":
        """Map a stored preference value to a sort order, defaulting to ``TITLE``."""
        for member in cls:
            if value == member.value:
                return member
        return cls.TITLE

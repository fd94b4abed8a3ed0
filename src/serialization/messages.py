"""User-facing messages for codec failures.

Kept apart from the codec so presentation text never leaks into it. Callers at
the CLI or service boundary translate errors with :func:`message_for`.
"""

from __future__ import annotations

from .errors import SerializationError, SerializationErrorKind

MESSAGES: dict[SerializationErrorKind, str] = {
    SerializationErrorKind.MALFORMED_TEXT: "The bookmark data is damaged and cannot be read.",
    SerializationErrorKind.MISSING_FIELD: "The bookmark data has no URL.",
    SerializationErrorKind.EMPTY_BATCH: "There are no bookmarks to process.",
    SerializationErrorKind.ENCODING: "The bookmark could not be saved as text.",
}


def message_for(error: SerializationError | SerializationErrorKind) -> str:
    """Return the user-facing message for an error or error kind.

    >>> message_for(SerializationErrorKind.EMPTY_BATCH)
    'There are no bookmarks to process.'
    """
    kind = error.kind if isinstance(error, SerializationError) else error
    message = MESSAGES[kind]
    index = getattr(error, "index", None)
    if index is not None:
        return f"{message} (item {index + 1})"
    return message

"""Error taxonomy of the bookmark codec."""

from __future__ import annotations

from enum import Enum


class SerializationErrorKind(str, Enum):
    MALFORMED_TEXT = "malformed_text"
    MISSING_FIELD = "missing_field"
    EMPTY_BATCH = "empty_batch"
    ENCODING = "encoding"


class SerializationError(ValueError):
    """Base class for codec failures.

    ``kind`` identifies the failure for message lookup. ``index`` is set when
    the failure happened on one element of a batch.
    """

    kind: SerializationErrorKind

    def __init__(self, message: str, *, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index


class MalformedTextError(SerializationError):
    """Raised when the text is not JSON of the expected shape."""

    kind = SerializationErrorKind.MALFORMED_TEXT


class MissingFieldError(SerializationError):
    """Raised when a mandatory key is absent from an encoded record."""

    kind = SerializationErrorKind.MISSING_FIELD

    def __init__(self, field: str, *, index: int | None = None) -> None:
        super().__init__(f"Missing mandatory field: {field}", index=index)
        self.field = field


class EmptyBatchError(SerializationError):
    """Raised when a batch has no records, on encode or decode."""

    kind = SerializationErrorKind.EMPTY_BATCH


class EncodingError(SerializationError):
    """Raised when a record cannot be represented as JSON text."""

    kind = SerializationErrorKind.ENCODING

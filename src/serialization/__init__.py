"""Bookmark interchange codec.

Public surface of the codec: the four encode/decode functions, the shared
field keys and the error taxonomy. User-facing messages for the errors live in
:mod:`src.serialization.messages` and are intentionally not re-exported here.
"""

from .bookmark_codec import (
    FIELD_LIST,
    FIELD_NOTES,
    FIELD_TITLE,
    FIELD_URL,
    RECORD_FIELDS,
    decode_batch,
    decode_record,
    encode_batch,
    encode_record,
)
from .errors import (
    EmptyBatchError,
    EncodingError,
    MalformedTextError,
    MissingFieldError,
    SerializationError,
    SerializationErrorKind,
)

__all__ = [
    "FIELD_LIST",
    "FIELD_NOTES",
    "FIELD_TITLE",
    "FIELD_URL",
    "RECORD_FIELDS",
    "decode_batch",
    "decode_record",
    "encode_batch",
    "encode_record",
    "EmptyBatchError",
    "EncodingError",
    "MalformedTextError",
    "MissingFieldError",
    "SerializationError",
    "SerializationErrorKind",
]

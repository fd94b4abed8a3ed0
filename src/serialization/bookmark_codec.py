"""JSON codec for bookmark records.

A record is encoded as a JSON object with the keys ``title``, ``list``, ``url``
and ``notes``. A batch is a JSON array whose elements are themselves encoded
record strings, not nested objects::

    ["{\\"title\\":\\"Site\\",\\"list\\":\\"\\",\\"url\\":\\"http://ex.com\\",\\"notes\\":\\"\\"}"]

Stored undo buffers and backups depend on both shapes, so the keys below must
not change.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

from src.domain.entities.bookmark import BookmarkRecord

from .errors import EmptyBatchError, EncodingError, MalformedTextError, MissingFieldError

FIELD_TITLE = "title"
FIELD_LIST = "list"
FIELD_URL = "url"
FIELD_NOTES = "notes"

RECORD_FIELDS = (FIELD_TITLE, FIELD_LIST, FIELD_URL, FIELD_NOTES)

_SEPARATORS = (",", ":")


def _dumps(payload: Any) -> str:
    try:
        text = json.dumps(payload, ensure_ascii=False, separators=_SEPARATORS)
        # Lone surrogates survive json.dumps but cannot be written as UTF-8
        text.encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"Unable to encode bookmark data: {exc}") from exc
    return text


def _loads(text: str, expected: type, shape: str) -> Any:
    try:
        payload = json.loads(text)
    except (TypeError, ValueError, RecursionError) as exc:
        raise MalformedTextError(f"Text is not a JSON {shape}: {exc}") from exc
    if not isinstance(payload, expected):
        raise MalformedTextError(f"Text is not a JSON {shape}")
    return payload


def _text_value(payload: Mapping[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        try:
            # "\ud800" escapes parse fine but could never be encoded again
            value.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise MalformedTextError(f"Field {key!r} is not valid text: {exc}") from exc
        return value
    if isinstance(value, (bool, int, float)):
        # Scalars are read back as their JSON text ("true", "12")
        return json.dumps(value)
    raise MalformedTextError(f"Field {key!r} must be a string")


def _record_from_mapping(payload: Mapping[str, Any]) -> BookmarkRecord:
    url = _text_value(payload, FIELD_URL)
    if url is None:
        raise MissingFieldError(FIELD_URL)
    return BookmarkRecord(
        title=_text_value(payload, FIELD_TITLE) or "",
        list_name=_text_value(payload, FIELD_LIST) or "",
        url=url,
        notes=_text_value(payload, FIELD_NOTES) or "",
    )


def encode_record(record: BookmarkRecord) -> str:
    """Encode one record as a JSON object string.

    :raises EncodingError: if a field cannot be represented as JSON text.
    """
    return _dumps(
        {
            FIELD_TITLE: record.title,
            FIELD_LIST: record.list_name,
            FIELD_URL: record.url,
            FIELD_NOTES: record.notes,
        }
    )


def encode_batch(records: Sequence[BookmarkRecord]) -> str:
    """Encode records, in order, as a JSON array of encoded record strings.

    :raises EmptyBatchError: if ``records`` is empty.
    :raises EncodingError: if any record fails to encode.
    """
    if not records:
        raise EmptyBatchError("Cannot encode an empty batch")
    encoded: list[str] = []
    for index, record in enumerate(records):
        try:
            encoded.append(encode_record(record))
        except EncodingError as exc:
            exc.index = index
            raise
    return _dumps(encoded)


def decode_record(text: str) -> BookmarkRecord:
    """Decode one record from a JSON object string.

    ``title``, ``list`` and ``notes`` default to ``""`` when absent.

    :raises MalformedTextError: if ``text`` is not a JSON object, or a field
        holds a structured value.
    :raises MissingFieldError: if the ``url`` key is absent.
    """
    payload = _loads(text, dict, "object")
    return _record_from_mapping(payload)


def decode_batch(text: str) -> list[BookmarkRecord]:
    """Decode a JSON array of encoded records, preserving order.

    Elements are normally encoded record strings. An element that is already a
    JSON object is accepted as the record itself.

    :raises MalformedTextError: if ``text`` is not a JSON array or an element is
        neither a string nor an object.
    :raises EmptyBatchError: if the array has no elements.
    :raises MissingFieldError: propagated from the failing element, with
        ``index`` set to its position.
    """
    items = _loads(text, list, "array")
    if not items:
        raise EmptyBatchError("Cannot decode an empty batch")
    records: list[BookmarkRecord] = []
    for index, item in enumerate(items):
        try:
            if isinstance(item, str):
                records.append(decode_record(item))
            elif isinstance(item, dict):
                records.append(_record_from_mapping(item))
            else:
                raise MalformedTextError("Batch element is not an encoded bookmark")
        except (MalformedTextError, MissingFieldError) as exc:
            exc.index = index
            raise
    return records

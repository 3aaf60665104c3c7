"""
Request body encoding.

A body value is one of three kinds: raw bytes, text, or a structured value
(mapping, list, number...). The kind picks the default encoding tag and the
tag picks the serializer.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional
from urllib.parse import urlencode

ENCODING_FORM = "form"
ENCODING_JSON = "json"
ENCODING_BUFFER = "buffer"

CONTENT_TYPES = {
    ENCODING_JSON: "application/json",
    ENCODING_FORM: "application/x-www-form-urlencoded",
}


class PayloadKind(str, Enum):
    BYTES = "bytes"
    TEXT = "text"
    STRUCTURED = "structured"


@dataclass(frozen=True)
class Payload:
    """
    Serialized request body.

    Attributes:
        kind: What the caller passed in
        encoding: Resolved encoding tag (form, json, buffer or a custom tag)
        content: Bytes written to the wire
    """
    kind: PayloadKind
    encoding: str
    content: bytes

    @property
    def content_type(self) -> Optional[str]:
        """Implied content-type, None for buffer and custom tags."""
        return CONTENT_TYPES.get(self.encoding)

    def __len__(self) -> int:
        return len(self.content)


def payload_kind(data: Any) -> PayloadKind:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return PayloadKind.BYTES
    if isinstance(data, str):
        return PayloadKind.TEXT
    return PayloadKind.STRUCTURED


def resolve_encoding(kind: PayloadKind, encoding: Optional[str] = None) -> str:
    """
    Pick the encoding tag.

    An explicit hint always wins (lowercased). Otherwise bytes -> buffer,
    structured -> json, text -> form.
    """
    if encoding:
        return encoding.lower()
    if kind is PayloadKind.BYTES:
        return ENCODING_BUFFER
    if kind is PayloadKind.STRUCTURED:
        return ENCODING_JSON
    return ENCODING_FORM


def _to_json(data: Any) -> bytes:
    # Compact separators: the same text JSON.stringify produces
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _to_form(data: Any) -> bytes:
    if hasattr(data, "items"):
        pairs = []
        for key, value in data.items():
            if isinstance(value, (list, tuple)):
                pairs.extend((key, _form_value(item)) for item in value)
            else:
                pairs.append((key, _form_value(value)))
        return urlencode(pairs).encode("ascii")
    # Already a sequence of pairs
    return urlencode([(key, _form_value(value)) for key, value in data]).encode("ascii")


def _form_value(value: Any) -> str:
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return ""
    return str(value)


def encode_body(data: Any, encoding: Optional[str] = None) -> Payload:
    """
    Serialize a body value.

    Bytes are always sent unchanged. Text under `form` is taken as already
    URL-encoded; under `json` it becomes a JSON string literal; under any
    other tag it is sent as UTF-8. Structured values under `form` are
    URL-encoded (list values repeat the key), under every other tag they
    are serialized as JSON.

    Raises:
        TypeError: structured value that JSON cannot serialize

    Examples:
        >>> encode_body({"title": "foo"}).content
        b'{"title":"foo"}'
        >>> encode_body({"a": [1, 2]}, "FORM").content
        b'a=1&a=2'
        >>> encode_body(b"\\x00\\x01").encoding
        'buffer'
    """
    kind = payload_kind(data)
    resolved = resolve_encoding(kind, encoding)

    if kind is PayloadKind.BYTES:
        content = bytes(data)
    elif kind is PayloadKind.TEXT:
        content = _to_json(data) if resolved == ENCODING_JSON else data.encode("utf-8")
    elif resolved == ENCODING_FORM:
        content = _to_form(data)
    else:
        content = _to_json(data)

    return Payload(kind=kind, encoding=resolved, content=content)

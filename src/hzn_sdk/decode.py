"""Request body encoding and response body decoding.

The caller picks the decoded shape explicitly with a response target:

- ``RAW_BYTES``: the body bytes, untouched.
- ``RAW_TEXT``: the body as text, untouched.
- ``PRETTY_STRING``: the body parsed as JSON and re-serialized with a 2-space
  indent. Keys come back sorted, so the server's field order is not kept.
- ``TypedValue(shape)``: the body validated into ``shape`` (a pydantic model,
  dataclass, ``dict[str, int]`` or any other type pydantic accepts). Values
  are not coerced: ``"3"`` is rejected for an ``int`` field. Unknown fields
  are ignored.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from hzn_sdk.errors import InternalError, ParseError

JSON_INDENT = 2


@dataclass(frozen=True)
class RawBytes:
    pass


@dataclass(frozen=True)
class RawText:
    pass


@dataclass(frozen=True)
class PrettyString:
    pass


@dataclass(frozen=True)
class TypedValue:
    shape: Any


ResponseTarget = Union[RawBytes, RawText, PrettyString, TypedValue]

RAW_BYTES = RawBytes()
RAW_TEXT = RawText()
PRETTY_STRING = PrettyString()


def pretty_json(value: Any) -> str:
    return json.dumps(value, indent=JSON_INDENT, sort_keys=True, ensure_ascii=False)


def decode_body(
    body: bytes,
    target: ResponseTarget,
    *,
    allow_empty: bool = False,
    source: str = "response",
) -> Any:
    if isinstance(target, RawBytes):
        return bytes(body)
    if isinstance(target, RawText):
        return body.decode("utf-8", errors="replace")

    if not body and allow_empty:
        return None

    if isinstance(target, PrettyString):
        try:
            parsed = json.loads(body)
        except ValueError as exc:
            raise ParseError(f"failed to unmarshal body response from {source}: {exc}") from exc
        return pretty_json(parsed)

    if isinstance(target, TypedValue):
        try:
            adapter = TypeAdapter(target.shape)
        except PydanticSchemaGenerationError as exc:
            raise InternalError(f"unsupported response shape {target.shape!r}: {exc}") from exc
        try:
            return adapter.validate_json(body, strict=True)
        except ValidationError as exc:
            raise ParseError(f"failed to unmarshal body response from {source}: {exc}") from exc

    raise InternalError(f"unsupported response target: {target!r}")


def encode_body(
    body: Any,
    *,
    text_is_json: bool = False,
    source: str = "request",
) -> tuple[bytes, dict[str, str]]:
    """Return the payload bytes and the content headers that go with it.

    Bytes, and strings unless ``text_is_json`` is set, are sent like an
    uploaded file with only a ``Content-Length``. Everything else is
    serialized as JSON.
    """
    if isinstance(body, (bytes, bytearray)):
        payload = bytes(body)
        return payload, {"Content-Length": str(len(payload))}
    if isinstance(body, str):
        payload = body.encode("utf-8")
        if text_is_json:
            return payload, {"Content-Type": "application/json"}
        return payload, {"Content-Length": str(len(payload))}

    try:
        payload = to_json(body)
    except PydanticSerializationError as exc:
        raise ParseError(f"failed to marshal body for {source}: {exc}") from exc
    return payload, {"Content-Type": "application/json"}

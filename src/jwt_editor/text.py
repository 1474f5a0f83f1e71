"""
Text and JSON helpers for decoded token segments.

Turns the raw bytes of a header or payload segment into pretty-printed JSON
text, one stage at a time, raising the matching ``TokenError`` subclass when
a stage fails.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from . import base64url
from .errors import InvalidJSON, NotJSONObject, TextDecodeError

__all__ = [
    "TEXT_ENCODINGS",
    "decode_text",
    "parse_json_object",
    "pretty_print",
    "compact",
    "decode_segment",
]

logger = logging.getLogger(__name__)

# Tried in order; the first encoding that decodes the bytes wins.  Some token
# producers are not UTF-8 aware, hence the long tail.
TEXT_ENCODINGS = (
    "utf-8",
    "utf-16",
    "utf-16-le",
    "utf-16-be",
    "utf-32",
    "utf-32-le",
    "utf-32-be",
    "ascii",
    "iso-8859-1",
    "cp1252",
)


def decode_text(data: bytes) -> str:
    """Decode *data* with the first encoding in ``TEXT_ENCODINGS`` that fits."""
    for encoding in TEXT_ENCODINGS:
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError:
            continue
        if encoding != "utf-8":
            logger.debug("Segment decoded as %s", encoding)
        return text
    raise TextDecodeError(f"{len(data)} bytes matched no supported encoding")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def parse_json_object(text: str) -> dict:
    """Parse *text* and require a top-level JSON object.

    Raises:
        InvalidJSON: If *text* is not valid JSON or nests too deeply.
        NotJSONObject: If the JSON value is an array or a scalar.
    """
    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise InvalidJSON(str(exc)) from exc
    except RecursionError as exc:
        raise InvalidJSON("nesting too deep") from exc
    if not isinstance(value, dict):
        raise NotJSONObject(type(value).__name__)
    return value


def _dumps(obj: dict, **kwargs: Any) -> str:
    # Lone surrogates survive json.loads but cannot be written as UTF-8,
    # so those values are kept as \u escapes instead.
    text = json.dumps(obj, ensure_ascii=False, **kwargs)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return json.dumps(obj, ensure_ascii=True, **kwargs)
    return text


def pretty_print(obj: dict) -> str:
    """Render *obj* indented with sorted keys."""
    return _dumps(obj, indent=2, sort_keys=True)


def compact(obj: dict) -> str:
    """Render *obj* without insignificant whitespace, keys in their given order."""
    return _dumps(obj, separators=(",", ":"))


def decode_segment(segment: str) -> str:
    """Decode one base64url segment all the way to pretty-printed JSON text."""
    data = base64url.decode(segment)
    return pretty_print(parse_json_object(decode_text(data)))

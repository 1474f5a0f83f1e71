"""
Editable JWT model.

``EditableToken`` keeps a raw encoded token and its decoded representations
consistent while either side is edited:

  raw token  --split-->  header/payload/signature base64url
             --decode--> header/payload JSON text (pretty-printed)

and in reverse, an edit to the header or payload JSON is re-encoded and the
raw token rebuilt around the unchanged signature.  The signature is never
verified or re-computed, so an edited token is structurally valid but no
longer a validly signed JWT.

Every public mutation completes synchronously and never raises for bad
input.  Decode failures are collected per segment and exposed through
``error_message``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional

from . import base64url
from .errors import InvalidTokenFormat, TokenError
from .text import compact, decode_segment, parse_json_object

__all__ = [
    "HEADER",
    "PAYLOAD",
    "SIGNATURE",
    "ERROR_SEPARATOR",
    "JsonEditPolicy",
    "Segment",
    "TokenState",
    "EditableToken",
]

logger = logging.getLogger(__name__)

HEADER = "header"
PAYLOAD = "payload"
SIGNATURE = "signature"

# Error slot for the structural (segment count) error
_STRUCTURE = "token"

ERROR_SEPARATOR = " • "

_ERROR_PREFIX = {HEADER: "Header", PAYLOAD: "Payload"}

_MAX_NOTIFY_ROUNDS = 8


class JsonEditPolicy(str, Enum):
    """How an edit to the header or payload JSON text is re-encoded.

    ``PERMISSIVE`` encodes the typed text byte-for-byte, valid JSON or not.
    ``STRICT`` only accepts text that parses as a JSON object and encodes a
    normalised copy of it: compact separators, with duplicate keys collapsed
    to their last value.  The typed text itself is left in the JSON field.
    """

    PERMISSIVE = "permissive"
    STRICT = "strict"



@dataclass(frozen=True)
class Segment:
    """Character span of one part within the raw token text."""
    kind: str
    start: int
    end: int


@dataclass(frozen=True)
class TokenState:
    """Immutable snapshot of every field of an ``EditableToken``."""

    raw_token: str = ""
    header_base64: Optional[str] = None
    payload_base64: Optional[str] = None
    signature_base64: Optional[str] = None
    header_json: Optional[str] = None
    payload_json: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.raw_token.strip()

    @property
    def has_parts(self) -> bool:
        return any(p is not None for p in (self.header_base64, self.payload_base64, self.signature_base64))

    @property
    def is_malformed(self) -> bool:
        return not self.is_empty and not self.has_parts and self.error_message is not None

    @property
    def is_decoded(self) -> bool:
        return self.has_parts


Observer = Callable[[TokenState], None]


class EditableToken:
    """A JWT whose raw text and decoded parts can each be edited.

    Args:
        raw_token: Initial token text, possibly empty.
        json_edit_policy: Whether invalid JSON typed into the header or
            payload still rebuilds the raw token (``PERMISSIVE``) or is
            rejected (``STRICT``).
        redecode_parts: When True, a direct edit of the header or payload
            base64url also refreshes the matching JSON text.  By default
            those edits only flow outward into the raw token.
    """

    def __init__(
        self,
        raw_token: str = "",
        json_edit_policy: JsonEditPolicy = JsonEditPolicy.PERMISSIVE,
        redecode_parts: bool = False,
    ) -> None:
        self.json_edit_policy = JsonEditPolicy(json_edit_policy)
        self.redecode_parts = redecode_parts

        self._raw_token = ""
        self._base64: dict[str, Optional[str]] = {HEADER: None, PAYLOAD: None, SIGNATURE: None}
        self._json: dict[str, Optional[str]] = {HEADER: None, PAYLOAD: None}
        self._errors: dict[str, str] = {}
        self._observers: list[Observer] = []
        self._suppress = False

        with self._guard():
            self._derive_from_raw(raw_token)

    def __repr__(self) -> str:
        return f"EditableToken(raw_token={self._raw_token!r}, error={self.error_message!r})"

    # ------------------------------------------------------------------
    # Bound values
    # ------------------------------------------------------------------

    @property
    def raw_token(self) -> str:
        return self._raw_token

    @raw_token.setter
    def raw_token(self, value: str) -> None:
        self.set_raw_token(value)

    @property
    def header_json(self) -> Optional[str]:
        return self._json[HEADER]

    @header_json.setter
    def header_json(self, value: Optional[str]) -> None:
        self.set_header_json(value)

    @property
    def payload_json(self) -> Optional[str]:
        return self._json[PAYLOAD]

    @payload_json.setter
    def payload_json(self, value: Optional[str]) -> None:
        self.set_payload_json(value)

    @property
    def header_base64(self) -> Optional[str]:
        return self._base64[HEADER]

    @header_base64.setter
    def header_base64(self, value: Optional[str]) -> None:
        self.set_header_base64(value)

    @property
    def payload_base64(self) -> Optional[str]:
        return self._base64[PAYLOAD]

    @payload_base64.setter
    def payload_base64(self, value: Optional[str]) -> None:
        self.set_payload_base64(value)

    @property
    def signature_base64(self) -> Optional[str]:
        return self._base64[SIGNATURE]

    @signature_base64.setter
    def signature_base64(self, value: Optional[str]) -> None:
        self.set_signature_base64(value)

    @property
    def signature_length(self) -> int:
        return len(self._base64[SIGNATURE] or "")

    @property
    def error_message(self) -> Optional[str]:
        """All current errors joined into one message, or None."""
        if _STRUCTURE in self._errors:
            return self._errors[_STRUCTURE]
        messages = [
            f"{_ERROR_PREFIX[part]}: {self._errors[part]}"
            for part in (HEADER, PAYLOAD)
            if part in self._errors
        ]
        return ERROR_SEPARATOR.join(messages) if messages else None

    def snapshot(self) -> TokenState:
        return TokenState(
            raw_token=self._raw_token,
            header_base64=self._base64[HEADER],
            payload_base64=self._base64[PAYLOAD],
            signature_base64=self._base64[SIGNATURE],
            header_json=self._json[HEADER],
            payload_json=self._json[PAYLOAD],
            error_message=self.error_message,
        )

    def segments(self) -> list[Segment]:
        """Return the spans of header, payload and signature in the raw text.

        Text after the second dot belongs to the signature, so a token with
        too many dots still yields at most three spans.
        """
        spans: list[Segment] = []
        loc = 0
        for kind, piece in zip((HEADER, PAYLOAD, SIGNATURE), self._raw_token.split(".", 2)):
            spans.append(Segment(kind, loc, loc + len(piece)))
            loc += len(piece) + 1
        return spans

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, observer: Observer) -> None:
        """Call *observer* with a snapshot after each top-level mutation."""
        self._observers.append(observer)

    def unsubscribe(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_raw_token(self, text: str) -> None:
        """Replace the raw token and re-derive every decoded field."""
        with self._guard() as top_level:
            self._derive_from_raw(text or "")
            if top_level:
                self._notify()

    def clear(self) -> None:
        self.set_raw_token("")

    def set_header_json(self, text: Optional[str]) -> None:
        """Replace the header JSON text and rebuild the raw token."""
        self._edit_json(HEADER, text)

    def set_payload_json(self, text: Optional[str]) -> None:
        """Replace the payload JSON text and rebuild the raw token."""
        self._edit_json(PAYLOAD, text)

    def set_header_base64(self, value: Optional[str]) -> None:
        self._edit_base64(HEADER, value)

    def set_payload_base64(self, value: Optional[str]) -> None:
        self._edit_base64(PAYLOAD, value)

    def set_signature_base64(self, value: Optional[str]) -> None:
        self._edit_base64(SIGNATURE, value)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def _guard(self) -> Iterator[bool]:
        """Hold the re-entrancy flag for one top-level mutation.

        Yields True for the outermost mutation only.  Nested mutations (for
        example from an observer) still apply but do not notify again.
        """
        top_level = not self._suppress
        self._suppress = True
        try:
            yield top_level
        finally:
            if top_level:
                self._suppress = False

    def _notify(self) -> None:
        """Deliver the current state to every observer.

        Each observer gets a fresh snapshot.  When an observer writes back
        into the token, the observers that saw the older state are called
        again, for at most ``_MAX_NOTIFY_ROUNDS`` rounds.
        """
        observers = list(self._observers)
        delivered: list[Optional[TokenState]] = [None] * len(observers)
        for _ in range(_MAX_NOTIFY_ROUNDS):
            called = False
            for i, observer in enumerate(observers):
                state = self.snapshot()
                if state == delivered[i]:
                    continue
                delivered[i] = state
                observer(state)
                called = True
            if not called:
                return
        logger.debug("Observers still rewriting the token after %d rounds", _MAX_NOTIFY_ROUNDS)

    def _clear_parts(self) -> None:
        for part in self._base64:
            self._base64[part] = None
        for part in self._json:
            self._json[part] = None

    def _derive_from_raw(self, text: str) -> None:
        self._raw_token = text
        self._errors.clear()

        trimmed = text.strip()
        if not trimmed:
            self._clear_parts()
            return

        parts = trimmed.split(".")
        if len(parts) != 3:
            self._clear_parts()
            self._errors[_STRUCTURE] = str(InvalidTokenFormat())
            logger.debug("Token has %d segments, expected 3", len(parts))
            return

        self._base64[HEADER], self._base64[PAYLOAD], self._base64[SIGNATURE] = parts
        for part in (HEADER, PAYLOAD):
            self._json[part] = self._decode_part(part, self._base64[part])

    def _decode_part(self, part: str, segment: str) -> Optional[str]:
        """Decode *segment* to JSON text, recording any failure for *part*."""
        self._errors.pop(part, None)
        try:
            return decode_segment(segment)
        except TokenError as exc:
            self._errors[part] = str(exc)
            logger.debug("%s segment: %s (%s)", _ERROR_PREFIX[part], exc, exc.detail)
            return None

    def _rebuild_raw(self) -> None:
        self._errors.pop(_STRUCTURE, None)
        self._raw_token = ".".join(self._base64[part] or "" for part in (HEADER, PAYLOAD, SIGNATURE))

    def _edit_json(self, part: str, text: Optional[str]) -> None:
        with self._guard() as top_level:
            text = text or None
            # The typed text stays authoritative, even when it does not parse.
            self._json[part] = text

            if text is None:
                self._errors.pop(part, None)
                self._base64[part] = None
                self._rebuild_raw()
            else:
                obj = None
                try:
                    obj = parse_json_object(text)
                    self._errors.pop(part, None)
                except TokenError as exc:
                    self._errors[part] = str(exc)
                    logger.debug("Edited %s: %s", part, exc)

                strict = self.json_edit_policy is JsonEditPolicy.STRICT
                if obj is not None or not strict:
                    try:
                        encoded = base64url.encode_text(compact(obj) if strict else text)
                    except TokenError as exc:
                        # Base64 part and raw token keep their last good value.
                        self._errors[part] = str(exc)
                        logger.debug("Edited %s: %s (%s)", part, exc, exc.detail)
                    else:
                        self._base64[part] = encoded
                        self._rebuild_raw()

            if top_level:
                self._notify()

    def _edit_base64(self, part: str, value: Optional[str]) -> None:
        with self._guard() as top_level:
            self._base64[part] = value
            if part != SIGNATURE and self.redecode_parts:
                if value is None:
                    self._errors.pop(part, None)
                    self._json[part] = None
                else:
                    self._json[part] = self._decode_part(part, value)
            self._rebuild_raw()

            if top_level:
                self._notify()

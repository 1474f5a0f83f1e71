"""
Base64url codec with JWT padding rules.

JWT segments are base64url encoded without ``=`` padding.  Decoding restores
the padding, but a length remainder of 1 (mod 4) can never be valid and is
rejected rather than padded.
"""

from __future__ import annotations

import base64
import binascii

from jwt.utils import base64url_encode

from .errors import Base64DecodeError, TextEncodeError

__all__ = ["encode", "encode_text", "decode", "is_decodable"]


def encode(data: bytes) -> str:
    """Encode *data* as unpadded base64url text."""
    return base64url_encode(data).decode("ascii")


def encode_text(text: str) -> str:
    """Encode the UTF-8 bytes of *text* as unpadded base64url text.

    Raises:
        TextEncodeError: If *text* holds a lone surrogate.
    """
    try:
        data = text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise TextEncodeError(str(exc)) from exc
    return encode(data)


def decode(text: str) -> bytes:
    """Decode unpadded base64url *text* into bytes.

    Characters outside the base64 alphabet are discarded, so a token pasted
    with a stray newline still decodes when the remaining data lines up.

    Raises:
        Base64DecodeError: If the length is unrecoverable, the data cannot be
            decoded, or a non-empty value produces no bytes.
    """
    b64 = text.replace("-", "+").replace("_", "/")
    remainder = len(b64) % 4
    if remainder == 1:
        raise Base64DecodeError(f"invalid base64url length {len(text)}")
    if remainder:
        b64 += "=" * (4 - remainder)

    try:
        data = base64.b64decode(b64)
    except (binascii.Error, ValueError) as exc:
        raise Base64DecodeError(str(exc)) from exc

    if b64 and not data:
        raise Base64DecodeError("no data after decoding")
    return data


def is_decodable(text: str) -> bool:
    """Return True when *text* decodes as base64url."""
    try:
        decode(text)
    except Base64DecodeError:
        return False
    return True

"""
Error taxonomy for token decoding.

Every stage of turning a raw token into JSON text has its own error type so
callers can tell a structural problem from an encoding or JSON problem.  The
``str()`` of each error is the human-readable message shown to the user.
"""

from __future__ import annotations

__all__ = [
    "TokenError",
    "InvalidTokenFormat",
    "Base64DecodeError",
    "TextDecodeError",
    "TextEncodeError",
    "InvalidJSON",
    "NotJSONObject",
]


class TokenError(Exception):
    """Base class for every token decoding failure."""

    message = "Token could not be decoded."

    def __init__(self, detail: str = "") -> None:
        super().__init__(self.message)
        self.detail = detail


class InvalidTokenFormat(TokenError):
    """Raised when a token does not have exactly three segments."""

    message = "An encoded JWT must contain three '.' separated Base-64 encoded parts."


class Base64DecodeError(TokenError):
    """Raised when a base64url value cannot be decoded."""

    message = "Base-64 value could not be decoded."


class TextDecodeError(TokenError):
    """Raised when decoded bytes match none of the supported text encodings."""

    message = "Text could not be decoded with any supported encoding."


class InvalidJSON(TokenError):
    """Raised when text is not syntactically valid JSON."""

    message = "JSON could not be parsed."


class NotJSONObject(TokenError):
    """Raised when valid JSON is not a top-level object."""

    message = "JSON is not an object."


class TextEncodeError(TokenError):
    """Raised when edited text cannot be written as UTF-8."""

    message = "Text could not be encoded as UTF-8."

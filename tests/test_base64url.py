"""Tests for the base64url codec."""

from __future__ import annotations

import pytest

from jwt_editor import base64url
from jwt_editor.errors import Base64DecodeError, TextEncodeError


SAMPLES = [
    b"",
    b"f",
    b"fo",
    b"foo",
    b"foob",
    b'{"alg":"HS256"}',
    bytes(range(256)),
    b"\xfb\xff\xfe\x00",
]


@pytest.mark.parametrize("data", SAMPLES)
def test_decode_inverts_encode(data: bytes) -> None:
    assert base64url.decode(base64url.encode(data)) == data


@pytest.mark.parametrize("data", SAMPLES)
def test_encoded_text_is_url_safe_and_unpadded(data: bytes) -> None:
    encoded = base64url.encode(data)
    assert "+" not in encoded
    assert "/" not in encoded
    assert "=" not in encoded


def test_encode_substitutes_url_unsafe_characters() -> None:
    # Standard base64 of these bytes is "+//+"
    assert base64url.encode(b"\xfb\xff\xfe") == "-__-"


def test_empty_input() -> None:
    assert base64url.encode(b"") == ""
    assert base64url.decode("") == b""


def test_encode_text_uses_utf8() -> None:
    assert base64url.decode(base64url.encode_text("é")) == "é".encode("utf-8")


def test_decode_known_header() -> None:
    assert base64url.decode("eyJhbGciOiJIUzI1NiJ9") == b'{"alg":"HS256"}'


@pytest.mark.parametrize("text", ["a", "abcde", "eyJh bGciOiJIUzI1NiJ9"])
def test_length_remainder_of_one_fails(text: str) -> None:
    with pytest.raises(Base64DecodeError):
        base64url.decode(text)


def test_trailing_newlines_are_ignored() -> None:
    assert base64url.decode("eyJhbGciOiJIUzI1NiJ9\n\n\n\n") == b'{"alg":"HS256"}'


def test_input_without_any_data_fails() -> None:
    with pytest.raises(Base64DecodeError):
        base64url.decode("!!!!")


def test_is_decodable() -> None:
    assert base64url.is_decodable("eyJhbGciOiJIUzI1NiJ9")
    assert not base64url.is_decodable("abcde")


def test_encode_text_rejects_lone_surrogate() -> None:
    with pytest.raises(TextEncodeError):
        base64url.encode_text('{"x": "\ud800"}')

"""Tests for the decoder session and clipboard import."""

from __future__ import annotations

import json

import pytest

from jwt_editor import base64url
from jwt_editor.clipboard import StaticClipboard, looks_like_jwt
from jwt_editor.context import MemoryStore, ToolContext
from jwt_editor.session import RAW_TOKEN_KEY, TOOL, DecoderSession
from jwt_editor.token import JsonEditPolicy

from .helpers import HEADER, make_token

SAVED_KEY = f"tool.{TOOL.id}.{RAW_TOKEN_KEY}"


def _session(store=None, clipboard=None, **kwargs) -> DecoderSession:
    return DecoderSession(ToolContext(TOOL.id, store or MemoryStore()), clipboard=clipboard, **kwargs)


def test_restores_saved_token(valid_token: str) -> None:
    session = _session(MemoryStore({SAVED_KEY: valid_token}))
    assert session.token.raw_token == valid_token
    assert json.loads(session.token.header_json) == HEADER


def test_saves_every_change(valid_token: str) -> None:
    store = MemoryStore()
    session = _session(store)

    session.token.set_raw_token(valid_token)
    assert store.load(SAVED_KEY) == valid_token

    session.token.set_header_json('{"alg": "none"}')
    assert store.load(SAVED_KEY) == session.token.raw_token


def test_saves_token_rewritten_by_another_observer(valid_token: str) -> None:
    store = MemoryStore()
    session = _session(store)
    token = session.token

    def force_alg_none(state) -> None:
        token.set_header_json('{"alg": "none"}')

    token.subscribe(force_alg_none)
    token.set_raw_token(valid_token)

    assert token.raw_token != valid_token
    assert store.load(SAVED_KEY) == token.raw_token


def test_autosave_off(valid_token: str) -> None:
    store = MemoryStore()
    session = _session(store, autosave=False)
    session.token.set_raw_token(valid_token)
    assert store.load(SAVED_KEY) is None


def test_clear_saves_empty_token(valid_token: str) -> None:
    store = MemoryStore({SAVED_KEY: valid_token})
    session = _session(store)

    session.clear()

    assert session.token.raw_token == ""
    assert store.load(SAVED_KEY) == ""


def test_passes_policies_to_token() -> None:
    session = _session(json_edit_policy=JsonEditPolicy.STRICT, redecode_parts=True)
    assert session.token.json_edit_policy is JsonEditPolicy.STRICT
    assert session.token.redecode_parts


def test_clipboard_import_on_appear(valid_token: str) -> None:
    store = MemoryStore()
    session = _session(store, StaticClipboard(f"  {valid_token}\n"))

    assert session.on_appear() is True
    assert session.token.raw_token == valid_token
    assert store.load(SAVED_KEY) == valid_token

    # Same token again: nothing to import
    assert session.on_focus() is False


def test_clipboard_import_replaces_saved_token(valid_token: str) -> None:
    other = make_token(payload={"sub": "other"})
    session = _session(MemoryStore({SAVED_KEY: valid_token}), StaticClipboard(other))

    assert session.on_focus() is True
    assert session.token.raw_token == other


@pytest.mark.parametrize("text", [None, "", "   ", "hello world", "a.b", "abcde.abcd.abcd"])
def test_clipboard_without_jwt_is_ignored(text) -> None:
    session = _session(clipboard=StaticClipboard(text))
    assert session.on_appear() is False
    assert session.token.raw_token == ""


def test_clipboard_import_does_not_check_json() -> None:
    part = base64url.encode_text("plain text")
    candidate = f"{part}.{part}.sig"
    session = _session(clipboard=StaticClipboard(candidate))

    assert session.on_appear() is True
    assert session.token.header_json is None
    assert session.token.error_message is not None


def test_no_clipboard_reader() -> None:
    assert _session().import_from_clipboard() is False


def test_looks_like_jwt(valid_token: str) -> None:
    assert looks_like_jwt(valid_token)
    assert looks_like_jwt(make_token(signature=""))
    assert not looks_like_jwt("abc")
    assert not looks_like_jwt(valid_token + ".extra")
    assert not looks_like_jwt("!!!!.abcd.abcd")

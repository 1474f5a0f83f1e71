"""Tests for configuration loading."""

from __future__ import annotations

import argparse
import os

import pytest

from jwt_editor.config import (
    ENV_STATE_FILE,
    PROJECT_ROOT,
    AppConfig,
    ConfigError,
    load_config,
    merge_cli_overrides,
    resolve_path,
)
from jwt_editor.token import JsonEditPolicy


@pytest.fixture(autouse=True)
def _no_env_override(monkeypatch):
    monkeypatch.delenv(ENV_STATE_FILE, raising=False)


def _write(tmp_path, text: str) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_missing_file_uses_defaults(tmp_path) -> None:
    cfg = load_config(str(tmp_path / "missing.yaml"))
    assert cfg == AppConfig()
    assert cfg.token.json_edit_policy is JsonEditPolicy.PERMISSIVE
    assert cfg.token.redecode_parts is False


def test_empty_file_uses_defaults(tmp_path) -> None:
    assert load_config(_write(tmp_path, "")) == AppConfig()


def test_full_config(tmp_path) -> None:
    cfg = load_config(_write(tmp_path, (
        "token:\n"
        "  json_edit_policy: STRICT\n"
        "  redecode_parts: true\n"
        "storage:\n"
        "  state_file: /tmp/jwt-state.json\n"
        "logging:\n"
        "  log_dir: /tmp/jwt-logs\n"
    )))
    assert cfg.token.json_edit_policy is JsonEditPolicy.STRICT
    assert cfg.token.redecode_parts is True
    assert cfg.storage.state_file == "/tmp/jwt-state.json"
    assert cfg.logging.log_dir == "/tmp/jwt-logs"


def test_env_overrides_state_file(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv(ENV_STATE_FILE, "/tmp/from-env.json")
    cfg = load_config(_write(tmp_path, "storage:\n  state_file: from-file.json\n"))
    assert cfg.storage.state_file == "/tmp/from-env.json"


@pytest.mark.parametrize("text", [
    "- just\n- a list\n",
    "token:\n  json_edit_policy: lenient\n",
    "token:\n  redecode_parts: sometimes\n",
    "token: 5\n",
    "token: [\n",
])
def test_invalid_config(tmp_path, text: str) -> None:
    with pytest.raises(ConfigError):
        load_config(_write(tmp_path, text))


def test_merge_cli_overrides() -> None:
    args = argparse.Namespace(strict=True, verbose=True)
    cfg = merge_cli_overrides(AppConfig(), args)
    assert cfg.token.json_edit_policy is JsonEditPolicy.STRICT
    assert cfg.verbose is True


def test_merge_without_strict_keeps_policy() -> None:
    cfg = merge_cli_overrides(AppConfig(), argparse.Namespace(verbose=False))
    assert cfg.token.json_edit_policy is JsonEditPolicy.PERMISSIVE


def test_resolve_path() -> None:
    assert resolve_path("/abs/file.json") == "/abs/file.json"
    assert resolve_path("logs") == os.path.join(PROJECT_ROOT, "logs")

"""
Key-value persistence for tool state.

A tool saves small values (the last raw token) under keys namespaced by its
tool id, ``tool.<tool_id>.<key>``.  Values are stored as JSON-encoded
strings so the store itself stays opaque to the caller.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Optional, Protocol

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "ToolContext",
]

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def save(self, key: str, value: str) -> None: ...

    def load(self, key: str) -> Optional[str]: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Dict-backed store that lives only as long as the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = {k: json.dumps(v) for k, v in (initial or {}).items()}

    def save(self, key: str, value: str) -> None:
        self._data[key] = json.dumps(value)

    def load(self, key: str) -> Optional[str]:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class JsonFileStore:
    """Store backed by a single JSON object file.

    The file is read on every ``load`` and rewritten on every ``save`` so
    separate sessions always see each other's last write.  A missing or
    unreadable file reads as empty; write failures are logged, not raised.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def _read(self) -> dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Could not read state file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring state file %s: not a JSON object", self.path)
            return {}
        return data

    def _write(self, data: dict[str, str]) -> None:
        directory = os.path.dirname(self.path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            logger.debug("State written: %s", self.path)
        except OSError as exc:
            logger.warning("Could not write state file %s: %s", self.path, exc)

    def save(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = json.dumps(value)
        self._write(data)

    def load(self, key: str) -> Optional[str]:
        raw = self._read().get(key)
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring undecodable value for %s in %s", key, self.path)
            return None
        return value if isinstance(value, str) else None

    def remove(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


class ToolContext:
    """Per-tool view of a ``KeyValueStore``."""

    def __init__(self, tool_id: str, store: KeyValueStore) -> None:
        self.tool_id = tool_id
        self.store = store

    def make_key(self, key: str) -> str:
        return f"tool.{self.tool_id}.{key}"

    def save(self, value: str, key: str) -> None:
        self.store.save(self.make_key(key), value)

    def load(self, key: str) -> Optional[str]:
        return self.store.load(self.make_key(key))

    def remove(self, key: str) -> None:
        self.store.remove(self.make_key(key))

"""
Clipboard access and the JWT detection heuristic.

The clipboard is polled, never watched: the session reads it when the tool
appears and when it regains focus.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from . import base64url

__all__ = ["ClipboardReader", "StaticClipboard", "TkClipboard", "looks_like_jwt"]

logger = logging.getLogger(__name__)


class ClipboardReader(Protocol):
    def read(self) -> Optional[str]: ...


class StaticClipboard:
    """Clipboard holding a fixed value (tests, non-GUI runs)."""

    def __init__(self, text: Optional[str] = None) -> None:
        self.text = text

    def read(self) -> Optional[str]:
        return self.text


class TkClipboard:
    """Read the system clipboard through tkinter.

    The hidden Tk root is created on first use.  Returns None when there is
    no display or the clipboard holds no text.
    """

    def __init__(self) -> None:
        self._root = None

    def read(self) -> Optional[str]:
        import tkinter as tk

        try:
            if self._root is None:
                self._root = tk.Tk()
                self._root.withdraw()
            return self._root.clipboard_get()
        except tk.TclError as exc:
            logger.debug("Clipboard unavailable: %s", exc)
            return None

    def close(self) -> None:
        if self._root is not None:
            self._root.destroy()
            self._root = None


def looks_like_jwt(text: str) -> bool:
    """Quick structural check: three segments, each decodable base64url.

    JSON content is not inspected.
    """
    parts = text.split(".")
    if len(parts) != 3:
        return False
    return all(base64url.is_decodable(part) for part in parts)

"""
Decoder session: one editable token bound to persistence and the clipboard.

A session corresponds to one open decoder window.  It restores the last raw
token when it starts, saves the raw token after every change, and imports a
JWT found on the clipboard when the tool appears or regains focus.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .clipboard import ClipboardReader, looks_like_jwt
from .context import ToolContext
from .token import EditableToken, JsonEditPolicy, TokenState

__all__ = ["RAW_TOKEN_KEY", "ToolInfo", "TOOL", "DecoderSession"]

logger = logging.getLogger(__name__)

RAW_TOKEN_KEY = "rawToken"


@dataclass(frozen=True)
class ToolInfo:
    """Descriptor a host application uses to list and open a tool."""
    id: str
    name: str
    category: str


TOOL = ToolInfo(id="jwtdecoder", name="JWT Decoder", category="development")


class DecoderSession:
    def __init__(
        self,
        context: ToolContext,
        clipboard: Optional[ClipboardReader] = None,
        json_edit_policy: JsonEditPolicy = JsonEditPolicy.PERMISSIVE,
        redecode_parts: bool = False,
        autosave: bool = True,
    ) -> None:
        self.context = context
        self.clipboard = clipboard
        self.autosave = autosave

        saved = context.load(RAW_TOKEN_KEY)
        if saved:
            logger.debug("Restored saved token (%d chars)", len(saved))
        self.token = EditableToken(
            saved or "",
            json_edit_policy=json_edit_policy,
            redecode_parts=redecode_parts,
        )
        self.token.subscribe(self._on_token_changed)

    def _on_token_changed(self, state: TokenState) -> None:
        if self.autosave:
            self.context.save(state.raw_token, RAW_TOKEN_KEY)

    def on_appear(self) -> bool:
        """Tool became visible; import a JWT from the clipboard if present."""
        return self.import_from_clipboard()

    def on_focus(self) -> bool:
        """Window or application gained focus."""
        return self.import_from_clipboard()

    def import_from_clipboard(self) -> bool:
        """Replace the token with clipboard text that looks like a JWT.

        Returns True when the token was replaced.
        """
        if self.clipboard is None:
            return False
        text = self.clipboard.read()
        if not text:
            return False
        candidate = text.strip()
        if not candidate or candidate == self.token.raw_token or not looks_like_jwt(candidate):
            return False

        logger.info("Imported token from clipboard")
        self.token.set_raw_token(candidate)
        return True

    def clear(self) -> None:
        self.token.clear()
        # Saved even when autosave is off, so a cleared token stays cleared.
        self.context.save(self.token.raw_token, RAW_TOKEN_KEY)

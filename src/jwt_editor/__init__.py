"""Editable JWT decoder."""

__version__ = "1.0.0"

__all__ = [
    "base64url",
    "cli",
    "clipboard",
    "config",
    "context",
    "errors",
    "logging_setup",
    "session",
    "text",
    "token",
]

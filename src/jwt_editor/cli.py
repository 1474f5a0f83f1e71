"""
CLI entry point for the JWT editor.

Commands:
    decode  : decode a token (argument, stdin, clipboard, prompt, or the
              last saved token) and print its header, payload and signature
    edit    : replace the header / payload JSON or the signature of a token
              and print the rebuilt token
    clear   : forget the saved token
"""

from __future__ import annotations

import argparse
import logging
import sys

from .clipboard import TkClipboard
from .config import DEFAULT_CONFIG_PATH, AppConfig, ConfigError, load_config, merge_cli_overrides, resolve_path
from .context import JsonFileStore, MemoryStore, ToolContext
from .logging_setup import setup_logging
from .session import TOOL, DecoderSession
from .token import EditableToken

__all__ = ["main"]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Output formatting
# ---------------------------------------------------------------------------

def _print_section(label: str, text: str | None) -> None:
    print(f"\n{label}:")
    print(text if text is not None else "(not decoded)")


def _print_result(token: EditableToken, show_parts: bool = False) -> None:
    """Pretty-print the decoded token parts."""
    if show_parts:
        print("\nEncoded parts:")
        for seg in token.segments():
            print(f"  {seg.kind:<10s} [{seg.start}:{seg.end}]  {token.raw_token[seg.start:seg.end]}")

    _print_section("Header", token.header_json)
    _print_section("Payload", token.payload_json)
    print(f"\nSignature (base64url encoded, {token.signature_length} chars):")
    print(token.signature_base64 or "(none)")

    if token.error_message:
        print(f"\nError: {token.error_message}")


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config", "-c",
        default=DEFAULT_CONFIG_PATH,
        help="Path to YAML config file (default: config/config.yaml)",
    )
    common.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (debug) logging",
    )
    common.add_argument(
        "--no-save",
        action="store_true",
        help="Do not read or write the saved token",
    )

    parser = argparse.ArgumentParser(
        prog="jwt-editor",
        description="Decode and edit JWT tokens without signature verification.",
        epilog="Examples:\n"
               "  %(prog)s decode <token>\n"
               "  echo '<token>' | %(prog)s decode --stdin\n"
               "  %(prog)s decode --clipboard\n"
               "  %(prog)s edit --payload '{\"sub\": \"admin\"}'\n"
               "  %(prog)s clear\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", metavar="<command>")
    sub.required = True

    dec = sub.add_parser("decode", parents=[common], help="Decode a token")
    dec.add_argument(
        "token",
        nargs="?",
        default=None,
        help="JWT token string (optional; uses the saved token or prompts if omitted)",
    )
    src = dec.add_mutually_exclusive_group()
    src.add_argument("--stdin", action="store_true", help="Read token from stdin (for piping)")
    src.add_argument("--clipboard", action="store_true", help="Import the token from the clipboard")
    dec.add_argument("--parts", action="store_true", help="Also print the encoded segments")

    ed = sub.add_parser("edit", parents=[common], help="Edit a token and print the result")
    ed.add_argument("--token", "-t", default=None, help="Token to start from (default: saved token)")
    hdr = ed.add_mutually_exclusive_group()
    hdr.add_argument("--header", default=None, help="New header JSON")
    hdr.add_argument("--header-file", default=None, help="Read new header JSON from a file")
    pay = ed.add_mutually_exclusive_group()
    pay.add_argument("--payload", default=None, help="New payload JSON")
    pay.add_argument("--payload-file", default=None, help="Read new payload JSON from a file")
    ed.add_argument("--signature", default=None, help="New base64url signature ('' to drop it)")
    ed.add_argument(
        "--strict",
        action="store_true",
        help="Reject header/payload text that is not a JSON object",
    )

    sub.add_parser("clear", parents=[common], help="Forget the saved token")

    return parser.parse_args(argv)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _build_session(cfg: AppConfig, no_save: bool, clipboard=None) -> DecoderSession:
    store = MemoryStore() if no_save else JsonFileStore(resolve_path(cfg.storage.state_file))
    return DecoderSession(
        ToolContext(TOOL.id, store),
        clipboard=clipboard,
        json_edit_policy=cfg.token.json_edit_policy,
        redecode_parts=cfg.token.redecode_parts,
        autosave=not no_save,
    )


def _read_file(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as exc:
        print(f"Error: Could not read {path}: {exc}")
        sys.exit(1)


def _cmd_decode(args: argparse.Namespace, cfg: AppConfig) -> int:
    clipboard = TkClipboard() if args.clipboard else None
    session = _build_session(cfg, args.no_save, clipboard)

    if args.stdin:
        token = sys.stdin.read().strip()
        if not token:
            print("Error: No token received on stdin.")
            return 1
        session.token.set_raw_token(token)
    elif args.token:
        session.token.set_raw_token(args.token)
    elif args.clipboard:
        try:
            imported = session.on_appear()
        finally:
            clipboard.close()
        if not imported and not session.token.raw_token.strip():
            print("Error: The clipboard does not hold a JWT.")
            return 1
    elif not session.token.raw_token.strip():
        # Interactive mode
        print("JWT Token Decoder")
        print("=================")
        try:
            token = input("Please enter your JWT token: ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return 130
        session.token.set_raw_token(token)

    if not session.token.raw_token.strip():
        print("Error: Token is empty.")
        return 1

    _print_result(session.token, show_parts=args.parts)
    return 1 if session.token.error_message else 0


def _cmd_edit(args: argparse.Namespace, cfg: AppConfig) -> int:
    session = _build_session(cfg, args.no_save)
    token = session.token
    if args.token is not None:
        token.set_raw_token(args.token)

    header = _read_file(args.header_file) if args.header_file else args.header
    payload = _read_file(args.payload_file) if args.payload_file else args.payload

    if header is not None:
        token.set_header_json(header.strip())
    if payload is not None:
        token.set_payload_json(payload.strip())
    if args.signature is not None:
        token.set_signature_base64(args.signature)

    print(token.raw_token)
    if token.error_message:
        print(f"Error: {token.error_message}", file=sys.stderr)
        return 1
    return 0


def _cmd_clear(args: argparse.Namespace, cfg: AppConfig) -> int:
    _build_session(cfg, args.no_save).clear()
    print("Saved token cleared.")
    return 0


_COMMANDS = {
    "decode": _cmd_decode,
    "edit": _cmd_edit,
    "clear": _cmd_clear,
}


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    try:
        cfg = merge_cli_overrides(load_config(args.config), args)
    except ConfigError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    log_path = setup_logging(verbose=cfg.verbose, log_dir=cfg.logging.log_dir)
    logger.debug("Command %s, log file %s", args.command, log_path)

    sys.exit(_COMMANDS[args.command](args, cfg))

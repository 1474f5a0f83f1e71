"""
Configuration loading, validation, and typed models.

Supports:
  - Optional YAML config file (defaults apply when it is missing)
  - Environment variable override for the state file (JWT_EDITOR_STATE_FILE)
  - CLI argument merging via merge_cli_overrides()
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

from .token import JsonEditPolicy

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "PROJECT_ROOT",
    "ConfigError",
    "TokenConfig",
    "StorageConfig",
    "LoggingConfig",
    "AppConfig",
    "load_config",
    "merge_cli_overrides",
    "resolve_path",
]

logger = logging.getLogger(__name__)

# Project root directory (two levels up from this file)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, "config", "config.yaml")

ENV_STATE_FILE = "JWT_EDITOR_STATE_FILE"


# ---------------------------------------------------------------------------
# Typed configuration models
# ---------------------------------------------------------------------------

class ConfigError(Exception):
    """Raised when the configuration file is invalid."""


@dataclass(frozen=True)
class TokenConfig:
    json_edit_policy: JsonEditPolicy = JsonEditPolicy.PERMISSIVE
    redecode_parts: bool = False


@dataclass(frozen=True)
class StorageConfig:
    state_file: str = os.path.join("state", "jwt-editor.json")


@dataclass(frozen=True)
class LoggingConfig:
    log_dir: str = "logs"


@dataclass(frozen=True)
class AppConfig:
    token: TokenConfig = field(default_factory=TokenConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    verbose: bool = False


def resolve_path(path: str) -> str:
    """Resolve *path* against the project root unless it is absolute."""
    path = os.path.expanduser(path)
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _section(raw: dict, name: str) -> dict:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(value).__name__}")
    return value


def load_config(config_path: str) -> AppConfig:
    """Load and validate the YAML configuration file.

    A missing file is not an error: every setting has a default.  The state
    file location can be overridden with the JWT_EDITOR_STATE_FILE env var.

    Raises:
        ConfigError: If the file is not a YAML mapping or holds invalid values.
    """
    path = Path(config_path)
    raw: dict = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ConfigError(f"Could not parse {config_path}: {exc}") from exc
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError(
                f"Invalid config file format: expected YAML mapping, got {type(loaded).__name__}"
            )
        raw = loaded or {}
    else:
        logger.debug("No config file at %s, using defaults", config_path)

    # --- Token ---
    tok_section = _section(raw, "token")
    policy_raw = tok_section.get("json_edit_policy", JsonEditPolicy.PERMISSIVE.value)
    try:
        policy = JsonEditPolicy(str(policy_raw).lower())
    except ValueError as exc:
        raise ConfigError(
            f"Invalid token.json_edit_policy: {policy_raw!r}. Use 'permissive' or 'strict'."
        ) from exc

    redecode = tok_section.get("redecode_parts", False)
    if not isinstance(redecode, bool):
        raise ConfigError("token.redecode_parts must be true or false")

    # --- Storage (env var > YAML) ---
    st_section = _section(raw, "storage")
    state_file = os.environ.get(ENV_STATE_FILE) or st_section.get("state_file") or StorageConfig.state_file
    if not isinstance(state_file, str):
        raise ConfigError("storage.state_file must be a string")

    # --- Logging ---
    log_section = _section(raw, "logging")
    log_dir = log_section.get("log_dir") or LoggingConfig.log_dir
    if not isinstance(log_dir, str):
        raise ConfigError("logging.log_dir must be a string")

    config = AppConfig(
        token=TokenConfig(json_edit_policy=policy, redecode_parts=redecode),
        storage=StorageConfig(state_file=state_file),
        logging=LoggingConfig(log_dir=log_dir),
    )
    logger.debug("Config loaded from %s (state file from %s)",
                 config_path,
                 "env" if os.environ.get(ENV_STATE_FILE) else "file")
    return config


# ---------------------------------------------------------------------------
# CLI override merging
# ---------------------------------------------------------------------------

def merge_cli_overrides(cfg: AppConfig, args) -> AppConfig:
    """Merge CLI arguments over loaded config, returning a new AppConfig.

    ``args`` may carry ``strict`` and ``verbose`` attributes from argparse.
    """
    token = cfg.token
    if getattr(args, "strict", False):
        token = replace(token, json_edit_policy=JsonEditPolicy.STRICT)
    return replace(cfg, token=token, verbose=getattr(args, "verbose", False))

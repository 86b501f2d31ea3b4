"""Locate, parse and cache the mailhdr configuration file.

What:
  Resolve ``config.yaml`` from an explicit path, the ``MAILHDR_CONFIG_PATH``
  environment variable or well-known locations, validate it, and keep the
  result cached for the formatters and parsers.

Why:
  Render width, continuation indent, the encoded-word charset and the
  duplicate-parameter policy are deployment choices. Reading them in one place
  keeps the core functions free of I/O while giving them consistent defaults.

How:
  Walk the candidate paths in precedence order, load the first existing file
  with :func:`yaml.safe_load`, and validate the mapping through
  :class:`~mailhdr.config.schema.MailhdrConfig`. When no file exists the
  schema defaults are used. Failures are wrapped in :class:`ConfigError` with
  the offending path.

Interfaces:
  :func:`load_config`, :func:`get_config`, :func:`reset_config`,
  :class:`ConfigLoadError`, :class:`ConfigError`.

Invariants:
  - An explicitly requested path that does not exist is an error; only the
    implicit locations may be absent.
  - The cache is replaced atomically; :func:`reset_config` forces the next
    :func:`get_config` call to reload.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple

import yaml

from ..utils.logging import get_logger
from .schema import MailhdrConfig, ValidationError


class ConfigLoadError(Exception):
    """Base error for configuration parsing or validation failures."""


class ConfigError(ConfigLoadError):
    """Raised when ``config.yaml`` cannot be read, parsed or validated."""


_CONFIG_ENV = "MAILHDR_CONFIG_PATH"
_DEFAULT_LOCATIONS: Tuple[Path, ...] = (
    Path("mailhdr.yaml"),
    Path("/etc/mailhdr/config.yaml"),
)
_CACHE: Optional[MailhdrConfig] = None

LOGGER = get_logger("mailhdr.config")


def _candidate_paths() -> Iterable[Path]:
    """Yield implicit configuration locations in priority order.

    Args:
      None.

    Yields:
      The environment override first, then the default locations, without
      duplicates.
    """

    seen: set[Path] = set()
    env_path = os.environ.get(_CONFIG_ENV)
    if env_path:
        candidate = Path(env_path).expanduser()
        seen.add(candidate)
        yield candidate
    for default in _DEFAULT_LOCATIONS:
        candidate = default.expanduser()
        if candidate not in seen:
            seen.add(candidate)
            yield candidate


def _parse_payload(text: str, source: Path) -> dict[str, Any]:
    try:
        payload = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"{source} must contain a mapping at the top-level")
    return payload


def _load_from_path(path: Path) -> MailhdrConfig:
    """Read and validate the configuration stored at ``path``.

    Raises:
      ConfigError: If the file is missing, unreadable, or invalid.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file missing: {path}") from exc
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file {path}: {exc}") from exc
    payload = _parse_payload(text, path)
    try:
        return MailhdrConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc


def load_config(path: Optional[Path] = None) -> MailhdrConfig:
    """Load the configuration and refresh the cache.

    What:
      Resolves and validates the active configuration document.

    Why:
      Callers such as the CLI may point at a specific file; library users rely
      on the environment variable or defaults.

    How:
      Uses ``path`` when given, otherwise the first existing candidate from
      :func:`_candidate_paths`; falls back to :class:`MailhdrConfig` defaults.

    Args:
      path: Explicit configuration file to load.

    Returns:
      The validated configuration, also stored in the module cache.

    Raises:
      ConfigError: If the selected file cannot be loaded.
    """

    global _CACHE
    if path is not None:
        config = _load_from_path(path.expanduser())
        source = str(path)
    else:
        config = None
        source = "defaults"
        for candidate in _candidate_paths():
            if candidate.exists():
                config = _load_from_path(candidate)
                source = str(candidate)
                break
        if config is None:
            config = MailhdrConfig()
    LOGGER.info("config_loaded", source=source)
    _CACHE = config
    return config


def get_config() -> MailhdrConfig:
    """Return the cached configuration, loading it on first use."""

    if _CACHE is None:
        return load_config()
    return _CACHE


def reset_config() -> None:
    """Forget the cached configuration."""

    global _CACHE
    _CACHE = None

"""Configuration management with XDG paths and precedence resolution.

This module handles all configuration for specscope:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.specscope/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **User config** -- an optional :class:`~specscope.models.ExplorerConfig`
  JSON file in the config directory.
* **Project config** -- an optional ``./specscope.json`` with the same
  shape, layered over the user config key by key.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project config, and user config into the final
  effective configuration.
* **Credential resolution** -- :func:`get_credential` and
  :func:`resolve_credential` read the static API credential from the
  environment or a file.

Configuration is read-only: specscope never writes these files.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specscope.exceptions import ConfigError
from specscope.models import ExplorerConfig

_APP_NAME = "specscope"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specscope.json"

ENV_SPEC = "SPECSCOPE_SPEC"
ENV_BASE_URL = "SPECSCOPE_BASE_URL"
ENV_API_KEY = "SPECSCOPE_API_KEY"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory (not created).

    On Linux/BSD: ``$XDG_CONFIG_HOME/specscope/`` (default ``~/.config/specscope/``).
    On macOS/Windows: ``~/.specscope/``.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    return _fallback_base_dir()


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/specscope/`` (default ``~/.local/share/specscope/``).
    On macOS/Windows: ``~/.specscope/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Config files ---


def _read_json(path: Path, label: str) -> Optional[dict[str, Any]]:
    """Read a JSON object from *path*, or ``None`` when the file is absent."""
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return data


def load_user_config() -> Optional[dict[str, Any]]:
    """Load ``config.json`` from the config directory.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    return _read_json(get_config_dir() / _CONFIG_FILENAME, "user config")


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./specscope.json``.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    return _read_json(Path.cwd() / _PROJECT_CONFIG_FILENAME, "project config")


# --- Precedence resolution ---


def resolve_config(
    cli_spec: Optional[str] = None,
    cli_base_url: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> ExplorerConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_spec``, ``cli_base_url``, ``cli_format``)
        2. Environment variables (``SPECSCOPE_SPEC``, ``SPECSCOPE_BASE_URL``)
        3. Project config (``./specscope.json``)
        4. User config (``~/.config/specscope/config.json``)
        5. Defaults

    Returns:
        The effective :class:`~specscope.models.ExplorerConfig`.

    Raises:
        ConfigError: If a config file is malformed or fails validation.
    """
    # 5 + 4 + 3. Defaults, then user config, then project config
    merged: dict[str, Any] = {}
    for layer in (load_user_config(), load_project_config()):
        if layer:
            merged.update(layer)
    try:
        config = ExplorerConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    # 2. Environment variables
    env_spec = os.environ.get(ENV_SPEC)
    if env_spec:
        config.spec = env_spec
    env_base_url = os.environ.get(ENV_BASE_URL)
    if env_base_url:
        config.base_url = env_base_url

    # 1. CLI flags (highest precedence)
    if cli_spec is not None:
        config.spec = cli_spec
    if cli_base_url is not None:
        config.base_url = cli_base_url
    if cli_format is not None:
        config.output.format = cli_format

    return config


# --- Credential source resolution ---


def get_credential(config: ExplorerConfig, cli_value: Optional[str] = None) -> Optional[str]:
    """Return the static API credential, or ``None`` when none is configured.

    Precedence: ``--api-key`` flag, ``SPECSCOPE_API_KEY``, then the
    configured ``credential_source``.

    Raises:
        ConfigError: If ``credential_source`` is set but cannot be resolved.
    """
    if cli_value:
        return cli_value
    env_value = os.environ.get(ENV_API_KEY)
    if env_value:
        return env_value
    if config.credential_source:
        return resolve_credential(config.credential_source)
    return None


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    raise ConfigError(f"Unknown credential source format: {source}")

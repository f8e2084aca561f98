"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for fizzy-cli:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.fizzy/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Config file** -- A single :class:`~fizzy_cli.models.Config` JSON file
  holding the base URL, credentials and default account. Managed via
  :func:`load_config` and :func:`save_config`.
* **Precedence resolution** -- :func:`resolve_settings` merges CLI flags,
  environment variables, the config file and built-in defaults into the
  immutable :class:`~fizzy_cli.models.Settings` used by every command.

Writes use a temp-file-then-rename strategy (:func:`_atomic_write`) and
owner-only permissions because the file holds credentials.
"""

from __future__ import annotations

import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from fizzy_cli.exceptions import ConfigError
from fizzy_cli.models import DEFAULT_BASE_URL, Config, Settings

logger = logging.getLogger(__name__)

_APP_NAME = "fizzy"
_CONFIG_FILENAME = "config.json"

ENV_CONFIG = "FIZZY_CONFIG"
ENV_BASE_URL = "FIZZY_BASE_URL"
ENV_TOKEN = "FIZZY_TOKEN"
ENV_ACCOUNT = "FIZZY_ACCOUNT"


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
    """Return the configuration directory. It is not created here.

    On Linux/BSD: ``$XDG_CONFIG_HOME/fizzy/`` (default ``~/.config/fizzy/``).
    On macOS/Windows: ``~/.fizzy/``.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    return _fallback_base_dir()


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/fizzy/`` (default ``~/.local/share/fizzy/``).
    On macOS/Windows: ``~/.fizzy/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def default_config_path() -> Path:
    """Return the config file path used when ``--config`` is not given.

    ``$FIZZY_CONFIG`` wins over the platform location.
    """
    env_path = os.environ.get(ENV_CONFIG, "").strip()
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / _CONFIG_FILENAME


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. Its mode is set to
    ``0o600`` before any content is written. On failure the temp file is
    removed and the original file is left untouched.
    """
    path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        os.chmod(tmp_path, 0o600)
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Config file ---


def load_config(path: Path) -> Config:
    """Load the config file.

    Args:
        path: Location of the JSON config file.

    Returns:
        The deserialised :class:`~fizzy_cli.models.Config`. A missing file
        yields an empty config.

    Raises:
        ConfigError: If the file cannot be read, is not JSON, or has the
            wrong shape.
    """
    if not path.is_file():
        return Config()
    try:
        text = path.read_text(encoding="utf-8")
        return Config.model_validate(json.loads(text))
    except OSError as exc:
        raise ConfigError(f"Cannot read config at {path}: {exc}") from exc
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_config(path: Path, config: Config) -> None:
    """Persist the config atomically with owner-only permissions.

    Args:
        path: Destination file.
        config: The configuration to save.

    Raises:
        ConfigError: If the file cannot be written.
    """
    data = config.model_dump(mode="json")
    try:
        _atomic_write(path, json.dumps(data, indent=2) + "\n")
    except OSError as exc:
        raise ConfigError(f"Cannot write config at {path}: {exc}") from exc
    logger.debug("Saved config to %s", path)


# --- Precedence resolution ---


def first_non_empty(*values: Optional[str]) -> str:
    """Return the first value that is not blank, stripped of whitespace."""
    for value in values:
        if value is not None and value.strip():
            return value.strip()
    return ""


def normalize_account(value: str) -> str:
    """Strip surrounding slashes so ``/897362094/`` and ``897362094`` are equal."""
    return value.strip().strip("/")


def resolve_settings(
    cli_base_url: Optional[str] = None,
    cli_token: Optional[str] = None,
    cli_account: Optional[str] = None,
    cli_config: Optional[str] = None,
) -> Settings:
    """Resolve the effective settings with the full precedence chain.

    Precedence (high to low) for base URL, token and account:
        1. CLI flags (``--base-url``, ``--token``, ``--account``)
        2. Environment variables (``FIZZY_BASE_URL``, ``FIZZY_TOKEN``,
           ``FIZZY_ACCOUNT``)
        3. Config file
        4. Defaults (base URL only)

    The session token is only ever read from the config file.

    Returns:
        An immutable :class:`~fizzy_cli.models.Settings`.

    Raises:
        ConfigError: If the config file exists but cannot be loaded.
    """
    path = Path(cli_config).expanduser() if first_non_empty(cli_config) else default_config_path()
    config = load_config(path)

    settings = Settings(
        base_url=first_non_empty(
            cli_base_url, os.environ.get(ENV_BASE_URL), config.base_url, DEFAULT_BASE_URL
        ),
        token=first_non_empty(cli_token, os.environ.get(ENV_TOKEN), config.token),
        session_token=first_non_empty(config.session_token),
        account=normalize_account(
            first_non_empty(cli_account, os.environ.get(ENV_ACCOUNT), config.account)
        ),
        config_path=str(path),
        config=config,
    )
    logger.debug("Resolved settings: base_url=%s account=%s", settings.base_url, settings.account)
    return settings

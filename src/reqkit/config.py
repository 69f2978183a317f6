"""Configuration management with XDG paths, atomic writes, and precedence resolution.

Request defaults (timeout, retry count, default headers) are stored as a
:class:`~reqkit.models.RequestConfig` and resolved with this precedence,
highest first:

1. CLI flags (``--timeout``, ``--retry``)
2. Environment variables (``REQKIT_TIMEOUT``, ``REQKIT_RETRY``)
3. Project config (``./reqkit.json``)
4. User config (``$XDG_CONFIG_HOME/reqkit/config.json``)
5. Defaults

:func:`config_options` turns the resolved config into options, so defaults
can be layered under request-specific options with
:meth:`~reqkit.client.request.Request.add_options`.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from reqkit.client.options import with_header, with_retry, with_timeout
from reqkit.client.request import Option
from reqkit.exceptions import ConfigError
from reqkit.models import RequestConfig

_APP_NAME = "reqkit"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "reqkit.json"

ENV_TIMEOUT = "REQKIT_TIMEOUT"
ENV_RETRY = "REQKIT_RETRY"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


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
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/reqkit/`` (default ``~/.config/reqkit/``).
    On macOS/Windows: ``~/.reqkit/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/reqkit/`` (default ``~/.local/share/reqkit/``).
    On macOS/Windows: ``~/.reqkit/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temp file lives in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX. It is removed on any failure.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

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
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
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


# --- User and project config ---


def _config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def _read_json(path: Path, label: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc


def load_config() -> RequestConfig:
    """Load the user config, or defaults if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = _config_path()
    if not path.is_file():
        return RequestConfig()
    data = _read_json(path, "config")
    try:
        return RequestConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_config(config: RequestConfig) -> None:
    """Persist the user config atomically."""
    data = config.model_dump(mode="json")
    _atomic_write(_config_path(), json.dumps(data, indent=2) + "\n")


def load_project_config() -> Optional[dict[str, Any]]:
    """Load ``./reqkit.json`` as a dict, or ``None`` if it does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or is not an object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    data = _read_json(path, "project config")
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def _env_value(name: str) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or None


def resolve_config(
    cli_timeout: Optional[float] = None,
    cli_retry: Optional[int] = None,
) -> RequestConfig:
    """Resolve the effective request defaults with the full precedence chain.

    Project config values override the user config key by key; headers are
    merged, with project headers winning.

    Raises:
        ConfigError: If any layer holds an invalid value.
    """
    merged = load_config().model_dump()

    project = load_project_config()
    if project is not None:
        project_headers = project.get("headers") or {}
        if not isinstance(project_headers, dict):
            raise ConfigError("Invalid project config: \"headers\" must be an object")
        headers = {**merged["headers"], **project_headers}
        merged.update(project)
        merged["headers"] = headers

    env_timeout = _env_value(ENV_TIMEOUT)
    if env_timeout is not None:
        merged["timeout"] = env_timeout
    env_retry = _env_value(ENV_RETRY)
    if env_retry is not None:
        merged["retry"] = env_retry

    if cli_timeout is not None:
        merged["timeout"] = cli_timeout
    if cli_retry is not None:
        merged["retry"] = cli_retry

    try:
        return RequestConfig.model_validate(merged)
    except ValueError as exc:
        raise ConfigError(f"Invalid request configuration: {exc}") from exc


def config_options(config: RequestConfig) -> list[Option]:
    """Translate *config* into options, headers first."""
    options: list[Option] = [with_header(k, v) for k, v in config.headers.items()]
    options.append(with_timeout(config.timeout))
    options.append(with_retry(config.retry))
    return options

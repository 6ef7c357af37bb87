"""Where clientgrant keeps its files, and how a profile becomes a grant.

On Linux and the BSDs the files follow the XDG base directories; elsewhere
everything lives under ``~/.clientgrant/``::

    <config dir>/config.json            GlobalConfig (default profile)
    <config dir>/profiles/<name>.json   one Profile per token endpoint
    <log dir>/crash-<timestamp>.log     tracebacks written by clientgrant.app

A profile records *where* the client id and secret come from (``env:``,
``file:`` or ``prompt``), never the values. :func:`grant_request_from_profile`
resolves those sources and hands back a
:class:`~clientgrant.models.GrantRequest` ready for the transport.
"""

from __future__ import annotations

import contextlib
import getpass
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional, TypeVar

from pydantic import BaseModel

from clientgrant.exceptions import ConfigError
from clientgrant.models import (
    PROFILE_NAME_RE,
    ClientCredentials,
    GlobalConfig,
    GrantRequest,
    Profile,
)

_APP_NAME = "clientgrant"
PROFILE_ENV_VAR = "CLIENTGRANT_PROFILE"

_ModelT = TypeVar("_ModelT", bound=BaseModel)


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, xdg_default: str, *parts: str) -> Path:
    """Return (and create) ``<base>/clientgrant/<parts>``.

    *xdg_default* is relative to the home directory and only used when
    *xdg_var* is unset. Non-XDG platforms share ``~/.clientgrant``.
    """
    if _is_xdg_platform():
        base = Path(os.environ.get(xdg_var) or Path.home() / xdg_default)
        root = base / _APP_NAME
    else:
        root = Path.home() / f".{_APP_NAME}"
    path = root.joinpath(*parts)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/clientgrant`` or ``~/.clientgrant``."""
    return _app_dir("XDG_CONFIG_HOME", ".config")


def get_profiles_dir() -> Path:
    return _app_dir("XDG_CONFIG_HOME", ".config", "profiles")


def get_log_dir() -> Path:
    """``$XDG_DATA_HOME/clientgrant/logs`` or ``~/.clientgrant/logs``."""
    return _app_dir("XDG_DATA_HOME", ".local/share", "logs")


# --- JSON files ---


def _atomic_write(path: Path, text: str) -> None:
    """Replace *path* with *text*; readers see the old file or the new one, never half."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise


def _read_model(path: Path, model: type[_ModelT], label: str) -> _ModelT:
    try:
        return model.model_validate_json(path.read_bytes())
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc


def _write_model(path: Path, value: BaseModel) -> None:
    _atomic_write(path, value.model_dump_json(indent=2) + "\n")


def load_global_config() -> GlobalConfig:
    """Read ``config.json``; a missing file means defaults.

    Raises:
        ConfigError: If the file is not valid JSON or fails validation.
    """
    path = get_config_dir() / "config.json"
    if not path.is_file():
        return GlobalConfig()
    return _read_model(path, GlobalConfig, "global config")


def save_global_config(config: GlobalConfig) -> None:
    _write_model(get_config_dir() / "config.json", config)


# --- Profiles ---


def _profile_path(name: str) -> Path:
    if not PROFILE_NAME_RE.fullmatch(name):
        raise ConfigError(f"Invalid profile name {name!r}")
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    """Names of all saved profiles, sorted."""
    return sorted(path.stem for path in get_profiles_dir().glob("*.json") if path.is_file())


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


def load_profile(name: str) -> Profile:
    """Load the profile saved as ``profiles/<name>.json``.

    Raises:
        ConfigError: If *name* is not a valid profile name, the file is
            missing, or its content does not validate.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    return _read_model(path, Profile, f"profile '{name}'")


def save_profile(profile: Profile) -> None:
    _write_model(_profile_path(profile.name), profile)


def delete_profile(name: str) -> None:
    """Remove a saved profile.

    Raises:
        ConfigError: If the profile does not exist.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    path.unlink()


def resolve_profile(cli_profile: Optional[str] = None) -> Optional[Profile]:
    """Load the profile a command should use, or ``None`` if none is selected.

    The first of these that names a profile wins: the ``--profile`` flag,
    ``$CLIENTGRANT_PROFILE``, ``default_profile`` in the global config.
    With none of them set and ``auto_select_single_profile`` on, a lone
    saved profile is used.

    Raises:
        ConfigError: If the selected profile cannot be loaded.
    """
    config = load_global_config()
    name = cli_profile or os.environ.get(PROFILE_ENV_VAR) or config.default_profile

    if name is None and config.auto_select_single_profile:
        saved = list_profiles()
        if len(saved) == 1:
            name = saved[0]

    return load_profile(name) if name is not None else None


# --- Credentials ---


def resolve_credential(source: str, label: str = "Credential") -> str:
    """Read one credential value from its source descriptor.

    ``env:NAME`` reads an environment variable, ``file:PATH`` reads a file
    (``~`` expanded, surrounding whitespace stripped) and ``prompt`` asks on
    the terminal without echoing, using *label* as the prompt text.

    Raises:
        ConfigError: If the source is unknown or yields no value.
    """
    kind, _, target = source.partition(":")

    if kind == "env" and target:
        value = os.environ.get(target)
        if value is None:
            raise ConfigError(f"Environment variable '{target}' is not set (source: {source})")
        return value

    if kind == "file" and target:
        path = Path(target).expanduser()
        try:
            return path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            raise ConfigError(f"Credential file not found: {path} (source: {source})") from None
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(f"Cannot prompt for {label.lower()}: stdin is not a TTY")
        return getpass.getpass(f"{label}: ")

    raise ConfigError(f"Unknown credential source format: {source}")


def resolve_client_credentials(profile: Profile) -> Optional[ClientCredentials]:
    """Resolve both credential sources of *profile*; ``None`` if it has none."""
    if profile.client_id_source is None or profile.client_secret_source is None:
        return None
    return ClientCredentials(
        client_id=resolve_credential(profile.client_id_source, "Client id"),
        client_secret=resolve_credential(profile.client_secret_source, "Client secret"),
    )


def grant_request_from_profile(
    profile: Profile, scope: Optional[str] = None
) -> GrantRequest:
    """The :class:`~clientgrant.models.GrantRequest` described by *profile*.

    *scope*, when given, replaces ``profile.scope``.
    """
    return GrantRequest(
        endpoint=profile.token_url,
        scope=scope if scope is not None else profile.scope,
        credentials=resolve_client_credentials(profile),
    )

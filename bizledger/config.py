"""Configuration file management for bizledger."""

import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from bizledger.domain.errors import UnauthenticatedError

OWNER_ENV_VAR = "BIZLEDGER_OWNER"

BACKENDS = ("sqlite", "memory")

DEFAULT_CONFIG: dict[str, Any] = {
    "backend": "sqlite",
    "log_level": "WARNING",
}


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "bizledger" / "config.toml"


def create_default_config(config_path: Path | None = None, owner: str | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
        owner: Optional owner id to store in the file.
    """
    config = dict(DEFAULT_CONFIG)
    if owner:
        config["owner"] = owner
    save_config(config, config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def load_settings(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration merged over the defaults.

    A missing config file yields the defaults.

    Raises:
        ValueError: If the configured backend is unknown.
    """
    settings = dict(DEFAULT_CONFIG)
    try:
        settings.update(load_config(config_path))
    except FileNotFoundError:
        pass

    if settings["backend"] not in BACKENDS:
        raise ValueError(f"Unknown backend {settings['backend']!r} (expected one of: {', '.join(BACKENDS)})")
    return settings


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def resolve_owner(explicit: str | None, settings: dict[str, Any]) -> str:
    """Resolve the owner for this invocation.

    Order: explicit value, then the BIZLEDGER_OWNER environment variable,
    then the config file's `owner` key.

    Raises:
        UnauthenticatedError: If no source provides a non-blank owner.
    """
    for candidate in (explicit, os.environ.get(OWNER_ENV_VAR), settings.get("owner")):
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    raise UnauthenticatedError(f"No owner configured (use --owner, set {OWNER_ENV_VAR}, or add 'owner' to the config)")

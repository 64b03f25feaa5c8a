"""Configuration management for Jellyresume."""

from __future__ import annotations

import configparser
import os
import re
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class JellyfinConfig(BaseModel):
    """Jellyfin server configuration."""

    url: str | None = None
    api_key: str | None = None
    user_id: str | None = None


class OptionsConfig(BaseModel):
    """General options configuration."""

    timeout: float = 30.0
    similar_limit: int = 12
    log_errors: bool = True  # Append fetch failures to jellyresume_errors.log


class AppConfig(BaseModel):
    """Application configuration."""

    jellyfin: JellyfinConfig = Field(default_factory=JellyfinConfig)
    options: OptionsConfig = Field(default_factory=OptionsConfig)


# Global config instance
_config: AppConfig | None = None
_config_path: Path | None = None  # Track where config was loaded from


def get_exe_directory() -> Path:
    """Get the directory containing the executable (or script).

    Handles both normal Python execution and PyInstaller bundles.
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).parent
    return Path.cwd()


def get_config_paths() -> list[Path]:
    """Get list of config file paths to search, in priority order.

    Search order:
    1. Exe directory
    2. Current working directory
    3. User home directory (~/.jellyresume/)
    4. YAML files in the current and home directories

    Returns:
        List of paths to check for config files.
    """
    paths = []

    exe_dir = get_exe_directory()
    home_dir = Path.home() / ".jellyresume"

    paths.append(exe_dir / "jellyresume.ini")

    cwd = Path.cwd()
    if cwd != exe_dir:  # Avoid duplicates
        paths.append(cwd / "jellyresume.ini")

    paths.append(home_dir / "jellyresume.ini")

    paths.append(cwd / "config.yaml")
    paths.append(cwd / "config.yml")
    paths.append(home_dir / "config.yaml")
    paths.append(home_dir / "config.yml")

    return paths


def find_config_file() -> Path | None:
    """Find the first existing config file."""
    for path in get_config_paths():
        if path.exists():
            return path
    return None


def _expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and $VAR syntax. Unset variables expand to "".
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")

        def replace(match: re.Match[str]) -> str:
            var_name = match.group(1) or match.group(2)
            return os.environ.get(var_name, "")

        return pattern.sub(replace, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


def _parse_bool(value: str) -> bool:
    """Parse a boolean value from a string (true/false/yes/no/1/0/on/off)."""
    return value.lower() in ("true", "yes", "1", "on")


def _load_ini_config(path: Path) -> dict[str, Any]:
    """Load configuration from INI file.

    Args:
        path: Path to INI config file.

    Returns:
        Dictionary structure matching AppConfig schema.
    """
    parser = configparser.ConfigParser()
    parser.read(path, encoding="utf-8")

    config: dict[str, Any] = {}

    if parser.has_section("jellyfin"):
        jellyfin = {
            "url": parser.get("jellyfin", "url", fallback=None),
            "api_key": parser.get("jellyfin", "api_key", fallback=None),
            "user_id": parser.get("jellyfin", "user_id", fallback=None),
        }
        # Remove None values
        config["jellyfin"] = {k: v for k, v in jellyfin.items() if v}

    if parser.has_section("options"):
        options: dict[str, Any] = {}
        if parser.has_option("options", "log_errors"):
            options["log_errors"] = _parse_bool(parser.get("options", "log_errors"))
        if parser.has_option("options", "timeout"):
            try:
                options["timeout"] = float(parser.get("options", "timeout"))
            except ValueError:
                pass  # Keep default
        if parser.has_option("options", "similar_limit"):
            try:
                options["similar_limit"] = int(parser.get("options", "similar_limit"))
            except ValueError:
                pass  # Keep default
        if options:
            config["options"] = options

    return config


def _load_yaml_config(path: Path) -> dict[str, Any]:
    """Load configuration from YAML file."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from file.

    Supports both INI (.ini/.cfg) and YAML (.yaml/.yml) formats.
    Environment variables are expanded in all values.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        Loaded configuration, or defaults when no file exists.
    """
    global _config, _config_path

    if path is None:
        path = find_config_file()

    if path is None or not path.exists():
        _config = AppConfig()
        _config_path = None
        return _config

    if path.suffix in (".ini", ".cfg"):
        raw_config = _load_ini_config(path)
    else:
        raw_config = _load_yaml_config(path)

    expanded_config = _expand_env_vars(raw_config)

    _config = AppConfig.model_validate(expanded_config)
    _config_path = path
    return _config


def get_config_path() -> Path | None:
    """Get the path to the currently loaded config file, or None for defaults."""
    return _config_path


def get_config() -> AppConfig:
    """Get the current configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def has_valid_config() -> bool:
    """Check that a config file exists and has url, api_key and user_id set."""
    if find_config_file() is None:
        return False

    cfg = get_config()
    return bool(cfg.jellyfin.url and cfg.jellyfin.api_key and cfg.jellyfin.user_id)


def reset_config() -> None:
    """Reset the cached configuration.

    Useful for testing or when config file changes.
    """
    global _config, _config_path
    _config = None
    _config_path = None


def get_config_dir() -> Path:
    """Get the user config directory, creating it if needed."""
    config_dir = Path.home() / ".jellyresume"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def save_default_config(
    path: Path | None = None,
    url: str = "",
    api_key: str = "",
    user_id: str = "",
) -> Path:
    """Save a default INI config file.

    Args:
        path: Where to save. Defaults to ./jellyresume.ini.
        url: Jellyfin server URL (optional, falls back to env var).
        api_key: Jellyfin API key (optional, falls back to env var).
        user_id: Jellyfin user ID (optional, falls back to env var).

    Returns:
        Path to saved config file.
    """
    if path is None:
        path = Path.cwd() / "jellyresume.ini"

    url_value = url or "${JELLYFIN_URL}"
    api_key_value = api_key or "${JELLYFIN_API_KEY}"
    user_id_value = user_id or "${JELLYFIN_USER_ID}"

    default_config = f"""\
# Jellyresume Configuration
# You can use environment variables with ${{VAR}} syntax

[jellyfin]
# Jellyfin server URL (e.g., http://192.168.1.100:8096)
url = {url_value}
# API key from Dashboard > API Keys
api_key = {api_key_value}
# User whose watch progress is used to pick the episode to continue
user_id = {user_id_value}

[options]
# Request timeout in seconds
timeout = 30
# Number of similar items to show
similar_limit = 12
# Append fetch failures to jellyresume_errors.log
log_errors = true
"""

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(default_config)

    return path

"""Configuration management using pydantic-settings.

This module provides configuration loading with the following precedence:
1. Environment variables (JOIN_BOARD_* prefix)
2. Global config file (~/.config/join-board/config.toml)
3. Built-in defaults (lowest priority)
"""

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STORE_URL = "https://join-6786d-default-rtdb.europe-west1.firebasedatabase.app"


def get_config_path() -> Path:
    """Get the global config file path (XDG compliant).

    Returns:
        Path to config file:
        - Linux/macOS: ~/.config/join-board/config.toml
        - Windows: %APPDATA%/join-board/config.toml
    """
    if os.name == "nt":  # Windows
        base = Path(os.environ.get("APPDATA", Path.home()))
    else:  # Linux/macOS
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "join-board" / "config.toml"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Environment variables use JOIN_BOARD_ prefix:
    - JOIN_BOARD_STORE_BASE_URL
    - JOIN_BOARD_STORE_AUTH_TOKEN
    - JOIN_BOARD_LOG_LEVEL
    etc.
    """

    model_config = SettingsConfigDict(
        env_prefix="JOIN_BOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote document store
    store_base_url: str = Field(default=DEFAULT_STORE_URL, description="Root URL of the document store")
    store_auth_token: SecretStr | None = Field(default=None, description="Auth token sent as ?auth= (optional)")
    store_timeout_seconds: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")

    # Local session cache
    session_cache_path: str = Field(
        default="~/.cache/join-board/session.db",
        description="SQLite file holding the advisory session snapshot",
    )

    # Guest account
    guest_email: str = Field(default="guest@example.com", description="Email of the shared guest account")
    guest_user_id: str = Field(default="guest", description="User id of the shared guest account")

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "console"] = Field(
        default="json",
        description="Log output format",
    )
    log_file: str | None = Field(default=None, description="Log file path (optional)")

    metrics_enabled: bool = Field(default=False, description="Expose Prometheus metrics")


def load_toml_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        path: Path to config file (uses default if None)

    Returns:
        Configuration dictionary (empty if file doesn't exist)
    """
    config_path = path or get_config_path()
    if config_path.exists():
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    return {}


def flatten_toml_config(toml_config: dict[str, Any]) -> dict[str, Any]:
    """Flatten nested TOML config to flat dictionary for Settings.

    Args:
        toml_config: Nested TOML configuration

    Returns:
        Flattened configuration dictionary
    """
    overrides: dict[str, Any] = {}

    if "store" in toml_config:
        for key in ["base_url", "auth_token", "timeout_seconds"]:
            if key in toml_config["store"]:
                overrides[f"store_{key}"] = toml_config["store"][key]

    if "session" in toml_config and "cache_path" in toml_config["session"]:
        overrides["session_cache_path"] = toml_config["session"]["cache_path"]

    if "guest" in toml_config:
        if "email" in toml_config["guest"]:
            overrides["guest_email"] = toml_config["guest"]["email"]
        if "user_id" in toml_config["guest"]:
            overrides["guest_user_id"] = toml_config["guest"]["user_id"]

    if "server" in toml_config:
        for key in ["log_level", "log_format", "log_file", "metrics_enabled"]:
            if key in toml_config["server"]:
                overrides[key] = toml_config["server"][key]

    return overrides


def load_settings_with_toml(config_path: Path | None = None) -> Settings:
    """Load settings with TOML config as base, env vars as override.

    Args:
        config_path: Optional path to TOML config file

    Returns:
        Settings instance with merged configuration
    """
    overrides = flatten_toml_config(load_toml_config(config_path))
    # pydantic-settings gives init kwargs priority over the environment,
    # so only keep TOML values that no env var already sets.
    env_names = {name.upper() for name in os.environ}
    overrides = {
        key: value for key, value in overrides.items() if f"JOIN_BOARD_{key.upper()}" not in env_names
    }
    return Settings(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance (cached)
    """
    return load_settings_with_toml()

"""
Configuration management and singleton pattern.

This module provides the main configuration loading and management interface,
implementing a singleton pattern to ensure configuration is loaded only once.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Tuple

from ..models.config import AppConfig
from ..validation import handle_config_error, ErrorSeverity
from .loader import load_main_config
from .validators import validate_app_config

logger = logging.getLogger(__name__)

# Environment variable that points to an alternative config.toml.
CONFIG_ENV_VAR = "GAYACODE_CONFIG"

# --- Global Singleton for Configuration ---

_CONFIG: Optional[AppConfig] = None

# Default location of the configuration file, relative to this script's location.
_DEFAULT_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"

# Explicitly selected configuration file (set_config_path or the environment).
_CONFIG_FILE_PATH: Optional[Path] = None


def set_config_path(config_path: Optional[Path]) -> None:
    """
    Set a custom configuration file path.

    Passing None restores the default lookup. The cached configuration is
    dropped so that the next get_config() call reloads it.
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = Path(config_path) if config_path is not None else None
    _CONFIG = None
    logger.info(f"Configuration path set to: {config_path}")


def clear_config_cache() -> None:
    """Clear the cached configuration, forcing a reload on next access."""
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def _resolve_config_path() -> Tuple[Path, bool]:
    """Return the config path to use and whether it was explicitly requested."""
    if _CONFIG_FILE_PATH is not None:
        return _CONFIG_FILE_PATH, True
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path), True
    return _DEFAULT_CONFIG_FILE_PATH, False


def _load_config(config_path: Path, explicit: bool) -> AppConfig:
    """
    Load and validate the application configuration.

    A missing default file yields the built-in defaults; a missing file that
    was explicitly requested is an error.

    Raises:
        FileNotFoundError: If an explicitly requested file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    if not explicit and not config_path.exists():
        logger.info(f"No configuration file at {config_path}, using built-in defaults")
        return validate_app_config({})

    try:
        config_data = load_main_config(config_path)
        app_config = validate_app_config(config_data)
        logger.info(f"Successfully loaded configuration from {config_path}")
        return app_config
    except FileNotFoundError as e:
        handle_config_error(
            error=e,
            context="loading configuration file",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise
    except Exception as e:
        handle_config_error(
            error=e,
            context="processing configuration",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def get_config() -> AppConfig:
    """
    Get the global application configuration, loading it if necessary.

    Returns:
        The singleton AppConfig instance
    """
    global _CONFIG
    if _CONFIG is None:
        config_path, explicit = _resolve_config_path()
        _CONFIG = _load_config(config_path, explicit)
    return _CONFIG


def is_config_loaded() -> bool:
    """Check if configuration has been loaded and cached."""
    return _CONFIG is not None


def get_config_info() -> dict:
    """
    Get information about the current configuration state.

    Returns:
        Dictionary with configuration metadata
    """
    config_path, explicit = _resolve_config_path()
    return {
        "config_loaded": is_config_loaded(),
        "config_path": str(config_path),
        "config_path_explicit": explicit,
        "config_file_exists": config_path.exists(),
    }

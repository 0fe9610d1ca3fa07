"""
Configuration management for the gayacode package.

This module provides a clean interface for loading, validating, and accessing
configuration data from a TOML file with singleton pattern management.
"""

from .manager import (
    CONFIG_ENV_VAR,
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    set_config_path,
)
from .loader import load_main_config, load_toml_file
from .validators import (
    validate_analyzer_config,
    validate_app_config,
    validate_monitor_config,
    validate_output_config,
    validate_runner_config,
)

__all__ = [
    # Main interface
    "CONFIG_ENV_VAR",
    "get_config",
    "set_config_path",
    "clear_config_cache",
    "is_config_loaded",
    "get_config_info",
    # Advanced interface
    "load_toml_file",
    "load_main_config",
    "validate_analyzer_config",
    "validate_app_config",
    "validate_monitor_config",
    "validate_output_config",
    "validate_runner_config",
]

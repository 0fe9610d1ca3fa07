"""
Validation and error handling for the gayacode package.

This module provides input validation, the analyzer's exception taxonomy and
the error handling helpers shared across the application.
"""

from .exceptions import (
    ErrorSeverity,
    GayaCodeError,
    ProcessGoneError,
    SamplingError,
    SpawnError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_subprocess_error,
)
from .validators import (
    validate_boolean,
    validate_enum_choice,
    validate_path_exists,
    validate_positive_float,
    validate_positive_integer,
    validate_script_path,
)

__all__ = [
    # Exceptions
    "ErrorSeverity",
    "GayaCodeError",
    "ProcessGoneError",
    "SamplingError",
    "SpawnError",
    "ValidationError",
    # Handlers
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    "handle_subprocess_error",
    # Validators
    "validate_boolean",
    "validate_enum_choice",
    "validate_path_exists",
    "validate_positive_float",
    "validate_positive_integer",
    "validate_script_path",
]

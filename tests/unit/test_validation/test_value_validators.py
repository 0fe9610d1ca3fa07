"""
Unit tests for the value validators and error handling helpers.
"""

import logging
import math
from unittest.mock import Mock

import pytest

from gayacode.validation import (
    ErrorSeverity,
    ProcessGoneError,
    SamplingError,
    SpawnError,
    ValidationError,
    handle_cli_error,
    handle_error,
    validate_boolean,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
    validate_script_path,
)


@pytest.mark.unit
class TestNumberValidators:
    """Test cases for integer and float validation."""

    def test_positive_integer_accepts_numeric_strings(self):
        assert validate_positive_integer("42") == 42

    def test_positive_integer_rejects_bool(self):
        with pytest.raises(ValidationError):
            validate_positive_integer(True)

    def test_positive_integer_bounds(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_positive_integer(1, min_value=2, field_name="monitor.max_timeline_samples")
        assert exc_info.value.field_name == "monitor.max_timeline_samples"

        with pytest.raises(ValidationError):
            validate_positive_integer(11, max_value=10)

    def test_positive_float_exclusive_min(self):
        assert validate_positive_float(0.0) == 0.0
        with pytest.raises(ValidationError):
            validate_positive_float(0.0, exclusive_min=True)

    def test_positive_float_rejects_nan_and_garbage(self):
        with pytest.raises(ValidationError):
            validate_positive_float(math.nan)
        with pytest.raises(ValidationError):
            validate_positive_float("fast")

    def test_positive_float_max(self):
        with pytest.raises(ValidationError):
            validate_positive_float(61.0, max_value=60.0)


@pytest.mark.unit
class TestOtherValidators:
    """Test cases for path, choice and boolean validation."""

    def test_script_path_resolves_existing_file(self, write_script):
        script = write_script("print('hi')\n")
        assert validate_script_path(script) == script.resolve()

    def test_script_path_missing(self, temp_dir):
        with pytest.raises(ValidationError) as exc_info:
            validate_script_path(temp_dir / "missing.py")
        assert "does not exist" in str(exc_info.value)

    def test_script_path_directory(self, temp_dir):
        with pytest.raises(ValidationError) as exc_info:
            validate_script_path(temp_dir)
        assert "not a regular file" in str(exc_info.value)

    def test_enum_choice_case_insensitive_returns_canonical_spelling(self):
        assert validate_enum_choice("HTML", ["html", "json"], case_sensitive=False) == "html"

    def test_enum_choice_rejects_unknown(self):
        with pytest.raises(ValidationError):
            validate_enum_choice("pdf", ["html", "json"])

    def test_boolean_requires_real_bool(self):
        assert validate_boolean(False) is False
        with pytest.raises(ValidationError):
            validate_boolean("yes")


@pytest.mark.unit
class TestErrorHandling:
    """Test cases for the exception taxonomy and handlers."""

    def test_process_gone_is_a_sampling_error(self):
        error = ProcessGoneError("gone", pid=7)
        assert isinstance(error, SamplingError)
        assert error.pid == 7

    def test_spawn_error_keeps_target(self):
        assert SpawnError("nope", target="/tmp/x.py").target == "/tmp/x.py"

    def test_handle_error_reraises_by_default(self):
        with pytest.raises(RuntimeError):
            handle_error(RuntimeError("boom"), "testing")

    def test_handle_error_logs_with_severity(self):
        logger = Mock(spec=logging.Logger)
        handle_error(RuntimeError("boom"), "testing", severity=ErrorSeverity.WARNING,
                     reraise=False, logger=logger)
        logger.warning.assert_called_once()
        assert "testing" in logger.warning.call_args[0][0]

    def test_handle_cli_error_exits_with_code(self):
        logger = Mock(spec=logging.Logger)
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(ValueError("bad"), "parsing", exit_code=3, logger=logger)
        assert exc_info.value.code == 3
        logger.error.assert_called_once()

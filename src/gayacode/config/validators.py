"""
Configuration validation utilities.

This module turns the raw TOML tables into validated configuration dataclasses.
Missing keys fall back to the dataclass defaults.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from ..models.config import (
    AnalyzerConfig,
    AppConfig,
    MonitorConfig,
    OutputConfig,
    RunnerConfig,
)
from ..validation import (
    ValidationError,
    validate_boolean,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ["html", "json"]
PARQUET_COMPRESSIONS = ["snappy", "gzip", "brotli", "lz4", "zstd"]


def validate_analyzer_config(analyzer_data: Dict[str, Any]) -> AnalyzerConfig:
    """
    Validate and create an AnalyzerConfig from the `[analyzer]` table.

    Raises:
        ValidationError: If validation fails
    """
    defaults = AnalyzerConfig()

    emission_factor = validate_positive_float(
        analyzer_data.get("emission_factor", defaults.emission_factor),
        exclusive_min=True,
        field_name="analyzer.emission_factor",
    )
    cpu_power_coefficient = validate_positive_float(
        analyzer_data.get("cpu_power_coefficient", defaults.cpu_power_coefficient),
        field_name="analyzer.cpu_power_coefficient",
    )
    memory_power_coefficient = validate_positive_float(
        analyzer_data.get("memory_power_coefficient", defaults.memory_power_coefficient),
        field_name="analyzer.memory_power_coefficient",
    )
    base_power_kw = validate_positive_float(
        analyzer_data.get("base_power_kw", defaults.base_power_kw),
        field_name="analyzer.base_power_kw",
    )
    max_runtime_seconds = validate_positive_float(
        analyzer_data.get("max_runtime_seconds", defaults.max_runtime_seconds),
        exclusive_min=True,
        max_value=86400.0,  # 1 day
        field_name="analyzer.max_runtime_seconds",
    )
    sampling_interval_seconds = validate_positive_float(
        analyzer_data.get("sampling_interval_seconds", defaults.sampling_interval_seconds),
        min_value=0.001,  # 1ms minimum
        max_value=60.0,
        field_name="analyzer.sampling_interval_seconds",
    )
    if sampling_interval_seconds >= max_runtime_seconds:
        raise ValidationError(
            "analyzer.sampling_interval_seconds must be shorter than "
            "analyzer.max_runtime_seconds",
            field_name="analyzer.sampling_interval_seconds",
            value=sampling_interval_seconds,
        )

    return AnalyzerConfig(
        emission_factor=emission_factor,
        cpu_power_coefficient=cpu_power_coefficient,
        memory_power_coefficient=memory_power_coefficient,
        base_power_kw=base_power_kw,
        max_runtime_seconds=max_runtime_seconds,
        sampling_interval_seconds=sampling_interval_seconds,
    )


def validate_runner_config(runner_data: Dict[str, Any]) -> RunnerConfig:
    """
    Validate and create a RunnerConfig from the `[runner]` table.

    Raises:
        ValidationError: If validation fails
    """
    defaults = RunnerConfig()

    interpreter = runner_data.get("interpreter", defaults.interpreter)
    if interpreter is not None and not isinstance(interpreter, str):
        raise ValidationError(
            "runner.interpreter must be a string",
            field_name="runner.interpreter",
            value=interpreter,
        )

    env_marker_name = runner_data.get("env_marker_name", defaults.env_marker_name)
    if not isinstance(env_marker_name, str) or not env_marker_name.strip() or "=" in env_marker_name:
        raise ValidationError(
            "runner.env_marker_name must be a non-empty variable name",
            field_name="runner.env_marker_name",
            value=env_marker_name,
        )

    env_marker_value = runner_data.get("env_marker_value", defaults.env_marker_value)
    if not isinstance(env_marker_value, str):
        raise ValidationError(
            "runner.env_marker_value must be a string",
            field_name="runner.env_marker_value",
            value=env_marker_value,
        )

    terminate_grace_seconds = validate_positive_float(
        runner_data.get("terminate_grace_seconds", defaults.terminate_grace_seconds),
        min_value=0.01,
        max_value=300.0,
        field_name="runner.terminate_grace_seconds",
    )
    capture_output = validate_boolean(
        runner_data.get("capture_output", defaults.capture_output),
        field_name="runner.capture_output",
    )

    return RunnerConfig(
        interpreter=interpreter,
        env_marker_name=env_marker_name.strip(),
        env_marker_value=env_marker_value,
        terminate_grace_seconds=terminate_grace_seconds,
        capture_output=capture_output,
    )


def validate_monitor_config(monitor_data: Dict[str, Any]) -> MonitorConfig:
    """
    Validate and create a MonitorConfig from the `[monitor]` table.

    Raises:
        ValidationError: If validation fails
    """
    max_timeline_samples = validate_positive_integer(
        monitor_data.get("max_timeline_samples", MonitorConfig().max_timeline_samples),
        min_value=2,
        max_value=10_000_000,
        field_name="monitor.max_timeline_samples",
    )
    return MonitorConfig(max_timeline_samples=max_timeline_samples)


def validate_output_config(output_data: Dict[str, Any]) -> OutputConfig:
    """
    Validate and create an OutputConfig from the `[output]` table.

    Raises:
        ValidationError: If validation fails
    """
    defaults = OutputConfig()

    default_dir = output_data.get("default_dir", str(defaults.default_dir))
    if not isinstance(default_dir, str) or not default_dir.strip():
        raise ValidationError(
            "output.default_dir must be a non-empty string",
            field_name="output.default_dir",
            value=default_dir,
        )

    output_format = validate_enum_choice(
        output_data.get("format", defaults.format),
        choices=OUTPUT_FORMATS,
        field_name="output.format",
        case_sensitive=False,
    )
    compression = validate_enum_choice(
        output_data.get("compression", defaults.compression),
        choices=PARQUET_COMPRESSIONS,
        field_name="output.compression",
    )
    open_browser = validate_boolean(
        output_data.get("open_browser", defaults.open_browser),
        field_name="output.open_browser",
    )

    return OutputConfig(
        default_dir=Path(default_dir),
        format=output_format,
        compression=compression,
        open_browser=open_browser,
    )


def validate_app_config(config_data: Dict[str, Any]) -> AppConfig:
    """
    Validate a whole parsed config.toml.

    Raises:
        ValidationError: If any section fails validation
    """
    for section in ("analyzer", "runner", "monitor", "output"):
        if not isinstance(config_data.get(section, {}), dict):
            raise ValidationError(
                f"[{section}] must be a table",
                field_name=section,
                value=config_data.get(section),
            )

    app_config = AppConfig(
        analyzer=validate_analyzer_config(config_data.get("analyzer", {})),
        runner=validate_runner_config(config_data.get("runner", {})),
        monitor=validate_monitor_config(config_data.get("monitor", {})),
        output=validate_output_config(config_data.get("output", {})),
    )
    logger.debug(f"Validated configuration: {app_config}")
    return app_config

"""
Configuration data models.

This module contains the configuration structures loaded from `config.toml`.
Every field carries the default used when the key (or the whole file) is absent.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class AnalyzerConfig:
    """
    Settings of the analysis itself, from the `[analyzer]` table.
    """

    # g CO2 emitted per kWh of electricity.
    emission_factor: float = 400.0
    # kW drawn per 1% of CPU.
    cpu_power_coefficient: float = 0.00008
    # kW drawn per MB of resident memory.
    memory_power_coefficient: float = 0.0000003
    # Estimated constant system overhead in kW (0.1 W).
    base_power_kw: float = 0.0001
    # Deadline after which the target is terminated.
    max_runtime_seconds: float = 60.0
    # Seconds between two resource samples.
    sampling_interval_seconds: float = 0.05


@dataclass
class RunnerConfig:
    """
    How targets are launched, from the `[runner]` table.
    """

    # Interpreter used to run the target. None selects the current Python
    # interpreter; an empty string executes the target directly.
    interpreter: Optional[str] = None
    # Environment variable that tells the target it runs under analysis.
    env_marker_name: str = "GAYACODE_ENV"
    env_marker_value: str = "gayacode_analysis"
    # Seconds between SIGTERM and SIGKILL when terminating the target.
    terminate_grace_seconds: float = 5.0
    # Capture stdout/stderr of the target.
    capture_output: bool = True


@dataclass
class MonitorConfig:
    """
    Resource monitor settings, from the `[monitor]` table.
    """

    # Upper bound of samples kept in a timeline (one hour at 50ms).
    max_timeline_samples: int = 72000


@dataclass
class OutputConfig:
    """
    Report output settings, from the `[output]` table.
    """

    default_dir: Path = Path("./gayacode-report")
    # "html" or "json".
    format: str = "html"
    # Parquet compression of the timeline file.
    compression: str = "snappy"
    open_browser: bool = True


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    analyzer: AnalyzerConfig = field(default_factory=AnalyzerConfig)
    runner: RunnerConfig = field(default_factory=RunnerConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

"""
Energy and CO2 estimation.

Energy is estimated from the average CPU load and resident memory of a run,
plus a constant system overhead, integrated over the run's duration.
"""

from dataclasses import dataclass

from ..models.config import AnalyzerConfig

BYTES_PER_MB = 1024 * 1024
SECONDS_PER_HOUR = 3600.0


@dataclass(frozen=True)
class CalculationSettings:
    """Coefficients of the energy model."""

    # g CO2 per kWh.
    emission_factor: float = 400.0
    # kW per 1% CPU.
    cpu_power_coefficient: float = 0.00008
    # kW per MB of resident memory.
    memory_power_coefficient: float = 0.0000003
    # kW, drawn for the whole run.
    base_power_kw: float = 0.0001

    @classmethod
    def from_config(cls, analyzer_config: AnalyzerConfig) -> "CalculationSettings":
        return cls(
            emission_factor=analyzer_config.emission_factor,
            cpu_power_coefficient=analyzer_config.cpu_power_coefficient,
            memory_power_coefficient=analyzer_config.memory_power_coefficient,
            base_power_kw=analyzer_config.base_power_kw,
        )


def bytes_to_mb(value: float) -> float:
    return value / BYTES_PER_MB


def calculate_energy_kwh(
    avg_cpu: float,
    avg_memory_bytes: float,
    duration_seconds: float,
    settings: CalculationSettings = CalculationSettings(),
) -> float:
    """
    Estimate the energy consumed by a run.

    Args:
        avg_cpu: Average CPU percent over the run
        avg_memory_bytes: Average resident memory over the run
        duration_seconds: Wall-clock duration of the run
        settings: Power coefficients

    Returns:
        Energy in kWh (CPU + memory + base overhead)
    """
    hours = max(duration_seconds, 0.0) / SECONDS_PER_HOUR
    cpu_kwh = avg_cpu * settings.cpu_power_coefficient * hours
    memory_kwh = bytes_to_mb(avg_memory_bytes) * settings.memory_power_coefficient * hours
    base_kwh = settings.base_power_kw * hours
    return cpu_kwh + memory_kwh + base_kwh


def calculate_co2_grams(energy_kwh: float, emission_factor: float = 400.0) -> float:
    """CO2 emitted, in grams, for ``energy_kwh`` at ``emission_factor`` g/kWh."""
    return energy_kwh * emission_factor

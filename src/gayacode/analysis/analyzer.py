"""
Environmental analyzer.

The EnvironmentalAnalyzer runs a target through the ExecutionOrchestrator and
turns its outcome into an AnalysisResult: performance metrics, energy and CO2
estimates, an eco-score, equivalences, scaling projections and a smoothed
timeline.
"""

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..calculations import (
    CalculationSettings, bytes_to_mb, calculate_co2_grams, calculate_eco_score,
    calculate_energy_kwh, calculate_equivalences, calculate_scaling_projections,
    smooth_timeline
)
from ..config import get_config
from ..models.config import AppConfig
from ..models.execution import (
    Completed, ExecutionOutcome, ExecutionRequest, OutcomeStatus, Signaled,
    SpawnFailed, TimedOut
)
from ..models.results import AnalysisResult, PerformanceMetrics
from ..orchestration import ExecutionOrchestrator

logger = logging.getLogger(__name__)


class EnvironmentalAnalyzer:
    """
    Analyses the resource usage and environmental impact of one script.

    Settings come from the application configuration; the orchestrator can be
    injected for tests.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        orchestrator: Optional[ExecutionOrchestrator] = None,
    ):
        self.config = config or get_config()
        self.settings = CalculationSettings.from_config(self.config.analyzer)
        self.orchestrator = orchestrator or ExecutionOrchestrator.from_config(self.config)

    def build_request(self, target_path: Union[str, Path]) -> ExecutionRequest:
        """
        Build the execution request for ``target_path`` from configuration.

        Raises:
            ValidationError: If the configured runtime limits are inconsistent
        """
        analyzer_config = self.config.analyzer
        return ExecutionRequest(
            target_path=Path(target_path),
            max_runtime=analyzer_config.max_runtime_seconds,
            sampling_interval=analyzer_config.sampling_interval_seconds,
        )

    def analysis_settings(self) -> Dict[str, Any]:
        analyzer_config = self.config.analyzer
        return {
            "emission_factor": self.settings.emission_factor,
            "cpu_power_coefficient": self.settings.cpu_power_coefficient,
            "memory_power_coefficient": self.settings.memory_power_coefficient,
            "base_power_kw": self.settings.base_power_kw,
            "max_runtime_seconds": analyzer_config.max_runtime_seconds,
            "sampling_interval_seconds": analyzer_config.sampling_interval_seconds,
        }

    def analyze_sync(self, target_path: Union[str, Path]) -> AnalysisResult:
        return asyncio.run(self.analyze(target_path))

    async def analyze(self, target_path: Union[str, Path]) -> AnalysisResult:
        """
        Run and analyse ``target_path``.

        Args:
            target_path: Script to analyse

        Returns:
            The analysis result; check ``status`` to tell the four outcomes apart

        Raises:
            ValidationError: If the configured runtime limits are inconsistent
        """
        request = self.build_request(target_path)
        logger.info(f"Analysing {request.target_path}")

        outcome = await self.orchestrator.execute(request)
        result = self.build_result(request, outcome)

        if result.metrics:
            logger.info(
                f"Analysis of {result.script_name}: {result.metrics.energy_kwh:.3e} kWh, "
                f"{result.metrics.co2_grams:.3e} g CO2, eco-score {result.eco_score.overall:.1f} "
                f"({result.eco_score.grade.letter})"
            )
        return result

    def build_result(self, request: ExecutionRequest, outcome: ExecutionOutcome) -> AnalysisResult:
        """Derive an AnalysisResult from an execution outcome."""
        result = AnalysisResult(
            status=outcome.status,
            success=outcome.status == OutcomeStatus.COMPLETED,
            timestamp=datetime.now(timezone.utc).isoformat(),
            script_name=request.target_path.name,
            script_path=str(request.target_path),
            analysis_settings=self.analysis_settings(),
        )

        if isinstance(outcome, SpawnFailed):
            result.error = outcome.reason
            return result

        aggregate = outcome.aggregate
        duration = outcome.wall_clock_duration
        energy_kwh = calculate_energy_kwh(
            aggregate.average_cpu, aggregate.average_memory, duration, self.settings
        )
        co2_grams = calculate_co2_grams(energy_kwh, self.settings.emission_factor)

        result.metrics = PerformanceMetrics(
            execution_time_seconds=duration,
            peak_cpu=aggregate.peak_cpu,
            average_cpu=aggregate.average_cpu,
            peak_memory_mb=bytes_to_mb(aggregate.peak_memory),
            average_memory_mb=bytes_to_mb(aggregate.average_memory),
            energy_kwh=energy_kwh,
            co2_grams=co2_grams,
            samples=aggregate.sample_count,
        )
        result.timeline_frame = smooth_timeline(aggregate.timeline)
        result.eco_score = calculate_eco_score(energy_kwh, duration, aggregate.average_cpu)
        result.equivalences = calculate_equivalences(energy_kwh, co2_grams)
        result.scaling_projections = calculate_scaling_projections(energy_kwh, co2_grams)
        result.output = outcome.output

        if isinstance(outcome, Completed):
            result.exit_code = outcome.exit_code
        elif isinstance(outcome, Signaled):
            result.signal_name = outcome.signal_name
            result.error = f"Process terminated by signal {outcome.signal_name}"
        elif isinstance(outcome, TimedOut):
            result.error = f"Execution exceeded the maximum runtime of {request.max_runtime}s"

        return result

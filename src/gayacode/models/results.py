"""
Analysis result data models.

This module defines the structures that hold the derived figures of one
analysis: performance metrics, the eco-score, real-world equivalences and
scaling projections, gathered in a single AnalysisResult that the storage and
report layers consume.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import polars as pl

from .execution import OutcomeStatus, ProcessOutput


@dataclass(frozen=True)
class Grade:
    letter: str
    color: str


@dataclass(frozen=True)
class EcoScore:
    """Eco-score (0-100, higher is better) with its weighted components."""

    overall: float
    grade: Grade
    energy: float
    time: float
    cpu: float


@dataclass(frozen=True)
class Equivalence:
    """A real-world comparison of an energy or CO2 figure."""

    key: str
    value: float
    unit: str


@dataclass(frozen=True)
class ScalingProjection:
    """Energy and CO2 of a target executed ``scale`` times."""

    label: str
    scale: int
    energy_kwh: float
    co2_grams: float
    co2_kg: float
    # Hours a 100W machine would run on the same energy.
    total_hours: float
    yearly_energy_kwh: float
    yearly_co2_grams: float


@dataclass(frozen=True)
class PerformanceMetrics:
    """Resource and environmental figures of one run."""

    execution_time_seconds: float
    peak_cpu: float
    average_cpu: float
    peak_memory_mb: float
    average_memory_mb: float
    energy_kwh: float
    co2_grams: float
    samples: int


@dataclass
class AnalysisResult:
    """
    Complete result of analysing one script.

    ``success`` is only true for a run that completed before its deadline.
    Timed-out and signaled runs still carry metrics computed from the partial
    aggregate; a spawn failure carries only ``error``.
    """

    status: OutcomeStatus
    success: bool
    timestamp: str
    script_name: str
    script_path: str
    metrics: Optional[PerformanceMetrics] = None
    timeline_frame: Optional[pl.DataFrame] = None
    eco_score: Optional[EcoScore] = None
    equivalences: Dict[str, List[Equivalence]] = field(default_factory=dict)
    scaling_projections: List[ScalingProjection] = field(default_factory=list)
    exit_code: Optional[int] = None
    signal_name: Optional[str] = None
    output: Optional[ProcessOutput] = None
    error: Optional[str] = None
    analysis_settings: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable view of the result."""
        timeline = []
        if self.timeline_frame is not None:
            timeline = self.timeline_frame.to_dicts()

        return {
            "status": self.status.value,
            "success": self.success,
            "timestamp": self.timestamp,
            "script_name": self.script_name,
            "script_path": self.script_path,
            "metrics": asdict(self.metrics) if self.metrics else None,
            "timeline": timeline,
            "eco_score": asdict(self.eco_score) if self.eco_score else None,
            "equivalences": {
                group: [asdict(item) for item in items]
                for group, items in self.equivalences.items()
            },
            "scaling_projections": [asdict(p) for p in self.scaling_projections],
            "exit_code": self.exit_code,
            "signal_name": self.signal_name,
            "output": asdict(self.output) if self.output else None,
            "error": self.error,
            "analysis_settings": dict(self.analysis_settings),
        }

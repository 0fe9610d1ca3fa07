"""
GayaCode: resource and environmental-impact analysis of scripts.

The package runs a target program under a deadline while sampling its CPU and
memory use, then derives energy, CO2 and eco-score figures from the samples.

Main entry points:
- EnvironmentalAnalyzer: analyse one script end to end
- ExecutionOrchestrator: run and monitor one target, returning its outcome
"""

__version__ = "0.1.0"

from .analysis import EnvironmentalAnalyzer
from .models import (
    AnalysisResult,
    Completed,
    ExecutionOutcome,
    ExecutionRequest,
    OutcomeStatus,
    Signaled,
    SpawnFailed,
    TimedOut,
)
from .orchestration import ExecutionOrchestrator

__all__ = [
    "__version__",
    "AnalysisResult",
    "Completed",
    "EnvironmentalAnalyzer",
    "ExecutionOrchestrator",
    "ExecutionOutcome",
    "ExecutionRequest",
    "OutcomeStatus",
    "Signaled",
    "SpawnFailed",
    "TimedOut",
]

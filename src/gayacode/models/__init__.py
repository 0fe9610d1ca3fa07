"""
Data models for the analyzer.

Configuration Models:
- Analyzer, runner, monitor and output settings loaded from TOML

Execution Models:
- Execution requests, resource samples and aggregates
- The tagged execution outcome handed to the calculators

Result Models:
- Performance metrics, eco-score, equivalences and scaling projections
"""

from .config import AnalyzerConfig, AppConfig, MonitorConfig, OutputConfig, RunnerConfig
from .execution import (
    Aggregate,
    Completed,
    ExecutionOutcome,
    ExecutionRequest,
    ExecutionState,
    OutcomeStatus,
    ProcessExit,
    ProcessOutput,
    Sample,
    Signaled,
    SpawnFailed,
    TimedOut,
)
from .results import (
    AnalysisResult,
    EcoScore,
    Equivalence,
    Grade,
    PerformanceMetrics,
    ScalingProjection,
)

__all__ = [
    # Configuration
    "AnalyzerConfig",
    "AppConfig",
    "MonitorConfig",
    "OutputConfig",
    "RunnerConfig",
    # Execution
    "Aggregate",
    "Completed",
    "ExecutionOutcome",
    "ExecutionRequest",
    "ExecutionState",
    "OutcomeStatus",
    "ProcessExit",
    "ProcessOutput",
    "Sample",
    "Signaled",
    "SpawnFailed",
    "TimedOut",
    # Results
    "AnalysisResult",
    "EcoScore",
    "Equivalence",
    "Grade",
    "PerformanceMetrics",
    "ScalingProjection",
]

"""
Execution data models.

This module contains the records exchanged between the process runner, the
resource monitor and the execution orchestrator:

- ExecutionRequest: what to run and under which limits (caller supplied).
- Sample / Aggregate: the resource readings of one monitored run.
- ExecutionOutcome: the single tagged result of one ``execute`` call.

All times are in seconds and all memory figures are in bytes.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union

from ..validation import ValidationError, validate_positive_float


class OutcomeStatus(Enum):
    """Tag of an ExecutionOutcome variant."""
    COMPLETED = "completed"
    SIGNALED = "signaled"
    TIMED_OUT = "timed_out"
    SPAWN_FAILED = "spawn_failed"


class ExecutionState(Enum):
    """Lifecycle of a single execute call."""
    IDLE = "idle"
    SPAWNING = "spawning"
    RUNNING = "running"
    COMPLETING = "completing"
    TIMING_OUT = "timing_out"
    DONE = "done"


@dataclass(frozen=True)
class ExecutionRequest:
    """
    A request to run and monitor one target program.

    Attributes:
        target_path: Program (or script) to execute.
        max_runtime: Deadline in seconds after which the target is terminated.
        sampling_interval: Seconds between two resource samples.
    """

    target_path: Path
    max_runtime: float
    sampling_interval: float

    def __post_init__(self):
        object.__setattr__(self, "target_path", Path(self.target_path))
        max_runtime = validate_positive_float(
            self.max_runtime, exclusive_min=True, field_name="max_runtime"
        )
        sampling_interval = validate_positive_float(
            self.sampling_interval, exclusive_min=True, field_name="sampling_interval"
        )
        if sampling_interval >= max_runtime:
            raise ValidationError(
                f"sampling_interval ({sampling_interval}s) must be shorter than "
                f"max_runtime ({max_runtime}s)",
                field_name="sampling_interval",
                value=sampling_interval,
            )
        object.__setattr__(self, "max_runtime", max_runtime)
        object.__setattr__(self, "sampling_interval", sampling_interval)


@dataclass(frozen=True)
class Sample:
    """One resource reading of a running process."""

    # Seconds since monitoring started.
    elapsed_seconds: float
    # Percent of one CPU; may exceed 100 on multi-core saturation.
    cpu_percent: float
    # Resident set size.
    memory_bytes: int


@dataclass(frozen=True)
class Aggregate:
    """
    Peak/average statistics of one monitored run plus its timeline.

    ``sample_count`` counts every sample taken. When the timeline reached its
    memory bound some samples are not kept in ``timeline``; they are counted in
    ``dropped_samples`` so that ``sample_count == len(timeline) + dropped_samples``.
    """

    peak_cpu: float
    peak_memory: int
    average_cpu: float
    average_memory: float
    sample_count: int
    timeline: Tuple[Sample, ...] = ()
    dropped_samples: int = 0

    @classmethod
    def empty(cls) -> "Aggregate":
        """Aggregate of a run in which no sample was collected."""
        return cls(
            peak_cpu=0.0,
            peak_memory=0,
            average_cpu=0.0,
            average_memory=0.0,
            sample_count=0,
        )


@dataclass(frozen=True)
class ProcessOutput:
    """Captured standard streams of the target."""

    stdout: str = ""
    stderr: str = ""


@dataclass(frozen=True)
class ProcessExit:
    """How the subprocess terminated, as reported by the runner."""

    return_code: int
    signal_name: Optional[str] = None
    output: ProcessOutput = field(default_factory=ProcessOutput)

    @property
    def signaled(self) -> bool:
        return self.signal_name is not None


@dataclass(frozen=True)
class Completed:
    """The target exited on its own before the deadline."""

    exit_code: int
    aggregate: Aggregate
    wall_clock_duration: float
    pid: Optional[int] = None
    output: ProcessOutput = field(default_factory=ProcessOutput)
    status: OutcomeStatus = field(default=OutcomeStatus.COMPLETED, init=False)


@dataclass(frozen=True)
class Signaled:
    """The target was killed by a signal the orchestrator did not send."""

    signal_name: str
    aggregate: Aggregate
    wall_clock_duration: float
    pid: Optional[int] = None
    output: ProcessOutput = field(default_factory=ProcessOutput)
    status: OutcomeStatus = field(default=OutcomeStatus.SIGNALED, init=False)


@dataclass(frozen=True)
class TimedOut:
    """The deadline fired first and the target was terminated."""

    aggregate: Aggregate
    # Always equal to the requested maximum runtime.
    wall_clock_duration: float
    pid: Optional[int] = None
    output: ProcessOutput = field(default_factory=ProcessOutput)
    status: OutcomeStatus = field(default=OutcomeStatus.TIMED_OUT, init=False)


@dataclass(frozen=True)
class SpawnFailed:
    """The target could not be launched; nothing was monitored."""

    reason: str
    status: OutcomeStatus = field(default=OutcomeStatus.SPAWN_FAILED, init=False)


ExecutionOutcome = Union[Completed, Signaled, TimedOut, SpawnFailed]

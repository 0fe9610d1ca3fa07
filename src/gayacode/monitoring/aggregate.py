"""
Incremental aggregation of resource samples.

The AggregateBuilder is owned by exactly one monitoring loop. It keeps running
sums and maxima over every sample and a bounded, time-ordered timeline.
"""

import logging
from typing import List, Optional

from ..models.execution import Aggregate, Sample

logger = logging.getLogger(__name__)


class AggregateBuilder:
    """
    Accumulates samples into an Aggregate.

    The timeline is bounded by ``max_timeline_samples``. When the bound is
    reached the recorded timeline is decimated (every second entry is kept)
    and the recording stride doubles, so the timeline keeps spanning the whole
    run in temporal order. Peaks and averages always cover every sample.
    """

    def __init__(self, max_timeline_samples: Optional[int] = None):
        if max_timeline_samples is not None and max_timeline_samples < 2:
            raise ValueError("max_timeline_samples must be at least 2")
        self.max_timeline_samples = max_timeline_samples
        self._timeline: List[Sample] = []
        self._count = 0
        self._stride = 1
        self._cpu_total = 0.0
        self._memory_total = 0.0
        self._peak_cpu = 0.0
        self._peak_memory = 0

    @property
    def sample_count(self) -> int:
        return self._count

    def add(self, sample: Sample) -> None:
        """Record one sample."""
        self._count += 1
        self._cpu_total += sample.cpu_percent
        self._memory_total += sample.memory_bytes
        self._peak_cpu = max(self._peak_cpu, sample.cpu_percent)
        self._peak_memory = max(self._peak_memory, sample.memory_bytes)

        if (self._count - 1) % self._stride != 0:
            return

        if self.max_timeline_samples is not None and len(self._timeline) >= self.max_timeline_samples:
            self._timeline = self._timeline[::2]
            self._stride *= 2
            logger.debug(
                f"Timeline bound of {self.max_timeline_samples} samples reached, "
                f"recording every {self._stride}th sample from now on"
            )
            if (self._count - 1) % self._stride != 0:
                return

        self._timeline.append(sample)

    def build(self) -> Aggregate:
        """Return an immutable snapshot of everything recorded so far."""
        if self._count == 0:
            return Aggregate.empty()

        timeline = tuple(self._timeline)
        return Aggregate(
            peak_cpu=self._peak_cpu,
            peak_memory=self._peak_memory,
            average_cpu=self._cpu_total / self._count,
            average_memory=self._memory_total / self._count,
            sample_count=self._count,
            timeline=timeline,
            dropped_samples=self._count - len(timeline),
        )

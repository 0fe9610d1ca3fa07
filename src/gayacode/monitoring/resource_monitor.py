"""
Asynchronous resource monitor.

This module provides the ResourceMonitor, which polls one process on a fixed
interval while it runs and returns the aggregated samples once monitoring ends.
"""

import asyncio
import logging
from concurrent.futures import Executor
from typing import Optional

from ..collectors.base import AbstractSampler
from ..models.execution import Aggregate, Sample
from ..validation import ErrorSeverity, ProcessGoneError, handle_error
from .aggregate import AggregateBuilder

logger = logging.getLogger(__name__)


class ResourceMonitor:
    """
    Polls a process at a fixed interval and aggregates its resource usage.

    Monitoring is best-effort. The loop ends, returning what it has collected,
    on the first of:

    - the stop event being set (checked once per tick, never mid-sample);
    - the process disappearing, which is the normal end of a run;
    - any other sampling error, which is logged and absorbed.

    Nothing is raised to the caller; only the final Aggregate is observed.
    Sampler calls block on the OS process table, so they run in ``executor``.
    """

    def __init__(
        self,
        sampler: AbstractSampler,
        sampling_interval: float,
        max_timeline_samples: Optional[int] = None,
        executor: Optional[Executor] = None,
    ):
        """
        Initialize the resource monitor.

        Args:
            sampler: Sampler used for every reading
            sampling_interval: Seconds between two samples
            max_timeline_samples: Bound of the recorded timeline (None for unbounded)
            executor: Executor for the blocking sampler calls (default loop executor if None)
        """
        if sampling_interval <= 0:
            raise ValueError("sampling_interval must be positive")
        self.sampler = sampler
        self.sampling_interval = sampling_interval
        self.max_timeline_samples = max_timeline_samples
        self.executor = executor

    async def monitor(self, pid: int, stop_event: asyncio.Event) -> Aggregate:
        """
        Monitor ``pid`` until it exits, sampling fails, or ``stop_event`` is set.

        Returns:
            The aggregate of every sample collected (empty if none)
        """
        loop = asyncio.get_running_loop()
        builder = AggregateBuilder(self.max_timeline_samples)
        start_time = loop.time()
        end_reason = "stopped"

        logger.debug(f"Monitoring PID {pid} every {self.sampling_interval}s")

        try:
            while True:
                if await self._wait_for_stop(stop_event):
                    break

                try:
                    reading = await loop.run_in_executor(self.executor, self.sampler.sample, pid)
                except ProcessGoneError:
                    end_reason = "process exited"
                    break
                except Exception as e:
                    handle_error(
                        error=e,
                        context=f"sampling process {pid}",
                        severity=ErrorSeverity.WARNING,
                        reraise=False,
                        logger=logger
                    )
                    end_reason = "sampling error"
                    break

                builder.add(Sample(
                    elapsed_seconds=loop.time() - start_time,
                    cpu_percent=reading.cpu_percent,
                    memory_bytes=reading.memory_bytes,
                ))
        finally:
            self.sampler.forget(pid)

        aggregate = builder.build()
        logger.info(
            f"Monitoring of PID {pid} ended ({end_reason}) after "
            f"{aggregate.sample_count} samples"
        )
        return aggregate

    async def _wait_for_stop(self, stop_event: asyncio.Event) -> bool:
        """Sleep one interval; return True as soon as the stop event is set."""
        if stop_event.is_set():
            return True
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=self.sampling_interval)
        except asyncio.TimeoutError:
            return False
        return True

"""
Execution orchestrator.

The ExecutionOrchestrator runs one target under a deadline while a
ResourceMonitor samples it, and reduces the run to exactly one
ExecutionOutcome. It owns the executor threads, the monitor task and the
deadline race for the duration of a single ``execute`` call.
"""

import asyncio
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Callable, Optional

from ..collectors import AbstractSampler, PsutilSampler
from ..executor import ProcessRunner
from ..models.config import AppConfig, RunnerConfig
from ..models.execution import (
    Aggregate, Completed, ExecutionOutcome, ExecutionRequest, ExecutionState,
    ProcessExit, ProcessOutput, Signaled, SpawnFailed, TimedOut
)
from ..monitoring import ResourceMonitor
from ..validation import ErrorSeverity, SpawnError, handle_error

logger = logging.getLogger(__name__)

RunnerFactory = Callable[[Executor], ProcessRunner]


class ExecutionOrchestrator:
    """
    Coordinates the process runner, the resource monitor and the deadline.

    One call to ``execute`` goes through
    ``IDLE -> SPAWNING -> RUNNING -> COMPLETING | TIMING_OUT -> DONE``;
    the current step is exposed as ``state``. Spawn failures become a
    SpawnFailed outcome and a reached deadline always becomes TimedOut, even
    if the process exits right after termination was requested. No retries
    are attempted.
    """

    def __init__(
        self,
        sampler: Optional[AbstractSampler] = None,
        runner_config: Optional[RunnerConfig] = None,
        max_timeline_samples: Optional[int] = None,
        runner_factory: Optional[RunnerFactory] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            sampler: Resource sampler for the monitor (PsutilSampler if None)
            runner_config: Runner settings used by the default runner factory
            max_timeline_samples: Bound of the recorded timeline (None for unbounded)
            runner_factory: Callable building a ProcessRunner for a given executor
        """
        self.sampler = sampler or PsutilSampler()
        self.runner_config = runner_config or RunnerConfig()
        self.max_timeline_samples = max_timeline_samples
        self.runner_factory = runner_factory or self._default_runner_factory
        self.state = ExecutionState.IDLE
        self.runner: Optional[ProcessRunner] = None

    @classmethod
    def from_config(cls, config: AppConfig, sampler: Optional[AbstractSampler] = None) -> "ExecutionOrchestrator":
        return cls(
            sampler=sampler,
            runner_config=config.runner,
            max_timeline_samples=config.monitor.max_timeline_samples,
        )

    def _default_runner_factory(self, executor: Executor) -> ProcessRunner:
        return ProcessRunner.from_config(self.runner_config, executor=executor)

    def execute_sync(self, request: ExecutionRequest) -> ExecutionOutcome:
        """Run ``execute`` on a fresh event loop."""
        return asyncio.run(self.execute(request))

    async def execute(self, request: ExecutionRequest) -> ExecutionOutcome:
        """
        Run and monitor one target.

        Args:
            request: What to run, its deadline and its sampling interval

        Returns:
            Exactly one of Completed, Signaled, TimedOut or SpawnFailed

        Raises:
            RuntimeError: If another execute call is in progress on this instance
        """
        if self.state not in (ExecutionState.IDLE, ExecutionState.DONE):
            raise RuntimeError(f"Execution already in progress (state: {self.state.value})")

        self.state = ExecutionState.IDLE
        self.runner = None
        # Worker 1 waits for process completion, worker 2 runs sampler calls
        executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="GayaCodeExec")
        try:
            outcome = await self._execute(request, executor)
        finally:
            executor.shutdown(wait=True)
            self.state = ExecutionState.DONE

        logger.info(f"Execution of {request.target_path} finished: {outcome.status.value}")
        return outcome

    async def _execute(self, request: ExecutionRequest, executor: Executor) -> ExecutionOutcome:
        loop = asyncio.get_running_loop()

        self.state = ExecutionState.SPAWNING
        runner = self.runner_factory(executor)
        self.runner = runner
        spawn_started = loop.time()

        try:
            pid = await runner.start(request.target_path)
        except SpawnError as e:
            logger.error(f"Could not start {request.target_path}: {e}")
            return SpawnFailed(reason=str(e))

        self.state = ExecutionState.RUNNING
        logger.info(
            f"Monitoring PID {pid} with a {request.max_runtime}s deadline, "
            f"sampling every {request.sampling_interval}s"
        )

        stop_event = asyncio.Event()
        monitor = ResourceMonitor(
            sampler=self.sampler,
            sampling_interval=request.sampling_interval,
            max_timeline_samples=self.max_timeline_samples,
            executor=executor,
        )
        monitor_task = asyncio.create_task(monitor.monitor(pid, stop_event), name=f"monitor-{pid}")
        completion = asyncio.ensure_future(runner.wait())

        try:
            done, _ = await asyncio.wait({completion}, timeout=request.max_runtime)

            if completion in done:
                wall_clock_duration = loop.time() - spawn_started
                self.state = ExecutionState.COMPLETING
                process_exit = completion.result()
                aggregate = await self._stop_monitor(stop_event, monitor_task)
                return self._finished_outcome(process_exit, aggregate, wall_clock_duration, pid)

            self.state = ExecutionState.TIMING_OUT
            logger.warning(f"Deadline of {request.max_runtime}s reached, terminating PID {pid}")
            # Stop sampling while termination runs: the aggregate covers the run
            # up to the deadline, not the termination grace period.
            _, aggregate = await asyncio.gather(
                runner.terminate(),
                self._stop_monitor(stop_event, monitor_task),
            )
            await asyncio.wait({completion}, timeout=runner.terminate_grace_period)
            return TimedOut(
                aggregate=aggregate,
                wall_clock_duration=request.max_runtime,
                pid=pid,
                output=self._collected_output(completion),
            )
        finally:
            stop_event.set()
            if not monitor_task.done():
                await asyncio.wait({monitor_task})
            if not runner.has_exited:
                await runner.terminate()
            if not completion.done():
                completion.cancel()

    @staticmethod
    async def _stop_monitor(stop_event: asyncio.Event, monitor_task: "asyncio.Task[Aggregate]") -> Aggregate:
        """Signal the monitor loop to stop and take ownership of its aggregate."""
        stop_event.set()
        return await monitor_task

    @staticmethod
    def _finished_outcome(
        process_exit: ProcessExit,
        aggregate: Aggregate,
        wall_clock_duration: float,
        pid: int,
    ) -> ExecutionOutcome:
        if process_exit.signaled:
            logger.warning(f"PID {pid} was terminated by {process_exit.signal_name}")
            return Signaled(
                signal_name=process_exit.signal_name,
                aggregate=aggregate,
                wall_clock_duration=wall_clock_duration,
                pid=pid,
                output=process_exit.output,
            )
        logger.info(f"PID {pid} exited with code {process_exit.return_code} after {wall_clock_duration:.3f}s")
        return Completed(
            exit_code=process_exit.return_code,
            aggregate=aggregate,
            wall_clock_duration=wall_clock_duration,
            pid=pid,
            output=process_exit.output,
        )

    @staticmethod
    def _collected_output(completion: "asyncio.Future[ProcessExit]") -> ProcessOutput:
        """Output of a terminated process, empty if it could not be collected."""
        if not completion.done() or completion.cancelled():
            return ProcessOutput()
        error = completion.exception()
        if error is not None:
            handle_error(
                error=error,
                context="collecting output of terminated process",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger
            )
            return ProcessOutput()
        return completion.result().output

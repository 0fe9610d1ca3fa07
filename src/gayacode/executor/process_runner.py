"""
Asynchronous process runner for analysed targets.

This module provides a ProcessRunner that launches the target program as a
child process, exposes its PID as soon as it exists, resolves a single
completion signal when it exits and terminates it on request.
"""

import asyncio
import logging
import os
import shlex
import signal
import subprocess
import sys
from concurrent.futures import Executor
from pathlib import Path
from typing import List, Optional, Union

from ..models.config import RunnerConfig
from ..models.execution import ProcessExit, ProcessOutput
from ..validation import SpawnError, handle_error, handle_subprocess_error, ErrorSeverity

logger = logging.getLogger(__name__)


def signal_name_from_return_code(return_code: int) -> Optional[str]:
    """Map a negative Popen return code to a signal name (e.g. -9 -> 'SIGKILL')."""
    if return_code >= 0:
        return None
    try:
        return signal.Signals(-return_code).name
    except ValueError:
        return f"SIG{-return_code}"


class ProcessRunner:
    """
    Runs one target program as a monitored child process.

    The child gets its own session (and therefore its own process group) so
    that termination reaches any processes it spawns. Its environment is the
    parent's environment plus an analysis marker variable.

    A runner is single-use: ``start`` may be called once.
    """

    def __init__(
        self,
        interpreter: Optional[str] = None,
        env_marker_name: str = "GAYACODE_ENV",
        env_marker_value: str = "gayacode_analysis",
        terminate_grace_period: float = 5.0,
        capture_output: bool = True,
        executor: Optional[Executor] = None,
    ):
        """
        Initialize the process runner.

        Args:
            interpreter: Command used to run the target; None selects the current
                Python interpreter, an empty string executes the target directly
            env_marker_name: Name of the analysis marker environment variable
            env_marker_value: Value of the analysis marker environment variable
            terminate_grace_period: Seconds to wait after SIGTERM before SIGKILL
            capture_output: Capture stdout/stderr instead of discarding them
            executor: Executor for blocking process calls (default loop executor if None)
        """
        self.interpreter = interpreter
        self.env_marker_name = env_marker_name
        self.env_marker_value = env_marker_value
        self.terminate_grace_period = terminate_grace_period
        self.capture_output = capture_output
        self.executor = executor

        self.process: Optional[subprocess.Popen] = None
        self.command: Optional[List[str]] = None
        self._completion: Optional[asyncio.Future] = None
        self._terminate_requested = False

    @classmethod
    def from_config(cls, runner_config: RunnerConfig, executor: Optional[Executor] = None) -> "ProcessRunner":
        """Create a runner from the `[runner]` configuration."""
        return cls(
            interpreter=runner_config.interpreter,
            env_marker_name=runner_config.env_marker_name,
            env_marker_value=runner_config.env_marker_value,
            terminate_grace_period=runner_config.terminate_grace_seconds,
            capture_output=runner_config.capture_output,
            executor=executor,
        )

    @property
    def pid(self) -> Optional[int]:
        """PID of the child, available right after a successful start."""
        return self.process.pid if self.process else None

    @property
    def has_exited(self) -> bool:
        return self._completion is not None and self._completion.done()

    @property
    def terminate_requested(self) -> bool:
        return self._terminate_requested

    def build_command(self, target_path: Path) -> List[str]:
        """Return the argv used to launch ``target_path``."""
        if self.interpreter is None:
            return [sys.executable, str(target_path)]
        if not self.interpreter.strip():
            return [str(target_path)]
        return shlex.split(self.interpreter) + [str(target_path)]

    def build_environment(self) -> dict:
        env = os.environ.copy()
        env[self.env_marker_name] = self.env_marker_value
        return env

    async def start(self, target_path: Union[str, Path]) -> int:
        """
        Launch the target.

        Returns:
            PID of the child process

        Raises:
            SpawnError: If the target is missing or cannot be executed
            RuntimeError: If this runner was already started
        """
        if self.process is not None:
            raise RuntimeError("Process runner already started")

        target = Path(target_path)
        if not target.is_file():
            raise SpawnError(f"Target not found or not a file: {target}", target=str(target))

        self.command = self.build_command(target)
        loop = asyncio.get_running_loop()

        try:
            self.process = await loop.run_in_executor(self.executor, self._spawn_process, self.command)
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            handle_subprocess_error(
                error=e,
                command=shlex.join(self.command),
                severity=ErrorSeverity.ERROR,
                reraise=False,
                logger=logger
            )
            raise SpawnError(f"Failed to launch {target}: {e}", target=str(target)) from e

        self._completion = loop.run_in_executor(self.executor, self._wait_for_exit, self.process)
        logger.info(f"Started target {target} with PID {self.process.pid}")
        return self.process.pid

    def _spawn_process(self, command: List[str]) -> subprocess.Popen:
        """Start the child process (synchronous version for the executor)."""
        stream = subprocess.PIPE if self.capture_output else subprocess.DEVNULL
        return subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=stream,
            stderr=stream,
            env=self.build_environment(),
            text=True,
            errors="replace",
            start_new_session=hasattr(os, "setsid"),  # New process group
        )

    @staticmethod
    def _wait_for_exit(process: subprocess.Popen) -> ProcessExit:
        """Block until the child exits, draining its output (executor side)."""
        stdout, stderr = process.communicate()
        return_code = process.returncode
        return ProcessExit(
            return_code=return_code,
            signal_name=signal_name_from_return_code(return_code),
            output=ProcessOutput(stdout=stdout or "", stderr=stderr or ""),
        )

    async def wait(self) -> ProcessExit:
        """
        Wait for the child to exit.

        Every caller observes the same ProcessExit; cancelling one waiter does
        not affect the others.

        Raises:
            RuntimeError: If the runner was not started
        """
        if self._completion is None:
            raise RuntimeError("Process runner not started - call start() first")
        process_exit = await asyncio.shield(self._completion)
        return process_exit

    async def terminate(self) -> None:
        """
        Ask the child to terminate and wait until it is gone.

        Sends SIGTERM to the child's process group, escalating to SIGKILL after
        the grace period. Calling this before start, after the child exited or
        more than once is a no-op.
        """
        if self._completion is None or self._completion.done():
            return
        if self._terminate_requested:
            await asyncio.wait({self._completion})
            return

        self._terminate_requested = True
        pid = self.process.pid
        logger.info(f"Terminating target process {pid}")

        try:
            self._signal_process_group(kill=False)
            try:
                await asyncio.wait_for(asyncio.shield(self._completion), timeout=self.terminate_grace_period)
            except asyncio.TimeoutError:
                logger.warning(
                    f"Target process {pid} did not exit within "
                    f"{self.terminate_grace_period}s, sending SIGKILL"
                )
                self._signal_process_group(kill=True)
                await asyncio.shield(self._completion)
            logger.info(f"Target process {pid} terminated")
        except Exception as e:
            handle_error(
                error=e,
                context=f"terminating target process {pid}",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger
            )

    def _signal_process_group(self, kill: bool) -> None:
        """Signal the child's process group, falling back to the child alone."""
        process = self.process
        if hasattr(os, "killpg"):
            sig = signal.SIGKILL if kill else signal.SIGTERM
            try:
                os.killpg(process.pid, sig)
                return
            except ProcessLookupError:
                return
            except PermissionError:
                logger.debug(f"Cannot signal process group {process.pid}, signalling the process only")

        if kill:
            process.kill()
        else:
            process.terminate()

"""
Resource sampler implementation using the 'psutil' library.

This module provides the PsutilSampler class, which reads the CPU percentage
and resident memory (RSS) of a single process from the OS process table.
"""

import logging
import threading
import time
from typing import Dict, Tuple

import psutil

from ..validation import ProcessGoneError, SamplingError
from .base import AbstractSampler, ResourceReading

logger = logging.getLogger(__name__)


class PsutilSampler(AbstractSampler):
    """
    Samples CPU and RSS of a process with psutil.

    psutil computes ``cpu_percent`` relative to the previous call on the same
    ``psutil.Process`` object, so one handle is cached per PID. The first
    reading of a PID has no previous call to compare with; it reports the
    average CPU percent since the process was created instead, and primes the
    counter for the readings that follow.

    Zombie processes are treated as gone: their resources are already released
    and only the exit status is left to be reaped.
    """

    def __init__(self):
        self._processes: Dict[int, psutil.Process] = {}
        self._lock = threading.Lock()

    def _get_process(self, pid: int) -> Tuple[psutil.Process, bool]:
        """Return the cached handle of ``pid`` and whether it was just created."""
        with self._lock:
            process = self._processes.get(pid)
            if process is not None:
                return process, False
            process = psutil.Process(pid)
            self._processes[pid] = process
            return process, True

    @staticmethod
    def _lifetime_cpu_percent(process: psutil.Process) -> float:
        """CPU percent averaged over the whole life of ``process``."""
        cpu_times = process.cpu_times()
        lifetime = time.time() - process.create_time()
        if lifetime <= 0:
            return 0.0
        percent = (cpu_times.user + cpu_times.system) / lifetime * 100
        # Tick granularity of create_time can overstate very young processes;
        # one thread never uses more than one core.
        return min(percent, 100.0 * process.num_threads())

    def sample(self, pid: int) -> ResourceReading:
        """
        Take one reading of the given process.

        Raises:
            ProcessGoneError: If the process no longer exists or is a zombie
            SamplingError: If the process table could not be read
        """
        try:
            process, first_reading = self._get_process(pid)
            with process.oneshot():
                if process.status() == psutil.STATUS_ZOMBIE:
                    raise ProcessGoneError(f"Process {pid} is a zombie", pid=pid)
                if first_reading:
                    process.cpu_percent(interval=None)
                    cpu_percent = self._lifetime_cpu_percent(process)
                else:
                    cpu_percent = process.cpu_percent(interval=None)
                memory_bytes = process.memory_info().rss
        except psutil.NoSuchProcess as e:
            self.forget(pid)
            raise ProcessGoneError(f"Process {pid} no longer exists", pid=pid) from e
        except psutil.AccessDenied as e:
            raise SamplingError(f"Access denied while sampling process {pid}", pid=pid) from e
        except ProcessGoneError:
            self.forget(pid)
            raise

        logger.debug(f"Sampled PID {pid}: cpu={cpu_percent:.1f}% rss={memory_bytes}B")
        return ResourceReading(cpu_percent=max(0.0, cpu_percent), memory_bytes=max(0, memory_bytes))

    def forget(self, pid: int) -> None:
        with self._lock:
            self._processes.pop(pid, None)

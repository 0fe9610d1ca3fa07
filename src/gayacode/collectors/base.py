"""
Defines the base structures and abstract class for resource samplers.

This module provides:
- ResourceReading: one instantaneous (cpu%, memory bytes) reading.
- AbstractSampler: the interface every sampler implementation follows.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceReading:
    """
    Instantaneous resource usage of one process.

    Attributes:
        cpu_percent: CPU usage since the previous reading, in percent of one core.
        memory_bytes: Resident set size in bytes.
    """

    cpu_percent: float
    memory_bytes: int


class AbstractSampler(ABC):
    """
    Abstract base class for resource samplers.

    A sampler is called repeatedly from a single monitoring loop. It must raise
    ProcessGoneError when the process no longer exists and may raise any other
    exception for transient failures.
    """

    @abstractmethod
    def sample(self, pid: int) -> ResourceReading:
        """
        Take one reading of the given process.

        Raises:
            ProcessGoneError: If the process no longer exists
        """
        pass

    def forget(self, pid: int) -> None:
        """Release any per-process state kept for ``pid``."""
        pass

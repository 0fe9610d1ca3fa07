"""
Resource samplers for process monitoring.

A sampler returns one instantaneous (cpu%, memory bytes) reading for a process
id, or raises ProcessGoneError when that process no longer exists.
"""

from .base import AbstractSampler, ResourceReading
from .psutil_sampler import PsutilSampler

__all__ = [
    "AbstractSampler",
    "ResourceReading",
    "PsutilSampler",
]

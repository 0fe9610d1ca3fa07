"""
Integration tests for PsutilSampler against real processes.
"""

import subprocess
import sys
import time

import pytest

from gayacode.collectors import PsutilSampler


@pytest.fixture
def busy_process():
    """A single-threaded child spinning on one core."""
    process = subprocess.Popen([sys.executable, "-c", "while True: pass"])
    time.sleep(0.3)
    yield process
    process.kill()
    process.wait()


@pytest.mark.integration
class TestPsutilSamplerIntegration:
    """First-reading behaviour on a real CPU-bound process."""

    def test_first_readings_stay_within_one_core(self, busy_process):
        readings = []
        for _ in range(200):
            sampler = PsutilSampler()
            readings.append(sampler.sample(busy_process.pid).cpu_percent)
            sampler.forget(busy_process.pid)

        assert max(readings) <= 100.0
        # A spinning process has used most of a core since it started
        assert sum(readings) / len(readings) > 30.0
        assert readings.count(0.0) == 0

    def test_interval_readings_follow_the_first(self, busy_process):
        sampler = PsutilSampler()

        sampler.sample(busy_process.pid)
        time.sleep(0.2)
        reading = sampler.sample(busy_process.pid)

        assert reading.cpu_percent > 30.0

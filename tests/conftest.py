"""
Pytest configuration and shared fixtures for the GayaCode test suite.

This module provides common fixtures, target-script helpers and fake
collaborators for all test modules.
"""

import shutil
import sys
import tempfile
import textwrap
from pathlib import Path
from typing import Callable, List

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gayacode.collectors.base import AbstractSampler, ResourceReading  # noqa: E402
from gayacode.validation import ProcessGoneError  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as running real subprocesses")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def write_script(temp_dir) -> Callable[..., Path]:
    """Factory writing a Python target script into the temp directory."""

    def _write(body: str, name: str = "target.py") -> Path:
        script = temp_dir / name
        script.write_text(textwrap.dedent(body), encoding="utf-8")
        return script

    return _write


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "analyzer": {
            "emission_factor": 350.0,
            "cpu_power_coefficient": 0.00008,
            "memory_power_coefficient": 0.0000003,
            "base_power_kw": 0.0001,
            "max_runtime_seconds": 30.0,
            "sampling_interval_seconds": 0.02,
        },
        "runner": {
            "env_marker_name": "GAYACODE_ENV",
            "env_marker_value": "gayacode_analysis",
            "terminate_grace_seconds": 2.0,
            "capture_output": True,
        },
        "monitor": {
            "max_timeline_samples": 1000,
        },
        "output": {
            "default_dir": "./report",
            "format": "json",
            "compression": "zstd",
            "open_browser": False,
        },
    }


@pytest.fixture
def config_file(temp_dir, sample_config_data):
    """Write the sample configuration to a temporary config.toml."""
    import toml

    path = temp_dir / "config.toml"
    with open(path, "w") as f:
        toml.dump(sample_config_data, f)
    return path


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Reset the configuration singleton after each test."""
    yield

    from gayacode.config import clear_config_cache, set_config_path

    set_config_path(None)
    clear_config_cache()


# ============================================================================
# Fake Collaborators
# ============================================================================


class ScriptedSampler(AbstractSampler):
    """
    Sampler replaying a fixed list of readings.

    Entries may be ResourceReading instances or exceptions to raise. Once the
    script is exhausted the process is reported as gone.
    """

    def __init__(self, script: List):
        self.script = list(script)
        self.calls: List[int] = []
        self.forgotten: List[int] = []

    def sample(self, pid: int) -> ResourceReading:
        self.calls.append(pid)
        if not self.script:
            raise ProcessGoneError(f"Process {pid} no longer exists", pid=pid)
        entry = self.script.pop(0)
        if isinstance(entry, Exception):
            raise entry
        return entry

    def forget(self, pid: int) -> None:
        self.forgotten.append(pid)


class ConstantSampler(AbstractSampler):
    """Sampler returning the same reading until told the process is gone."""

    def __init__(self, cpu_percent: float = 10.0, memory_bytes: int = 1024 * 1024):
        self.reading = ResourceReading(cpu_percent=cpu_percent, memory_bytes=memory_bytes)
        self.calls = 0
        self.gone = False

    def sample(self, pid: int) -> ResourceReading:
        self.calls += 1
        if self.gone:
            raise ProcessGoneError(f"Process {pid} no longer exists", pid=pid)
        return self.reading


@pytest.fixture
def scripted_sampler():
    return ScriptedSampler


@pytest.fixture
def constant_sampler():
    return ConstantSampler()


def readings(*pairs) -> List[ResourceReading]:
    """Build readings from (cpu, memory_bytes) pairs."""
    return [ResourceReading(cpu_percent=cpu, memory_bytes=mem) for cpu, mem in pairs]


@pytest.fixture
def make_readings():
    return readings




# ============================================================================
# Result Fixtures
# ============================================================================


def build_analysis_result(outcome, target_path: Path = Path("/tmp/target.py")):
    """Derive an AnalysisResult from an outcome with default settings."""
    from unittest.mock import Mock

    from gayacode.analysis import EnvironmentalAnalyzer
    from gayacode.models import AppConfig, ExecutionRequest

    analyzer = EnvironmentalAnalyzer(config=AppConfig(), orchestrator=Mock())
    request = ExecutionRequest(target_path=target_path, max_runtime=60.0, sampling_interval=0.05)
    return analyzer.build_result(request, outcome)


@pytest.fixture
def sample_aggregate():
    from gayacode.models import Aggregate, Sample

    timeline = tuple(
        Sample(elapsed_seconds=0.05 * (i + 1), cpu_percent=cpu, memory_bytes=mem)
        for i, (cpu, mem) in enumerate(
            [(12.0, 8 * 1024 * 1024), (48.0, 12 * 1024 * 1024), (30.0, 10 * 1024 * 1024)]
        )
    )
    return Aggregate(
        peak_cpu=48.0,
        peak_memory=12 * 1024 * 1024,
        average_cpu=30.0,
        average_memory=10 * 1024 * 1024,
        sample_count=3,
        timeline=timeline,
    )


@pytest.fixture
def completed_result(sample_aggregate):
    """AnalysisResult of a run that exited 0 after 0.2s."""
    from gayacode.models import Completed, ProcessOutput

    outcome = Completed(
        exit_code=0,
        aggregate=sample_aggregate,
        wall_clock_duration=0.2,
        pid=4242,
        output=ProcessOutput(stdout="hello <world>\n", stderr=""),
    )
    return build_analysis_result(outcome)


@pytest.fixture
def spawn_failed_result():
    from gayacode.models import SpawnFailed

    return build_analysis_result(SpawnFailed(reason="Target not found or not a file: /tmp/target.py"))

"""
Unit tests for the aggregate builder.
"""

import pytest

from gayacode.models import Aggregate, Sample
from gayacode.monitoring import AggregateBuilder


def _sample(i, cpu=None, memory=None):
    return Sample(
        elapsed_seconds=i * 0.05,
        cpu_percent=float(i) if cpu is None else cpu,
        memory_bytes=i * 1000 if memory is None else memory,
    )


@pytest.mark.unit
class TestAggregateBuilder:
    """Test cases for AggregateBuilder."""

    def test_no_samples_gives_empty_aggregate(self):
        assert AggregateBuilder().build() == Aggregate.empty()

    def test_peaks_and_averages(self):
        builder = AggregateBuilder()
        for cpu, memory in [(10.0, 100), (50.0, 300), (30.0, 200)]:
            builder.add(Sample(elapsed_seconds=0.0, cpu_percent=cpu, memory_bytes=memory))

        aggregate = builder.build()

        assert aggregate.peak_cpu == 50.0
        assert aggregate.peak_memory == 300
        assert aggregate.average_cpu == pytest.approx(30.0)
        assert aggregate.average_memory == pytest.approx(200.0)
        assert aggregate.sample_count == 3
        assert len(aggregate.timeline) == 3
        assert aggregate.dropped_samples == 0

    def test_cpu_above_100_percent_is_kept(self):
        builder = AggregateBuilder()
        builder.add(_sample(1, cpu=250.0))
        assert builder.build().peak_cpu == 250.0

    def test_timeline_keeps_insertion_order(self):
        builder = AggregateBuilder()
        for i in range(10):
            builder.add(_sample(i))

        times = [s.elapsed_seconds for s in builder.build().timeline]
        assert times == sorted(times)

    def test_bound_below_two_is_rejected(self):
        with pytest.raises(ValueError):
            AggregateBuilder(max_timeline_samples=1)

    def test_bounded_timeline_is_decimated(self):
        builder = AggregateBuilder(max_timeline_samples=8)
        for i in range(100):
            builder.add(_sample(i))

        aggregate = builder.build()

        assert len(aggregate.timeline) <= 8
        assert aggregate.sample_count == 100
        assert aggregate.sample_count == len(aggregate.timeline) + aggregate.dropped_samples
        assert aggregate.timeline[0].elapsed_seconds == 0.0
        times = [s.elapsed_seconds for s in aggregate.timeline]
        assert times == sorted(times)
        # Statistics still cover every sample
        assert aggregate.peak_cpu == 99.0
        assert aggregate.average_cpu == pytest.approx(49.5)

    def test_decimated_timeline_spans_the_run(self):
        builder = AggregateBuilder(max_timeline_samples=4)
        for i in range(64):
            builder.add(_sample(i))

        timeline = builder.build().timeline

        # Last kept sample lies in the final quarter of the run
        assert timeline[-1].cpu_percent >= 48

    def test_sample_count_property(self):
        builder = AggregateBuilder(max_timeline_samples=2)
        for i in range(5):
            builder.add(_sample(i))
        assert builder.sample_count == 5

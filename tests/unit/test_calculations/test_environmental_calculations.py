"""
Unit tests for the energy, CO2, eco-score and projection calculations.
"""

import polars as pl
import pytest

from gayacode.calculations import (
    BYTES_PER_MB,
    CalculationSettings,
    calculate_co2_grams,
    calculate_eco_score,
    calculate_energy_kwh,
    calculate_equivalences,
    calculate_scaling_projections,
    get_grade,
    smooth_timeline,
)
from gayacode.models import AnalyzerConfig, Sample


@pytest.mark.unit
class TestEnergyModel:
    """Test cases for energy and CO2 estimation."""

    def test_one_hour_at_full_cpu(self):
        # 100% CPU for one hour with no memory: 0.008 kWh CPU + 0.0001 kWh base
        energy = calculate_energy_kwh(100.0, 0, 3600.0)
        assert energy == pytest.approx(0.0081)

    def test_memory_is_counted_in_megabytes(self):
        energy = calculate_energy_kwh(0.0, 100 * BYTES_PER_MB, 3600.0, CalculationSettings(base_power_kw=0.0))
        assert energy == pytest.approx(100 * 0.0000003)

    def test_zero_duration_is_zero_energy(self):
        assert calculate_energy_kwh(50.0, BYTES_PER_MB, 0.0) == 0.0

    def test_settings_from_config(self):
        settings = CalculationSettings.from_config(AnalyzerConfig(emission_factor=250.0, base_power_kw=0.0002))
        assert settings.emission_factor == 250.0
        assert settings.base_power_kw == 0.0002

    def test_co2(self):
        assert calculate_co2_grams(0.5, 400.0) == pytest.approx(200.0)


@pytest.mark.unit
class TestEcoScore:
    """Test cases for the eco-score."""

    def test_idle_instant_run_scores_100(self):
        score = calculate_eco_score(0.0, 0.0, 0.0)

        assert score.overall == pytest.approx(100.0)
        assert score.grade.letter == "A+"

    def test_components_and_weights(self):
        score = calculate_eco_score(energy_kwh=0.000002, duration_seconds=10.0, avg_cpu=50.0)

        assert score.energy == pytest.approx(80.0)
        assert score.time == pytest.approx(90.0)
        assert score.cpu == pytest.approx(50.0)
        assert score.overall == pytest.approx(80 * 0.4 + 90 * 0.3 + 50 * 0.3)
        assert score.grade.letter == "B"

    def test_components_never_go_negative(self):
        score = calculate_eco_score(energy_kwh=1.0, duration_seconds=500.0, avg_cpu=400.0)

        assert score.energy == score.time == score.cpu == 0.0
        assert score.overall == 0.0
        assert score.grade.letter == "F"

    @pytest.mark.parametrize(
        "score,letter,color",
        [
            (95, "A+", "#22c55e"),
            (80, "A", "#16a34a"),
            (79.9, "B", "#65a30d"),
            (60, "C", "#ca8a04"),
            (50, "D", "#ea580c"),
            (49.9, "F", "#dc2626"),
        ],
    )
    def test_grades(self, score, letter, color):
        grade = get_grade(score)
        assert (grade.letter, grade.color) == (letter, color)


@pytest.mark.unit
class TestEquivalencesAndScaling:
    """Test cases for equivalences and scaling projections."""

    def test_energy_equivalences(self):
        equivalences = {e.key: e.value for e in calculate_equivalences(0.015, 0.0)["energy"]}

        assert equivalences["smartphone_charges"] == pytest.approx(1.0)
        assert equivalences["led_bulb_hours"] == pytest.approx(15 / 9)
        assert equivalences["laptop_minutes"] == pytest.approx(15 * 60 / 65)
        assert equivalences["coffee_brewing"] == pytest.approx(0.015)

    def test_co2_equivalences(self):
        equivalences = {e.key: e.value for e in calculate_equivalences(0.0, 120.0)["co2"]}

        assert equivalences["car_distance"] == pytest.approx(1000.0)
        assert equivalences["breathing_time"] == pytest.approx(240.0)
        assert equivalences["flights"] == pytest.approx(4.8)
        assert equivalences["tree_absorption"] == pytest.approx(120.0 / (22000 / (365 * 24 * 3600)))

    def test_scaling_projections(self):
        projections = calculate_scaling_projections(0.001, 0.4)

        assert [p.scale for p in projections] == [1_000, 10_000, 100_000, 1_000_000]
        first = projections[0]
        assert first.label == "1K executions"
        assert first.energy_kwh == pytest.approx(1.0)
        assert first.co2_grams == pytest.approx(400.0)
        assert first.co2_kg == pytest.approx(0.4)
        assert first.total_hours == pytest.approx(10.0)
        assert first.yearly_energy_kwh == pytest.approx(365.0)
        assert first.yearly_co2_grams == pytest.approx(400.0 * 365)


@pytest.mark.unit
class TestSmoothTimeline:
    """Test cases for timeline smoothing."""

    def test_columns_and_trailing_mean(self):
        timeline = [
            Sample(elapsed_seconds=0.05 * (i + 1), cpu_percent=cpu, memory_bytes=mem)
            for i, (cpu, mem) in enumerate([(10.0, 1 * BYTES_PER_MB), (20.0, 2 * BYTES_PER_MB),
                                            (30.0, 3 * BYTES_PER_MB), (40.0, 4 * BYTES_PER_MB)])
        ]

        df = smooth_timeline(timeline)

        assert df.columns == ["time_seconds", "cpu", "memory_bytes", "memory_mb", "cpu_smooth", "memory_smooth"]
        assert df["cpu_smooth"].to_list() == pytest.approx([10.0, 20.0, 20.0, 30.0])
        assert df["memory_mb"].to_list() == pytest.approx([1.0, 2.0, 3.0, 4.0])
        assert df["memory_smooth"].to_list() == pytest.approx(
            [1 * BYTES_PER_MB, 2 * BYTES_PER_MB, 2 * BYTES_PER_MB, 3 * BYTES_PER_MB]
        )

    def test_empty_timeline(self):
        df = smooth_timeline(())

        assert df.is_empty()
        assert "cpu_smooth" in df.columns
        assert df.schema["memory_bytes"] == pl.Int64

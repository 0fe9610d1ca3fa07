"""
Unit tests for the human-readable formatters.
"""

import pytest

from gayacode.utils import (
    clamp,
    format_co2,
    format_duration,
    format_energy,
    format_number,
)


@pytest.mark.unit
class TestFormatters:
    """Test cases for unit formatting."""

    @pytest.mark.parametrize(
        "kwh,expected",
        [
            (0.0000005, "500.00 nWh"),
            (0.0005, "500.00 µWh"),
            (0.5, "500.00 mWh"),
            (2.5, "2.50 kWh"),
        ],
    )
    def test_format_energy(self, kwh, expected):
        assert format_energy(kwh) == expected

    @pytest.mark.parametrize(
        "grams,expected",
        [
            (0.0005, "500.00 µg"),
            (0.5, "500.00 mg"),
            (12.3456, "12.346 g"),
            (2500, "2.50 kg"),
        ],
    )
    def test_format_co2(self, grams, expected):
        assert format_co2(grams) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [(0.001234, "0.0012"), (0.5, "0.50"), (42.42, "42.4"), (12345.6, "12,346")],
    )
    def test_format_number(self, value, expected):
        assert format_number(value) == expected

    def test_format_duration(self):
        assert format_duration(0.25) == "250 ms"
        assert format_duration(3.456) == "3.46 s"

    def test_clamp(self):
        assert clamp(150, 0, 100) == 100
        assert clamp(-5, 0, 100) == 0
        assert clamp(42, 0, 100) == 42

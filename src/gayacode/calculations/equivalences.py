"""
Real-world equivalences and scaling projections of a run's footprint.
"""

from typing import Dict, List, Tuple

from ..models.results import Equivalence, ScalingProjection

# Wh per smartphone charge.
PHONE_CHARGE_WH = 15.0
LED_BULB_W = 9.0
LAPTOP_W = 65.0
COFFEE_MACHINE_W = 1000.0

# g CO2 per metre driven (120 g/km).
CAR_G_PER_METRE = 0.12
# g CO2 absorbed per second by one tree (22 kg/year).
TREE_G_PER_SECOND = 22000 / (365 * 24 * 3600)
# g CO2 exhaled per minute.
BREATHING_G_PER_MINUTE = 0.5
# g CO2 per hour of commercial flight.
FLIGHT_G_PER_HOUR = 90000.0

SCALES: List[Tuple[str, int]] = [
    ("1K executions", 1_000),
    ("10K executions", 10_000),
    ("100K executions", 100_000),
    ("1M executions", 1_000_000),
]
# Average machine draw used to express energy as running hours, in kW.
AVERAGE_MACHINE_KW = 0.1
DAYS_PER_YEAR = 365


def calculate_equivalences(energy_kwh: float, co2_grams: float) -> Dict[str, List[Equivalence]]:
    """Express a run's energy and CO2 as everyday quantities."""
    energy_wh = energy_kwh * 1000
    return {
        "energy": [
            Equivalence("smartphone_charges", energy_wh / PHONE_CHARGE_WH, "phone charges"),
            Equivalence("led_bulb_hours", energy_wh / LED_BULB_W, "hours of LED light"),
            Equivalence("laptop_minutes", energy_wh * 60 / LAPTOP_W, "minutes of laptop use"),
            Equivalence("coffee_brewing", energy_wh / COFFEE_MACHINE_W, "cups of coffee brewed"),
        ],
        "co2": [
            Equivalence("car_distance", co2_grams / CAR_G_PER_METRE, "meters driven by car"),
            Equivalence("tree_absorption", co2_grams / TREE_G_PER_SECOND, "seconds of tree absorption"),
            Equivalence(
                "breathing_time", co2_grams / BREATHING_G_PER_MINUTE, "minutes of human breathing"
            ),
            Equivalence("flights", co2_grams / FLIGHT_G_PER_HOUR * 3600, "seconds of commercial flight"),
        ],
    }


def calculate_scaling_projections(energy_kwh: float, co2_grams: float) -> List[ScalingProjection]:
    """Project a single run's footprint onto 1K to 1M executions."""
    projections = []
    for label, scale in SCALES:
        scaled_energy = energy_kwh * scale
        scaled_co2 = co2_grams * scale
        projections.append(ScalingProjection(
            label=label,
            scale=scale,
            energy_kwh=scaled_energy,
            co2_grams=scaled_co2,
            co2_kg=scaled_co2 / 1000,
            total_hours=scaled_energy / AVERAGE_MACHINE_KW,
            yearly_energy_kwh=scaled_energy * DAYS_PER_YEAR,
            yearly_co2_grams=scaled_co2 * DAYS_PER_YEAR,
        ))
    return projections

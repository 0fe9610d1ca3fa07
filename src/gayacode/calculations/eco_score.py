"""
Eco-score: a 0-100 rating of a run, higher is better.

The score is a weighted mean of three components (energy 40%, time 30%,
CPU 30%), each penalising its own figure linearly from 100 down to 0.
"""

from typing import List, Tuple

from ..models.results import EcoScore, Grade
from ..utils.formatters import clamp

ENERGY_WEIGHT = 0.4
TIME_WEIGHT = 0.3
CPU_WEIGHT = 0.3

# Energy is scaled for typical script sizes: 1e-5 kWh costs 100 points.
ENERGY_SCALE = 10_000_000

# (minimum score, letter, colour), highest first.
GRADE_THRESHOLDS: List[Tuple[float, str, str]] = [
    (90, "A+", "#22c55e"),
    (80, "A", "#16a34a"),
    (70, "B", "#65a30d"),
    (60, "C", "#ca8a04"),
    (50, "D", "#ea580c"),
]
FAILING_GRADE = Grade(letter="F", color="#dc2626")


def get_grade(score: float) -> Grade:
    for minimum, letter, color in GRADE_THRESHOLDS:
        if score >= minimum:
            return Grade(letter=letter, color=color)
    return FAILING_GRADE


def calculate_eco_score(energy_kwh: float, duration_seconds: float, avg_cpu: float) -> EcoScore:
    """
    Rate a run from its energy, duration and average CPU.

    Args:
        energy_kwh: Estimated energy of the run
        duration_seconds: Wall-clock duration of the run
        avg_cpu: Average CPU percent over the run

    Returns:
        The overall score (clamped to 0-100), its grade and its components
    """
    energy_score = max(0.0, 100 - energy_kwh * ENERGY_SCALE)
    time_score = max(0.0, 100 - duration_seconds)
    cpu_score = max(0.0, 100 - avg_cpu)

    overall = energy_score * ENERGY_WEIGHT + time_score * TIME_WEIGHT + cpu_score * CPU_WEIGHT
    overall = clamp(overall, 0.0, 100.0)

    return EcoScore(
        overall=overall,
        grade=get_grade(overall),
        energy=energy_score,
        time=time_score,
        cpu=cpu_score,
    )

"""
Environmental calculations for the gayacode package.

Pure functions deriving energy, CO2, eco-score, equivalences and scaling
projections from a run's aggregate, plus timeline smoothing for charts.
"""

from .eco_score import calculate_eco_score, get_grade
from .energy import (
    BYTES_PER_MB, CalculationSettings, bytes_to_mb,
    calculate_co2_grams, calculate_energy_kwh
)
from .equivalences import calculate_equivalences, calculate_scaling_projections
from .timeline import smooth_timeline

__all__ = [
    # Energy model
    "BYTES_PER_MB",
    "CalculationSettings",
    "bytes_to_mb",
    "calculate_energy_kwh",
    "calculate_co2_grams",
    # Scoring
    "calculate_eco_score",
    "get_grade",
    # Comparisons
    "calculate_equivalences",
    "calculate_scaling_projections",
    # Timeline
    "smooth_timeline",
]

"""
Human-readable formatting of analysis figures.
"""


def format_energy(kwh: float) -> str:
    """Format an energy in kWh with the most readable unit (nWh to kWh)."""
    if kwh < 0.000001:
        return f"{kwh * 1_000_000_000:.2f} nWh"
    if kwh < 0.001:
        return f"{kwh * 1_000_000:.2f} µWh"
    if kwh < 1:
        return f"{kwh * 1000:.2f} mWh"
    return f"{kwh:.2f} kWh"


def format_co2(grams: float) -> str:
    """Format a CO2 mass in grams with the most readable unit (µg to kg)."""
    if grams < 0.001:
        return f"{grams * 1_000_000:.2f} µg"
    if grams < 1:
        return f"{grams * 1000:.2f} mg"
    if grams < 1000:
        return f"{grams:.3f} g"
    return f"{grams / 1000:.2f} kg"


def format_number(value: float) -> str:
    """Format a number with a precision suited to its magnitude."""
    if value < 0.01:
        return f"{value:.4f}"
    if value < 1:
        return f"{value:.2f}"
    if value < 100:
        return f"{value:.1f}"
    return f"{round(value):,}"


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    return f"{seconds:.2f} s"


def clamp(value: float, minimum: float, maximum: float) -> float:
    return min(max(value, minimum), maximum)

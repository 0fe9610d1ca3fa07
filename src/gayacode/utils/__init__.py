"""
Utility helpers for the gayacode package.
"""

from .formatters import (
    clamp,
    format_co2,
    format_duration,
    format_energy,
    format_number,
)

__all__ = [
    "clamp",
    "format_co2",
    "format_duration",
    "format_energy",
    "format_number",
]

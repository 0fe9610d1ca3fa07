"""
Script analysis for the gayacode package.
"""

from .analyzer import EnvironmentalAnalyzer

__all__ = [
    "EnvironmentalAnalyzer",
]

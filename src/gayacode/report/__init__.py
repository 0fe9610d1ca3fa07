"""
Report generation for the gayacode package.
"""

from .dashboard import REPORT_FILENAME, DashboardGenerator

__all__ = [
    "DashboardGenerator",
    "REPORT_FILENAME",
]

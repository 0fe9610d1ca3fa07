"""
Result storage for the gayacode package.

Timelines are written as compressed Parquet through Polars; result documents
are written as JSON next to them.
"""

from .base import DataStorage
from .manager import RESULT_FILENAME, TIMELINE_FILENAME, ResultStorageManager
from .parquet_storage import ParquetStorage

__all__ = [
    "DataStorage",
    "ParquetStorage",
    "ResultStorageManager",
    "RESULT_FILENAME",
    "TIMELINE_FILENAME",
]

"""
Timeline preparation for storage and charts.
"""

from typing import Sequence

import polars as pl

from ..models.execution import Sample
from .energy import BYTES_PER_MB

SMOOTHING_WINDOW = 3

TIMELINE_SCHEMA = {
    "time_seconds": pl.Float64,
    "cpu": pl.Float64,
    "memory_bytes": pl.Int64,
}


def smooth_timeline(timeline: Sequence[Sample]) -> pl.DataFrame:
    """
    Convert a timeline into a DataFrame with derived and smoothed columns.

    Columns: ``time_seconds``, ``cpu``, ``memory_bytes``, ``memory_mb``,
    ``cpu_smooth`` and ``memory_smooth`` (bytes). The smoothed columns are a
    trailing mean over three samples; the first two rows keep their raw value.
    """
    df = pl.DataFrame(
        {
            "time_seconds": [s.elapsed_seconds for s in timeline],
            "cpu": [s.cpu_percent for s in timeline],
            "memory_bytes": [s.memory_bytes for s in timeline],
        },
        schema=TIMELINE_SCHEMA,
    )

    return df.with_columns(
        (pl.col("memory_bytes") / BYTES_PER_MB).alias("memory_mb"),
        pl.col("cpu")
        .rolling_mean(window_size=SMOOTHING_WINDOW)
        .fill_null(pl.col("cpu"))
        .alias("cpu_smooth"),
        pl.col("memory_bytes")
        .cast(pl.Float64)
        .rolling_mean(window_size=SMOOTHING_WINDOW)
        .fill_null(pl.col("memory_bytes").cast(pl.Float64))
        .alias("memory_smooth"),
    )

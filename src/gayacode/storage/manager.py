"""
High-level persistence of analysis results.

The ResultStorageManager lays out the files of one report directory:

- ``analysis-result.json``: the full result document
- ``timeline.parquet``: the smoothed sample timeline (only when non-empty)
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

import polars as pl

from ..models.results import AnalysisResult
from .base import DataStorage
from .parquet_storage import ParquetStorage

logger = logging.getLogger(__name__)

RESULT_FILENAME = "analysis-result.json"
TIMELINE_FILENAME = "timeline.parquet"


class ResultStorageManager:
    """Saves and loads the result files of one output directory."""

    def __init__(self, output_dir: Union[str, Path], storage: Optional[DataStorage] = None):
        self.output_dir = Path(output_dir)
        self.storage = storage or ParquetStorage()

    @property
    def result_path(self) -> Path:
        return self.output_dir / RESULT_FILENAME

    @property
    def timeline_path(self) -> Path:
        return self.output_dir / TIMELINE_FILENAME

    def save_analysis_result(self, result: AnalysisResult) -> Dict[str, Path]:
        """
        Write the result document and, when there is one, the timeline.

        Args:
            result: Analysis result to persist

        Returns:
            Mapping of file kind ("result", "timeline") to the written path
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        written = {}

        self.storage.save_dict(result.to_dict(), self.result_path)
        written["result"] = self.result_path

        frame = result.timeline_frame
        if frame is not None and not frame.is_empty():
            self.storage.save_dataframe(frame, self.timeline_path)
            written["timeline"] = self.timeline_path

        logger.info(f"Saved analysis result to {self.output_dir}")
        return written

    def load_result_dict(self) -> Dict:
        return self.storage.load_dict(self.result_path)

    def load_timeline(self) -> pl.DataFrame:
        """
        Load the stored timeline.

        Raises:
            FileNotFoundError: If no timeline was written
        """
        if not self.storage.file_exists(self.timeline_path):
            raise FileNotFoundError(f"No timeline stored in {self.output_dir}")
        return self.storage.load_dataframe(self.timeline_path)

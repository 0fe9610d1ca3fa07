"""
Abstract interface of result storage backends.

A backend persists two kinds of data for one analysis: the sample timeline as
a DataFrame and the analysis result as a plain dictionary.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import polars as pl

PathLike = Union[str, Path]


class DataStorage(ABC):
    """Storage backend for timelines and result documents."""

    @abstractmethod
    def save_dataframe(self, df: pl.DataFrame, path: PathLike) -> None:
        """
        Write ``df`` to ``path``, creating parent directories as needed.

        Args:
            df: DataFrame to write
            path: Destination file
        """

    @abstractmethod
    def load_dataframe(self, path: PathLike, columns: Optional[List[str]] = None) -> pl.DataFrame:
        """
        Read a DataFrame back.

        Args:
            path: Source file
            columns: Only read these columns (all if None)

        Returns:
            The stored DataFrame
        """

    @abstractmethod
    def save_dict(self, data: Dict[str, Any], path: PathLike) -> None:
        """Write a JSON-serialisable dictionary to ``path``."""

    @abstractmethod
    def load_dict(self, path: PathLike) -> Dict[str, Any]:
        """Read a dictionary written by ``save_dict``."""

    def file_exists(self, path: PathLike) -> bool:
        return Path(path).is_file()

"""
Parquet/JSON storage backend built on Polars.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import polars as pl

from .base import DataStorage, PathLike

logger = logging.getLogger(__name__)

Compression = Literal["snappy", "gzip", "brotli", "lz4", "zstd"]


class ParquetStorage(DataStorage):
    """
    Stores timelines as compressed Parquet and result documents as JSON.

    JSON keeps the result document readable next to the report; the timeline
    is columnar and can grow large, so it goes to Parquet.
    """

    def __init__(self, compression: Compression = "snappy"):
        self.compression = compression
        logger.debug(f"ParquetStorage using {compression} compression")

    def save_dataframe(self, df: pl.DataFrame, path: PathLike) -> None:
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            df.write_parquet(path, compression=self.compression)
            logger.debug(f"Wrote {df.height} timeline rows to {path}")
        except Exception as e:
            logger.error(f"Failed to write DataFrame to {path}: {e}")
            raise

    def load_dataframe(self, path: PathLike, columns: Optional[List[str]] = None) -> pl.DataFrame:
        try:
            df = pl.read_parquet(path, columns=columns)
            logger.debug(f"Read {df.height} rows from {path}")
            return df
        except Exception as e:
            logger.error(f"Failed to read DataFrame from {path}: {e}")
            raise

    def save_dict(self, data: Dict[str, Any], path: PathLike) -> None:
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            logger.debug(f"Wrote result document to {path}")
        except Exception as e:
            logger.error(f"Failed to write dictionary to {path}: {e}")
            raise

    def load_dict(self, path: PathLike) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except Exception as e:
            logger.error(f"Failed to read dictionary from {path}: {e}")
            raise

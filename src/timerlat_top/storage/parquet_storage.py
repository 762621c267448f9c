"""
Summary storage backends using Polars: JSON documents and Parquet tables.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Literal

import polars as pl

from ..validation import ErrorSeverity, handle_file_error
from .base import DataStorage

logger = logging.getLogger(__name__)


class JsonStorage(DataStorage):
    """
    Everything as JSON: tables become a ``rows`` list of row objects.

    Larger than Parquet, but readable without Polars.
    """

    suffix = ".json"

    def save_table(self, df: pl.DataFrame, path: Path) -> None:
        self.save_document({"rows": df.to_dicts()}, path)

    def load_table(self, path: Path) -> pl.DataFrame:
        return pl.DataFrame(self.load_document(path).get("rows", []))

    def save_document(self, document: Dict[str, Any], path: Path) -> None:
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
        except (OSError, TypeError, ValueError) as e:
            handle_file_error(e, f"writing summary document {path}", severity=ErrorSeverity.ERROR, logger=logger)
        logger.debug(f"Saved summary document to {path}")

    def load_document(self, path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            handle_file_error(e, f"reading summary document {path}", severity=ErrorSeverity.ERROR, logger=logger)
            raise


class ParquetStorage(JsonStorage):
    """
    Tables as compressed Parquet files; documents stay JSON.
    """

    suffix = ".parquet"

    def __init__(self, compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd"] = "snappy"):
        self.compression = compression
        logger.debug(f"Initialized ParquetStorage with compression: {compression}")

    def save_table(self, df: pl.DataFrame, path: Path) -> None:
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            df.write_parquet(path, compression=self.compression)
        except Exception as e:
            handle_file_error(e, f"writing summary table {path}", severity=ErrorSeverity.ERROR, logger=logger)
        logger.debug(f"Saved {df.height} summary rows to {path}")

    def load_table(self, path: Path) -> pl.DataFrame:
        try:
            return pl.read_parquet(path)
        except Exception as e:
            handle_file_error(e, f"reading summary table {path}", severity=ErrorSeverity.ERROR, logger=logger)
            raise

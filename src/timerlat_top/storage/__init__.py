"""
Storage module for the final latency summary.

Tables are written with Polars as compressed Parquet or as JSON rows;
summary documents with run metadata are JSON.
"""

from .base import DataStorage
from .factory import create_storage
from .parquet_storage import JsonStorage, ParquetStorage
from .summary import SUMMARY_SCHEMA, export_summary, summary_dataframe, summary_rows

__all__ = [
    "DataStorage",
    "JsonStorage",
    "ParquetStorage",
    "create_storage",
    "SUMMARY_SCHEMA",
    "export_summary",
    "summary_dataframe",
    "summary_rows",
]

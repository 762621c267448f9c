"""
Storage backend interface for latency summaries.

A summary is persisted either as a table (one row per CPU) or as a document
(run metadata plus the same rows as a list). Backends create missing parent
directories on save and report failures through handle_file_error.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict

import polars as pl


class DataStorage(ABC):
    """Abstract base class for summary storage backends."""

    @abstractmethod
    def save_table(self, df: pl.DataFrame, path: Path) -> None:
        """Write a per-CPU table to path, replacing any existing file."""

    @abstractmethod
    def load_table(self, path: Path) -> pl.DataFrame:
        """Read back a table written by save_table()."""

    @abstractmethod
    def save_document(self, document: Dict[str, Any], path: Path) -> None:
        """
        Write a JSON-compatible document to path.

        Args:
            document: Mapping of plain values, lists and nested mappings
            path: Destination file
        """

    @abstractmethod
    def load_document(self, path: Path) -> Dict[str, Any]:
        """Read back a document written by save_document()."""

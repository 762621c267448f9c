"""
Unit tests for the per-CPU summary export.
"""

import json

import polars as pl
import pytest

from timerlat_top.models import StorageConfig, StatsStore
from timerlat_top.monitoring import apply
from timerlat_top.storage import (
    SUMMARY_SCHEMA,
    DataStorage,
    JsonStorage,
    ParquetStorage,
    create_storage,
    export_summary,
    summary_dataframe,
    summary_rows,
)


@pytest.fixture
def store():
    """Three CPUs: CPU 0 with both contexts, CPU 1 idle, CPU 2 IRQ only."""
    store = StatsStore(3)
    for latency in (1000, 3000, 2000):
        apply(store[0], False, latency)
    apply(store[0], True, 9000)
    apply(store[2], False, 500)
    return store


@pytest.mark.unit
class TestSummaryRows:
    """Test cases for summary row construction."""

    def test_rows_skip_cpus_without_samples(self, store):
        rows = summary_rows(store)
        assert [row["cpu"] for row in rows] == [0, 2]

    def test_row_values_are_nanoseconds(self, store):
        row = summary_rows(store)[0]
        assert row["irq_count"] == 3
        assert row["irq_cur"] == 2000
        assert row["irq_min"] == 1000
        assert row["irq_avg"] == 2000
        assert row["irq_max"] == 3000
        assert row["thread_count"] == 1
        assert row["thread_max"] == 9000

    def test_empty_group_is_null(self, store):
        row = summary_rows(store)[1]
        assert row["thread_count"] == 0
        assert row["thread_min"] is None
        assert row["thread_avg"] is None

    def test_monitored_cpus_filter(self, store):
        assert [row["cpu"] for row in summary_rows(store, {2})] == [2]

    def test_empty_store_gives_typed_empty_frame(self):
        df = summary_dataframe(StatsStore(2))
        assert df.height == 0
        assert dict(df.schema) == SUMMARY_SCHEMA


@pytest.mark.unit
class TestExportSummary:
    """Test cases for writing the summary file."""

    def test_no_output_configured(self, store):
        assert export_summary(store, StorageConfig()) is None

    def test_parquet_export(self, store, tmp_path):
        destination = tmp_path / "nested" / "summary.parquet"
        config = StorageConfig(summary_output=destination, format="parquet", compression="zstd")

        assert export_summary(store, config) == destination

        df = pl.read_parquet(destination)
        assert df["cpu"].to_list() == [0, 2]
        assert df["irq_avg"].to_list() == [2000, 500]
        assert df["thread_max"].to_list() == [9000, None]

    def test_json_export_with_metadata(self, store, tmp_path):
        destination = tmp_path / "summary.json"
        config = StorageConfig(summary_output=destination, format="json")

        export_summary(store, config, metadata={"reason": "stop_requested"})

        document = json.loads(destination.read_text())
        assert document["reason"] == "stop_requested"
        assert [row["cpu"] for row in document["cpus"]] == [0, 2]
        assert document["cpus"][1]["thread_min"] is None


@pytest.mark.unit
class TestStorageFactory:
    """Test cases for storage creation."""

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            create_storage("csv")

    def test_backend_per_format(self):
        assert isinstance(create_storage("parquet", "zstd"), ParquetStorage)
        assert create_storage("parquet", "zstd").compression == "zstd"
        assert isinstance(create_storage("json"), JsonStorage)

    def test_json_table_keeps_nulls(self, store, tmp_path):
        storage = create_storage("json")
        path = tmp_path / "table.json"
        storage.save_table(summary_dataframe(store), path)

        df = storage.load_table(path)

        assert df["cpu"].to_list() == [0, 2]
        assert df["thread_avg"].to_list() == [9000, None]

    def test_backend_file_suffixes(self):
        assert create_storage("parquet").suffix == ".parquet"
        assert create_storage("json").suffix == ".json"
        assert not hasattr(DataStorage, "suffix")

    def test_unreadable_document(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            create_storage("json").load_document(path)

"""Tests for the storage writer."""

import sqlite3

import pytest

from conftest import fetch_table
from loadstore import SQLiteDatabaseService
from ingestion import (
    ACTUAL_LOAD,
    FORECAST_KINDS,
    LoadRecord,
    RecordKind,
    clear_tables,
    ensure_load_schema,
    store_records,
)
from ingestion.errors import MAX_ISSUE_DETAILS


class FlakyService(SQLiteDatabaseService):
    """Rejects any row dated "bad"."""

    def upsert(self, table, columns, rows, conflict_columns):
        if rows and rows[0][0] == "bad":
            raise sqlite3.OperationalError("simulated write failure")
        super().upsert(table, columns, rows, conflict_columns)


@pytest.fixture
def flaky_db(tmp_path):
    service = FlakyService(str(tmp_path / "flaky.db"))
    service.connect()
    ensure_load_schema(service)
    yield service
    service.close()


class TestStoreRecords:
    def test_store_forecast(self, load_db):
        records = [
            LoadRecord("2024-01-01", "00:00", load_fcst="100", revision="r1"),
            LoadRecord("2024-01-01", "01:00", load_fcst="110.5", revision="r1"),
        ]
        result = store_records(load_db, FORECAST_KINDS["mm"], records)
        assert result.inserted_count == 2

        rows = fetch_table(load_db, "mm_load_fcst")
        assert [(r["time"], float(r["load_fcst"]), r["revision"]) for r in rows] == [
            ("00:00", 100.0, "r1"),
            ("01:00", 110.5, "r1"),
        ]

    def test_store_actual_load(self, load_db):
        result = store_records(load_db, ACTUAL_LOAD, [LoadRecord("2024-01-01", "00:00", load_act="7")])
        assert result.inserted_count == 1
        rows = fetch_table(load_db, "load_act")
        assert float(rows[0]["load_act"]) == 7.0
        assert "revision" not in rows[0]

    def test_values_and_labels_kept_verbatim(self, load_db):
        record = LoadRecord(
            "2024-01-01", "2024-01-01T00:15:00+01:00", load_fcst="100.12345", revision="r" * 100
        )
        assert store_records(load_db, FORECAST_KINDS["d"], [record]).inserted_count == 1
        row = fetch_table(load_db, "d_load_fcst")[0]
        assert row["time"] == "2024-01-01T00:15:00+01:00"
        assert float(row["load_fcst"]) == pytest.approx(100.12345)
        assert row["revision"] == "r" * 100

    def test_deduplicates_before_writing(self, load_db):
        records = [
            LoadRecord("2024-01-01", "00:00", load_fcst="100", revision="2024-01-01T00:00:00Z"),
            LoadRecord("2024-01-01", "00:00", load_fcst="105", revision="2024-01-02T00:00:00Z"),
            LoadRecord("2024-01-01", "00:00", load_fcst="90", revision="2023-12-31T00:00:00Z"),
        ]
        result = store_records(load_db, FORECAST_KINDS["d"], records)
        assert result.inserted_count == 1
        rows = fetch_table(load_db, "d_load_fcst")
        assert len(rows) == 1
        assert float(rows[0]["load_fcst"]) == 105.0

    def test_accepts_mappings(self, load_db):
        payload = [{"date": "2024-01-01", "time": "00:00", "load_fcst": 42, "revision": "r1", "x": 1}]
        result = store_records(load_db, FORECAST_KINDS["j"], payload)
        assert result.inserted_count == 1
        assert float(fetch_table(load_db, "j_load_fcst")[0]["load_fcst"]) == 42.0

    def test_missing_value_skipped(self, load_db):
        records = [
            LoadRecord("2024-01-01", "00:00", revision="r1"),
            LoadRecord("2024-01-01", "01:00", load_act="5", revision="r1"),
            LoadRecord("2024-01-01", "02:00", load_fcst="5", revision="r1"),
        ]
        result = store_records(load_db, FORECAST_KINDS["d"], records)
        assert result.inserted_count == 1
        assert result.skipped_count == 2
        assert result.error_count == 0

    def test_upsert_overwrites_and_counts_every_write(self, load_db):
        kind = FORECAST_KINDS["mw"]
        first = store_records(load_db, kind, [LoadRecord("2024-01-01", "00:00", load_fcst="1", revision="r1")])
        again = store_records(load_db, kind, [LoadRecord("2024-01-01", "00:00", load_fcst="1", revision="r1")])
        newer = store_records(load_db, kind, [LoadRecord("2024-01-01", "00:00", load_fcst="2", revision="r2")])
        assert (first.inserted_count, again.inserted_count, newer.inserted_count) == (1, 1, 1)

        rows = fetch_table(load_db, "mw_load_fcst")
        assert len(rows) == 1
        assert rows[0]["revision"] == "r2"

    def test_failures_do_not_abort_batch(self, flaky_db):
        records = [
            LoadRecord("2024-01-01", "00:00", load_act="1"),
            LoadRecord("bad", "00:00", load_act="2"),
            LoadRecord("2024-01-02", "00:00", load_act="3"),
        ]
        result = store_records(flaky_db, ACTUAL_LOAD, records)
        assert result.inserted_count == 2
        assert result.error_count == 1
        assert result.errors[0].date == "bad"
        assert "simulated write failure" in result.errors[0].message
        assert [r["date"] for r in fetch_table(flaky_db, "load_act")] == ["2024-01-01", "2024-01-02"]

    def test_error_details_are_capped(self, load_db):
        missing_table = RecordKind("zz", "zz_load_fcst", "load_fcst", True)
        records = [
            LoadRecord("2024-01-01", f"{i:02d}:00", load_fcst="1", revision="r1")
            for i in range(MAX_ISSUE_DETAILS + 5)
        ]
        result = store_records(load_db, missing_table, records)
        assert result.inserted_count == 0
        assert result.error_count == MAX_ISSUE_DETAILS + 5
        assert len(result.errors) == MAX_ISSUE_DETAILS


class TestClearTables:
    def test_clear_all_tables(self, load_db):
        store_records(load_db, ACTUAL_LOAD, [LoadRecord("2024-01-01", "00:00", load_act="1")])
        for kind in FORECAST_KINDS.values():
            store_records(load_db, kind, [LoadRecord("2024-01-01", "00:00", load_fcst="1", revision="r")])

        clear_tables(load_db)

        for table in ["load_act", "d_load_fcst", "j_load_fcst", "mm_load_fcst", "mw_load_fcst"]:
            assert fetch_table(load_db, table) == []

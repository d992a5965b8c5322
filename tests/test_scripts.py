"""Tests for the command-line entry points."""

import json

from conftest import FORECAST_HEADER, csv_text, fetch_table
from loadstore import create_service
from scripts import clear_database, ingest_csv, query_range


def write_archive(tmp_path):
    bucket = tmp_path / "bucket"
    bucket.mkdir()
    (bucket / "j_load_fcst_archive.csv").write_text(
        csv_text(
            FORECAST_HEADER,
            "2024-01-01,00:00,1,2024-01-01T00:00:00Z",
            "2024-01-01,01:00,2,2024-01-01T00:00:00Z",
            "2024-01-01,00:00,3,2024-01-02T00:00:00Z",
        )
    )
    return bucket


class TestIngestScript:
    def test_ingest_and_clear(self, tmp_path, capsys):
        bucket = write_archive(tmp_path)
        db_url = f"sqlite:///{tmp_path / 'cli.db'}"

        ingest_csv.main(
            [
                "--db-url", db_url,
                "--blob-url", str(bucket),
                "--file", "j_load_fcst_archive.csv",
                "--chunk-size", "2",
            ]
        )
        summary = json.loads(capsys.readouterr().out)
        assert summary["chunks"] == 2
        assert summary["inserted_count"] == 3

        service = create_service(db_url)
        service.connect()
        try:
            rows = fetch_table(service, "j_load_fcst")
            assert [float(r["load_fcst"]) for r in rows] == [3.0, 2.0]

            clear_database.main(["--db-url", db_url])
            assert fetch_table(service, "j_load_fcst") == []
        finally:
            service.close()

    def test_single_chunk_reports_cursor(self, tmp_path, capsys, monkeypatch):
        bucket = write_archive(tmp_path)
        monkeypatch.setenv("LOAD_ARCHIVE_DB_URL", f"sqlite:///{tmp_path / 'cli.db'}")
        monkeypatch.setenv("LOAD_ARCHIVE_BLOB_URL", str(bucket))

        ingest_csv.main(["--file", "j_load_fcst_archive.csv", "--chunk-size", "2", "--single"])
        report = json.loads(capsys.readouterr().out)
        assert report["processedLines"] == 2
        assert report["hasMore"] is True
        assert report["nextLine"] == 3


class TestQueryScript:
    def test_query_range(self, tmp_path, capsys):
        bucket = write_archive(tmp_path)
        query_range.main(
            ["--blob-url", str(bucket), "--kind", "j", "--start", "2024-01-01", "--end", "2024-01-01"]
        )
        data = json.loads(capsys.readouterr().out)["data"]
        assert [(r["time"], r["load_fcst"]) for r in data] == [("00:00", "3"), ("01:00", "2")]

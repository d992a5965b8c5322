"""CLI entry point for chunked archive ingestion.

Usage:
    python -m scripts.ingest_csv --db-url sqlite:///load.db --blob-url ./archives \
        --file d_load_fcst_archive.csv [--chunk-size 1000] [--start-line 1] [--single]

--db-url and --blob-url fall back to $LOAD_ARCHIVE_DB_URL and $LOAD_ARCHIVE_BLOB_URL.
"""

import argparse
import json
import logging
import os
from dataclasses import asdict

from blobs import create_blob_store
from loadstore import create_service
from ingestion import LoadArchive

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Ingest an archive CSV into the database")
    parser.add_argument(
        "--db-url",
        default=os.environ.get("LOAD_ARCHIVE_DB_URL"),
        help="Database URL (sqlite:/// or postgresql://)",
    )
    parser.add_argument(
        "--blob-url",
        default=os.environ.get("LOAD_ARCHIVE_BLOB_URL"),
        help="Blob bucket location (directory, file:// or http(s)://)",
    )
    parser.add_argument("--file", required=True, help="Archive file key in the bucket")
    parser.add_argument("--chunk-size", type=int, default=1000, help="Lines per chunk")
    parser.add_argument("--start-line", type=int, default=1, help="First data line (1-based)")
    parser.add_argument(
        "--single", action="store_true", help="Process one chunk only and report the cursor"
    )
    args = parser.parse_args(argv)

    if not args.db_url or not args.blob_url:
        parser.error("--db-url and --blob-url are required (or set LOAD_ARCHIVE_* env vars)")

    service = create_service(args.db_url)
    service.connect()
    try:
        archive = LoadArchive(service, create_blob_store(args.blob_url))
        archive.ensure_schema()
        if args.single:
            result = archive.process_chunk(args.file, args.start_line, args.chunk_size)
            report = {
                "fileName": args.file,
                "processedLines": result.processed_lines,
                "validRecords": result.valid_records,
                "invalidRecords": result.invalid_records,
                "duplicateRecords": result.duplicate_records,
                "insertedCount": result.inserted_count,
                "hasMore": result.has_more,
                "nextLine": args.start_line + args.chunk_size,
            }
            print(json.dumps(report))
        else:
            summary = archive.ingest_file(args.file, args.chunk_size, args.start_line)
            print(json.dumps(asdict(summary)))
            logger.info("Done. %d records inserted.", summary.inserted_count)
    finally:
        service.close()


if __name__ == "__main__":
    main()

"""CLI entry point for date-range queries over an archive file.

Usage:
    python -m scripts.query_range --blob-url ./archives --kind mm --start 2024-01-01 --end 2024-01-31
"""

import argparse
import json
import logging
import os

from blobs import create_blob_store
from ingestion import get_kind, query_range

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Print resolved archive records as JSON")
    parser.add_argument(
        "--blob-url",
        default=os.environ.get("LOAD_ARCHIVE_BLOB_URL"),
        help="Blob bucket location (directory, file:// or http(s)://)",
    )
    parser.add_argument("--kind", required=True, help='"load" or a forecast source (d, j, mm, mw)')
    parser.add_argument("--start", required=True, help="Start date, YYYY-MM-DD")
    parser.add_argument("--end", required=True, help="End date, YYYY-MM-DD")
    args = parser.parse_args(argv)

    if not args.blob_url:
        parser.error("--blob-url is required (or set LOAD_ARCHIVE_BLOB_URL)")

    records = query_range(create_blob_store(args.blob_url), get_kind(args.kind), args.start, args.end)
    print(json.dumps({"data": [r.as_dict() for r in records]}))


if __name__ == "__main__":
    main()

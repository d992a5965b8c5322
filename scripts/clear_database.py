"""CLI entry point that empties every load archive table.

Usage:
    python -m scripts.clear_database --db-url sqlite:///load.db
"""

import argparse
import logging
import os

from loadstore import create_service
from ingestion import clear_tables, ensure_load_schema

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Delete all rows from the load archive tables")
    parser.add_argument(
        "--db-url",
        default=os.environ.get("LOAD_ARCHIVE_DB_URL"),
        help="Database URL (sqlite:/// or postgresql://)",
    )
    args = parser.parse_args(argv)

    if not args.db_url:
        parser.error("--db-url is required (or set LOAD_ARCHIVE_DB_URL)")

    service = create_service(args.db_url)
    service.connect()
    try:
        ensure_load_schema(service)
        clear_tables(service)
        logger.info("Database cleared.")
    finally:
        service.close()


if __name__ == "__main__":
    main()

"""Ingestion failures and the non-fatal issues tallied in results.

Structural problems (bad header, empty file, missing file, unknown kind) are
raised and abort the operation. Row- and record-level problems are collected
as issue records and reported in the result summaries.
"""

from dataclasses import dataclass

#: How many issue details a result keeps; counts are always complete.
MAX_ISSUE_DETAILS = 20


class IngestionError(Exception):
    """Base class for structural ingestion failures."""


class SchemaError(IngestionError):
    """The CSV header lacks columns required by the record kind."""

    def __init__(self, missing: list[str], kind_name: str):
        self.missing = missing
        self.kind_name = kind_name
        super().__init__(
            f"Missing expected headers for {kind_name}: {', '.join(missing)}"
        )


class EmptyInputError(IngestionError):
    """The CSV text has no data rows."""


class NotFoundError(IngestionError):
    """The referenced archive file does not exist in blob storage."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"File not found: {key}")


class UnknownKindError(IngestionError):
    """A kind name or file name does not map to a known table."""


@dataclass(frozen=True)
class RowShapeWarning:
    """A data line whose field count differs from the header's."""

    line_number: int
    field_count: int
    expected: int


@dataclass(frozen=True)
class InvalidRowWarning:
    """A data line dropped because it lacks a key or a value."""

    line_number: int
    record: dict[str, str | None]


@dataclass(frozen=True)
class UpsertError:
    """A single record the store refused."""

    date: str
    time: str
    message: str


def keep_detail(details: list, issue) -> None:
    """Append ``issue`` unless ``details`` already holds the maximum."""
    if len(details) < MAX_ISSUE_DETAILS:
        details.append(issue)

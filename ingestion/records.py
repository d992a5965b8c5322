"""The parsed form of one archive line."""

from dataclasses import dataclass
from typing import Any, Mapping

RecordKey = tuple[str, str]

RECORD_FIELDS = ("date", "time", "load_fcst", "load_act", "revision")


@dataclass(frozen=True)
class LoadRecord:
    date: str
    time: str
    load_fcst: str | None = None
    load_act: str | None = None
    revision: str | None = None

    @property
    def key(self) -> RecordKey:
        return (self.date, self.time)

    def value(self, column: str) -> str | None:
        return getattr(self, column)

    def is_valid(self) -> bool:
        """A storable row has its key and at least one load value."""
        return bool(self.date and self.time and (self.load_fcst or self.load_act))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LoadRecord":
        """Build a record from a JSON-style dict; unknown keys are ignored."""
        values = {}
        for name in RECORD_FIELDS:
            raw = data.get(name)
            values[name] = None if raw is None else str(raw).strip()
        return cls(
            date=values["date"] or "",
            time=values["time"] or "",
            load_fcst=values["load_fcst"] or None,
            load_act=values["load_act"] or None,
            revision=values["revision"] or None,
        )

    def as_dict(self) -> dict[str, str | None]:
        return {name: getattr(self, name) for name in RECORD_FIELDS}

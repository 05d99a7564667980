"""Immutable record types flowing through the birthday pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

FIELDS: Tuple[str, ...] = (
    "name",
    "firstName",
    "lastName",
    "birthday",
    "address",
    "street",
    "postalCode",
    "city",
    "country",
    "bibleVerse",
    "greeting",
)
MULTI_COLUMN_FIELDS = frozenset({"address"})


@dataclass(frozen=True, slots=True)
class FieldMap:
    """Header resolution for one input batch.

    ``columns`` holds single-valued fields; ``address`` keeps every matching
    column in header order.
    """

    columns: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    address: Tuple[int, ...] = ()
    headers: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", MappingProxyType(dict(self.columns)))

    def __bool__(self) -> bool:
        return bool(self.columns) or bool(self.address)


@dataclass(frozen=True, slots=True)
class StructuredDate:
    """A possibly yearless recurring date."""

    month: int
    day: int
    year: Optional[int]
    raw: str = field(default="", compare=False)


@dataclass(frozen=True, slots=True)
class PersonRecord:
    name: str
    first_name: str
    last_name: str
    birthday: StructuredDate
    bible_verse: str
    greeting: str
    address_lines: Tuple[str, ...]
    row_number: int

    @property
    def salutation(self) -> str:
        """Name used to address the person, preferring the first name."""
        return self.first_name or self.name


@dataclass(frozen=True, slots=True)
class MatchedRecord:
    person: PersonRecord
    celebration_date: date

    @property
    def name(self) -> str:
        return self.person.name


@dataclass(frozen=True, slots=True)
class EnrichedRecord:
    matched: MatchedRecord
    bible_verse_resolved: str
    greeting_resolved: str

    @property
    def person(self) -> PersonRecord:
        return self.matched.person

    @property
    def name(self) -> str:
        return self.matched.person.name

    @property
    def celebration_date(self) -> date:
        return self.matched.celebration_date


@dataclass(frozen=True, slots=True)
class WeekWindow:
    """Inclusive matching horizon: start of Monday to the last instant of Sunday."""

    start: datetime
    end: datetime

    def label(self, fmt: str = "%d.%m.%Y") -> str:
        return f"{self.start.strftime(fmt)} - {self.end.strftime(fmt)}"


@dataclass(frozen=True, slots=True)
class SkippedRow:
    """Diagnostic for a source row that could not become a record."""

    row_number: int
    reason: str
    name: str = ""
    raw: str = ""


__all__ = [
    "EnrichedRecord",
    "FIELDS",
    "FieldMap",
    "MULTI_COLUMN_FIELDS",
    "MatchedRecord",
    "PersonRecord",
    "SkippedRow",
    "StructuredDate",
    "WeekWindow",
]

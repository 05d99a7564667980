"""Record normalization: header mapping, extraction, dates, matching, enrichment."""

from .celebration import current_week_window, filter_week, resolve_celebration_date, week_window
from .dates import parse_birthday
from .enrich import enrich_records
from .extract import collect_address_lines, get_value, parse_rows
from .mapping import build_field_map
from .models import (
    EnrichedRecord,
    FieldMap,
    MatchedRecord,
    PersonRecord,
    SkippedRow,
    StructuredDate,
    WeekWindow,
)

__all__ = [
    "EnrichedRecord",
    "FieldMap",
    "MatchedRecord",
    "PersonRecord",
    "SkippedRow",
    "StructuredDate",
    "WeekWindow",
    "build_field_map",
    "collect_address_lines",
    "current_week_window",
    "enrich_records",
    "filter_week",
    "get_value",
    "parse_birthday",
    "parse_rows",
    "resolve_celebration_date",
    "week_window",
]

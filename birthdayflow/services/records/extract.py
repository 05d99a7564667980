"""Field extraction from raw sheet rows."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Sequence, Tuple

from .dates import parse_birthday
from .models import MULTI_COLUMN_FIELDS, FieldMap, PersonRecord, SkippedRow
from .normalize import simplify

LOGGER = logging.getLogger(__name__)

RawRow = Sequence[object]

_LINE_BREAKS = re.compile(r"\n+")


def _cell(row: RawRow, index: int) -> str:
    if index >= len(row):
        return ""
    value = row[index]
    if value is None:
        return ""
    return str(value).strip()


def get_value(row: RawRow, field_map: FieldMap, field: str) -> str:
    """Return the trimmed value of ``field`` or an empty string.

    The address field joins every non-empty mapped cell with newlines.
    """

    if field in MULTI_COLUMN_FIELDS:
        return "\n".join(filter(None, (_cell(row, idx) for idx in field_map.address)))
    index = field_map.columns.get(field)
    if index is None:
        return ""
    return _cell(row, index)


def full_name(row: RawRow, field_map: FieldMap) -> str:
    """Full name column, falling back to ``first last``."""

    name = get_value(row, field_map, "name")
    if name:
        return name
    parts = (get_value(row, field_map, "firstName"), get_value(row, field_map, "lastName"))
    return " ".join(filter(None, parts)).strip()


def collect_address_lines(row: RawRow, field_map: FieldMap) -> Tuple[str, ...]:
    """Assemble the postal block for an envelope.

    Order: address lines, street (unless already present), ``postal code city``,
    country. Duplicates are dropped keeping the first occurrence, and lines that
    only repeat the person's name are removed.
    """

    lines: List[str] = []

    address = get_value(row, field_map, "address")
    if address:
        lines.extend(line.strip() for line in _LINE_BREAKS.split(address) if line.strip())

    street = get_value(row, field_map, "street")
    if street and all(simplify(line) != simplify(street) for line in lines):
        lines.append(street)

    city_line = " ".join(
        filter(None, (get_value(row, field_map, "postalCode"), get_value(row, field_map, "city")))
    ).strip()
    if city_line:
        lines.append(city_line)

    country = get_value(row, field_map, "country")
    if country:
        lines.append(country)

    unique = list(dict.fromkeys(line for line in lines if line))
    name = full_name(row, field_map)
    if name:
        normalized_name = simplify(name)
        unique = [line for line in unique if simplify(line) != normalized_name]
    return tuple(unique)


def parse_row(
    row: RawRow,
    field_map: FieldMap,
    row_number: int,
    *,
    timezone: str = "Europe/Zurich",
    locale: str = "de_CH",
) -> PersonRecord | SkippedRow:
    """Turn one raw row into a ``PersonRecord`` or a ``SkippedRow`` diagnostic."""

    name = full_name(row, field_map)
    if not name:
        LOGGER.warning("Skipping row %s: no name present.", row_number)
        return SkippedRow(row_number=row_number, reason="missing_name")

    raw_birthday = get_value(row, field_map, "birthday")
    birthday = parse_birthday(raw_birthday, row_number, name, timezone=timezone, locale=locale)
    if birthday is None:
        if not raw_birthday:
            LOGGER.warning("Skipping row %s (%s): no birthday present.", row_number, name)
            return SkippedRow(row_number=row_number, reason="missing_birthday", name=name)
        # parse_birthday already warned with the offending text.
        return SkippedRow(row_number=row_number, reason="invalid_birthday", name=name, raw=raw_birthday)

    return PersonRecord(
        name=name,
        first_name=get_value(row, field_map, "firstName"),
        last_name=get_value(row, field_map, "lastName"),
        birthday=birthday,
        bible_verse=get_value(row, field_map, "bibleVerse"),
        greeting=get_value(row, field_map, "greeting"),
        address_lines=collect_address_lines(row, field_map),
        row_number=row_number,
    )


def parse_rows(
    rows: Iterable[RawRow],
    field_map: FieldMap,
    *,
    first_row_number: int = 2,
    timezone: str = "Europe/Zurich",
    locale: str = "de_CH",
) -> Tuple[List[PersonRecord], List[SkippedRow]]:
    """Parse data rows; row numbers are 1-based sheet rows (header is row 1)."""

    records: List[PersonRecord] = []
    skipped: List[SkippedRow] = []
    for offset, row in enumerate(rows):
        result = parse_row(row, field_map, first_row_number + offset, timezone=timezone, locale=locale)
        if isinstance(result, SkippedRow):
            skipped.append(result)
        else:
            records.append(result)
    return records, skipped

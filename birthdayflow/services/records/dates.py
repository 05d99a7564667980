"""Birthday parsing for free-form sheet cells.

Parsing order, first success wins:

1. ISO 8601 (``1980-06-03``, ``1980-06-03T08:00+02:00`` ...), converted to the
   configured timezone when an offset is present.
2. ``BIRTHDAY_FORMATS``: explicit dotted, slashed and spelled-month layouts.
3. A generic ``day.month[.year]`` fallback accepting ``.``, ``/`` and ``-``.

Day-before-month is assumed everywhere. ``03/06/1980`` is the 3rd of June even
for sheets maintained with a month-first convention; this is a locale policy,
not something inferred from the data.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from functools import lru_cache
from typing import Dict, Optional, Tuple
from zoneinfo import ZoneInfo

from babel.dates import get_month_names

from .models import StructuredDate

LOGGER = logging.getLogger(__name__)

TWO_DIGIT_CUTOFF = 60
LEAP_REFERENCE_YEAR = 2000


@dataclass(frozen=True, slots=True)
class DateFormat:
    """Token layout such as ``d.M.yyyy``; ``has_year`` tells whether a year is kept."""

    layout: str
    has_year: bool


BIRTHDAY_FORMATS: Tuple[DateFormat, ...] = (
    DateFormat("yyyy-MM-dd", True),
    DateFormat("dd.MM.yyyy", True),
    DateFormat("d.M.yyyy", True),
    DateFormat("dd.MM.yy", True),
    DateFormat("d.M.yy", True),
    DateFormat("dd/MM/yyyy", True),
    DateFormat("d/M/yyyy", True),
    DateFormat("dd/MM/yy", True),
    DateFormat("d/M/yy", True),
    DateFormat("d. MMMM yyyy", True),
    DateFormat("d. MMM yyyy", True),
    DateFormat("d. MMMM", False),
    DateFormat("d. MMM", False),
    DateFormat("dd.MM.", False),
    DateFormat("d.M.", False),
    DateFormat("dd/MM", False),
    DateFormat("d/M", False),
)

_TOKENS = re.compile(r"yyyy|yy|MMMM|MMM|MM|M|dd|d|\s+|.")
_TOKEN_PATTERNS = {
    "yyyy": r"(?P<year>\d{4})",
    "yy": r"(?P<year2>\d{2})",
    "MMMM": r"(?P<month_wide>[^\W\d_]+)",
    "MMM": r"(?P<month_abbr>[^\W\d_]+)\.?",
    "MM": r"(?P<month>\d{2})",
    "M": r"(?P<month>\d{1,2})",
    "dd": r"(?P<day>\d{2})",
    "d": r"(?P<day>\d{1,2})",
}

_FALLBACK = re.compile(r"^(\d{1,2})[./-](\d{1,2})(?:[./-](\d{2,4}))?$")


@lru_cache(maxsize=None)
def _compile(layout: str) -> re.Pattern[str]:
    parts = []
    for token in _TOKENS.findall(layout):
        if token in _TOKEN_PATTERNS:
            parts.append(_TOKEN_PATTERNS[token])
        elif token.isspace():
            parts.append(r"\s*")
        else:
            parts.append(re.escape(token))
    return re.compile("^" + "".join(parts) + "$", re.IGNORECASE)


@lru_cache(maxsize=None)
def month_lookup(locale: str, width: str) -> Dict[str, int]:
    """Lowercase month names (trailing dot removed) for ``locale`` -> month number."""

    lookup: Dict[str, int] = {}
    for context in ("format", "stand-alone"):
        for number, name in get_month_names(width, context=context, locale=locale).items():
            lookup.setdefault(name.rstrip(".").lower(), number)
    return lookup


def expand_two_digit_year(value: int) -> int:
    return 1900 + value if value > TWO_DIGIT_CUTOFF else 2000 + value


def _is_calendar_date(year: int, month: int, day: int) -> bool:
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def _parse_iso(text: str, timezone: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(ZoneInfo(timezone))
    return parsed


def _match_format(text: str, fmt: DateFormat, locale: str) -> Optional[Tuple[int, int, Optional[int]]]:
    match = _compile(fmt.layout).match(text)
    if match is None:
        return None
    groups = match.groupdict()

    if groups.get("month_wide"):
        month = month_lookup(locale, "wide").get(groups["month_wide"].lower())
    elif groups.get("month_abbr"):
        month = month_lookup(locale, "abbreviated").get(groups["month_abbr"].lower())
    else:
        month = int(groups["month"])
    if month is None:
        return None

    day = int(groups["day"])
    year: Optional[int] = None
    if groups.get("year"):
        year = int(groups["year"])
    elif groups.get("year2"):
        year = expand_two_digit_year(int(groups["year2"]))

    if not _is_calendar_date(year or LEAP_REFERENCE_YEAR, month, day):
        return None
    return month, day, year if fmt.has_year else None


def parse_birthday(
    value: object,
    row_number: int = 0,
    name: str = "",
    *,
    timezone: str = "Europe/Zurich",
    locale: str = "de_CH",
) -> Optional[StructuredDate]:
    """Parse a birthday cell into a ``StructuredDate``.

    Returns ``None`` for empty or unreadable input; ``row_number`` and ``name``
    only feed the warning emitted for unreadable values.
    """

    if value is None:
        return None
    trimmed = str(value).strip()
    if not trimmed:
        return None

    iso = _parse_iso(trimmed, timezone)
    if iso is not None:
        return StructuredDate(month=iso.month, day=iso.day, year=iso.year, raw=trimmed)

    for fmt in BIRTHDAY_FORMATS:
        parsed = _match_format(trimmed, fmt, locale)
        if parsed is not None:
            month, day, year = parsed
            return StructuredDate(month=month, day=day, year=year, raw=trimmed)

    match = _FALLBACK.match(trimmed)
    if match:
        day = int(match.group(1))
        month = int(match.group(2))
        year_text = match.group(3)
        year = None
        if year_text:
            year = int(f"20{year_text}" if len(year_text) == 2 else year_text)
        if 1 <= day <= 31 and 1 <= month <= 12:
            return StructuredDate(month=month, day=day, year=year, raw=trimmed)

    LOGGER.warning('Birthday could not be interpreted (row %s, %s): "%s".', row_number, name, trimmed)
    return None

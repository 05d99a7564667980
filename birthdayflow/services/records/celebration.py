"""Week window computation and recurring-date matching."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from .models import MatchedRecord, PersonRecord, StructuredDate, WeekWindow
from .normalize import collation_key


def week_window(reference: datetime) -> WeekWindow:
    """Monday 00:00 to Sunday 23:59:59.999999 around ``reference`` (kept in its timezone)."""

    monday = reference.date() - timedelta(days=reference.weekday())
    start = datetime.combine(monday, time.min, tzinfo=reference.tzinfo)
    end = datetime.combine(monday + timedelta(days=6), time.max, tzinfo=reference.tzinfo)
    return WeekWindow(start=start, end=end)


def current_week_window(timezone: str, today: date | None = None) -> WeekWindow:
    zone = ZoneInfo(timezone)
    if today is None:
        reference = datetime.now(zone)
    else:
        reference = datetime.combine(today, time(12), tzinfo=zone)
    return week_window(reference)


def _instantiate(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        if month == 2 and day == 29:
            # Leap-day birthdays are observed on Feb 28 in common years.
            return date(year, 2, 28)
        return None


def resolve_celebration_date(birthday: StructuredDate, window: WeekWindow) -> Optional[date]:
    """Concrete date on which ``birthday`` falls inside ``window``, if any.

    Candidate years are the window's start year, its end year and the birth year,
    tried in that order.
    """

    years = dict.fromkeys([window.start.year, window.end.year])
    if birthday.year:
        years.setdefault(birthday.year)

    first_day = window.start.date()
    last_day = window.end.date()
    for year in years:
        candidate = _instantiate(year, birthday.month, birthday.day)
        if candidate is not None and first_day <= candidate <= last_day:
            return candidate
    return None


def filter_week(records: Iterable[PersonRecord], window: WeekWindow) -> List[MatchedRecord]:
    """Keep records celebrating inside ``window``, ordered by date then name."""

    matches: List[MatchedRecord] = []
    for record in records:
        celebration = resolve_celebration_date(record.birthday, window)
        if celebration is not None:
            matches.append(MatchedRecord(person=record, celebration_date=celebration))
    matches.sort(key=lambda item: (item.celebration_date, collation_key(item.name)))
    return matches

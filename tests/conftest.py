from __future__ import annotations

import os
import sys
import tempfile
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep log files of the test session out of the working tree.
os.environ.setdefault("BIRTHDAYFLOW_WORK_DIR", tempfile.mkdtemp(prefix="birthdayflow-tests-"))

from birthdayflow.services.layout.backend import TextStyle
from birthdayflow.services.records.models import (
    EnrichedRecord,
    MatchedRecord,
    PersonRecord,
    StructuredDate,
)


@dataclass
class DrawCall:
    page: int
    text: str
    style: TextStyle
    x: float
    top: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass
class StubBackend:
    """Rendering backend reporting synthetic heights and recording draw calls."""

    page_width: float = 842.0
    page_height: float = 595.0
    heights: Dict[str, float] = field(default_factory=dict)
    default_height: Optional[Callable[[str, TextStyle], float]] = None
    page: int = 1
    draws: List[DrawCall] = field(default_factory=list)
    measured: List[str] = field(default_factory=list)

    def _height(self, text: str, style: TextStyle) -> float:
        if text in self.heights:
            return self.heights[text]
        if self.default_height is not None:
            return self.default_height(text, style)
        return style.leading

    def measure(self, text: str, style: TextStyle, width: Optional[float] = None) -> float:
        self.measured.append(text)
        return self._height(text, style)

    def draw(self, text: str, style: TextStyle, x: float, top: float, width: Optional[float] = None) -> float:
        height = self._height(text, style)
        self.draws.append(DrawCall(self.page, text, style, x, top, height))
        return height

    def new_page(self) -> None:
        self.page += 1


@pytest.fixture()
def stub_backend() -> StubBackend:
    return StubBackend()


def make_person(
    name: str = "Anna Muster",
    *,
    first_name: str = "",
    month: int = 6,
    day: int = 3,
    year: int | None = 1980,
    address_lines: tuple[str, ...] = ("Bahnhofstr. 2", "3000 Bern"),
    bible_verse: str = "",
    greeting: str = "",
    row_number: int = 2,
) -> PersonRecord:
    return PersonRecord(
        name=name,
        first_name=first_name,
        last_name="",
        birthday=StructuredDate(month=month, day=day, year=year, raw=f"{day}.{month}."),
        bible_verse=bible_verse,
        greeting=greeting,
        address_lines=address_lines,
        row_number=row_number,
    )


def make_enriched(
    name: str = "Anna Muster",
    celebration: date = date(2026, 6, 3),
    verse: str = "verse",
    greeting: str = "greeting",
    **person_kwargs,
) -> EnrichedRecord:
    matched = MatchedRecord(person=make_person(name, **person_kwargs), celebration_date=celebration)
    return EnrichedRecord(matched=matched, bible_verse_resolved=verse, greeting_resolved=greeting)


@pytest.fixture()
def person_factory():
    return make_person


@pytest.fixture()
def enriched_factory():
    return make_enriched

"""Greeting sheet: records flow down landscape A4 pages in two columns.

Each record is a full-width header followed by the quote (left column) and the
greeting (right column) side by side. Heights are measured before anything is
drawn; a record that would cross the bottom margin moves to a fresh page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

from babel.dates import format_date
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm

from birthdayflow.services.records.models import EnrichedRecord, WeekWindow

from .backend import RenderBackend, TextStyle, document_path, open_pdf

LOGGER = logging.getLogger(__name__)

GREETING_PREFIX = "geburtstagsgruesse"

HEADER_STYLE = TextStyle(font="Helvetica-Bold", size=12)
VERSE_STYLE = TextStyle(font="Helvetica-Oblique", size=11, line_gap=4)
GREETING_STYLE = TextStyle(font="Helvetica", size=11, line_gap=4)


@dataclass(frozen=True, slots=True)
class GreetingGeometry:
    page_size: Tuple[float, float] = landscape(A4)
    margin_top: float = 20 * mm
    margin_bottom: float = 20 * mm
    margin_left: float = 25 * mm
    margin_right: float = 25 * mm
    column_gap: float = 18 * mm
    header_gap: float = 3 * mm
    trailing_gap: float = 6 * mm

    @property
    def usable_width(self) -> float:
        return self.page_size[0] - self.margin_left - self.margin_right

    @property
    def column_width(self) -> float:
        return (self.usable_width - self.column_gap) / 2

    @property
    def max_y(self) -> float:
        return self.page_size[1] - self.margin_bottom


@dataclass(slots=True)
class LayoutCursor:
    """Vertical position on the current page, threaded through every record."""

    y: float
    page: int = 1


@dataclass(frozen=True, slots=True)
class LayoutBlock:
    header_height: float
    verse_height: float
    greeting_height: float
    header_gap: float
    trailing_gap: float

    @property
    def content_height(self) -> float:
        return max(self.verse_height, self.greeting_height)

    @property
    def height(self) -> float:
        return self.header_height + self.header_gap + self.content_height + self.trailing_gap


@dataclass(frozen=True, slots=True)
class PlacedBlock:
    name: str
    page: int
    top: float
    bottom: float


def header_text(record: EnrichedRecord, locale: str = "de_CH") -> str:
    return f"{record.name} – {format_date(record.celebration_date, 'dd.MM.yyyy', locale=locale)}"


def measure_block(
    backend: RenderBackend, record: EnrichedRecord, geometry: GreetingGeometry, locale: str = "de_CH"
) -> LayoutBlock:
    return LayoutBlock(
        header_height=backend.measure(header_text(record, locale), HEADER_STYLE, geometry.usable_width),
        verse_height=backend.measure(record.bible_verse_resolved, VERSE_STYLE, geometry.column_width),
        greeting_height=backend.measure(record.greeting_resolved, GREETING_STYLE, geometry.column_width),
        header_gap=geometry.header_gap,
        trailing_gap=geometry.trailing_gap,
    )


def needs_page_break(cursor: LayoutCursor, block: LayoutBlock, geometry: GreetingGeometry) -> bool:
    """True when ``block`` does not fit below the cursor but would fit on a fresh page."""

    if cursor.y + block.height <= geometry.max_y:
        return False
    return cursor.y > geometry.margin_top


def place_block(cursor: LayoutCursor, block: LayoutBlock, geometry: GreetingGeometry) -> LayoutCursor:
    """Cursor at which ``block`` will be drawn (same cursor or the top of the next page)."""

    if needs_page_break(cursor, block, geometry):
        return LayoutCursor(y=geometry.margin_top, page=cursor.page + 1)
    return cursor


def render_greetings(
    backend: RenderBackend,
    records: Sequence[EnrichedRecord],
    geometry: GreetingGeometry = GreetingGeometry(),
    locale: str = "de_CH",
) -> List[PlacedBlock]:
    """Draw all records and return where each one landed."""

    cursor = LayoutCursor(y=geometry.margin_top)
    left = geometry.margin_left
    right = geometry.margin_left + geometry.column_width + geometry.column_gap
    placed: List[PlacedBlock] = []

    for record in records:
        block = measure_block(backend, record, geometry, locale)
        target = place_block(cursor, block, geometry)
        if target.page != cursor.page:
            backend.new_page()
        if target.y + block.height > geometry.max_y:
            LOGGER.warning("Greeting for %s is taller than one page and will overflow.", record.name)

        header_height = backend.draw(header_text(record, locale), HEADER_STYLE, left, target.y, geometry.usable_width)
        text_top = target.y + header_height + geometry.header_gap
        verse_height = backend.draw(record.bible_verse_resolved, VERSE_STYLE, left, text_top, geometry.column_width)
        greeting_height = backend.draw(record.greeting_resolved, GREETING_STYLE, right, text_top, geometry.column_width)

        bottom = text_top + max(verse_height, greeting_height)
        placed.append(PlacedBlock(name=record.name, page=target.page, top=target.y, bottom=bottom))
        cursor = LayoutCursor(y=bottom + geometry.trailing_gap, page=target.page)
    return placed


def generate_greeting_pdf(
    records: Sequence[EnrichedRecord],
    window: WeekWindow,
    output_dir: Path,
    locale: str = "de_CH",
    geometry: GreetingGeometry = GreetingGeometry(),
) -> Path:
    path = document_path(output_dir, GREETING_PREFIX, window)
    with open_pdf(path, geometry.page_size, title="Geburtstagsgrüsse") as backend:
        render_greetings(backend, records, geometry, locale)
    return path

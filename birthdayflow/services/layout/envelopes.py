"""C5 envelope document: one record per page."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

from babel.dates import format_date
from reportlab.lib.units import mm

from birthdayflow.services.records.models import EnrichedRecord, WeekWindow

from .backend import RenderBackend, TextStyle, document_path, open_pdf

ENVELOPE_PREFIX = "c5-couverts"

NAME_STYLE = TextStyle(font="Helvetica-Bold", size=14)
ADDRESS_STYLE = TextStyle(font="Helvetica", size=12)
CAPTION_STYLE = TextStyle(font="Helvetica-Oblique", size=10, color="#555555")


@dataclass(frozen=True, slots=True)
class EnvelopeGeometry:
    page_size: Tuple[float, float] = (229 * mm, 162 * mm)
    margin_left: float = 25 * mm
    margin_top: float = 45 * mm
    margin_right: float = 25 * mm
    name_gap: float = 6.0
    line_gap: float = 4.0
    caption_gap: float = 6.0

    @property
    def text_width(self) -> float:
        return self.page_size[0] - self.margin_left - self.margin_right


def caption(record: EnrichedRecord, locale: str = "de_CH") -> str:
    return f"Geburtstag: {format_date(record.celebration_date, 'dd.MM.yyyy', locale=locale)}"


def render_envelopes(
    backend: RenderBackend,
    records: Sequence[EnrichedRecord],
    geometry: EnvelopeGeometry = EnvelopeGeometry(),
    locale: str = "de_CH",
) -> List[float]:
    """Draw one envelope per record; returns the bottom edge of each caption."""

    x = geometry.margin_left
    width = geometry.text_width
    bottoms: List[float] = []
    for index, record in enumerate(records):
        if index > 0:
            backend.new_page()

        y = geometry.margin_top
        y += backend.draw(record.name, NAME_STYLE, x, y, width) + geometry.name_gap
        for line in record.person.address_lines:
            y += backend.draw(line, ADDRESS_STYLE, x, y, width) + geometry.line_gap
        y += geometry.caption_gap
        y += backend.draw(caption(record, locale), CAPTION_STYLE, x, y, width)
        bottoms.append(y)
    return bottoms


def generate_envelope_pdf(
    records: Sequence[EnrichedRecord],
    window: WeekWindow,
    output_dir: Path,
    locale: str = "de_CH",
    geometry: EnvelopeGeometry = EnvelopeGeometry(),
) -> Path:
    path = document_path(output_dir, ENVELOPE_PREFIX, window)
    with open_pdf(path, geometry.page_size, title="C5-Couverts") as backend:
        render_envelopes(backend, records, geometry, locale)
    return path

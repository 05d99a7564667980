"""Rendering collaborator used by the document renderers.

Renderers only talk to ``RenderBackend``: ``measure`` reports the height a text
would take without drawing it, ``draw`` places it and returns the height used.
Coordinates are measured from the top-left corner of the page, in points.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Protocol, Tuple

from reportlab.lib.colors import HexColor
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from birthdayflow.core.errors import RenderError
from birthdayflow.services.records.models import WeekWindow

LOGGER = logging.getLogger(__name__)

LINE_HEIGHT = 1.2


@dataclass(frozen=True, slots=True)
class TextStyle:
    font: str = "Helvetica"
    size: float = 12.0
    line_gap: float = 0.0
    color: str = "#000000"

    @property
    def leading(self) -> float:
        return self.size * LINE_HEIGHT + self.line_gap


class RenderBackend(Protocol):
    page_width: float
    page_height: float

    def measure(self, text: str, style: TextStyle, width: Optional[float] = None) -> float:  # pragma: no cover
        ...

    def draw(self, text: str, style: TextStyle, x: float, top: float, width: Optional[float] = None) -> float:  # pragma: no cover
        ...

    def new_page(self) -> None:  # pragma: no cover
        ...


class ReportLabBackend:
    """``RenderBackend`` on top of a reportlab canvas."""

    def __init__(self, pdf: canvas.Canvas, page_size: Tuple[float, float]) -> None:
        self.pdf = pdf
        self.page_width, self.page_height = page_size
        self.pages = 1

    def _lines(self, text: str, style: TextStyle, width: Optional[float]) -> List[str]:
        if not text:
            return []
        if width is None:
            return text.splitlines()
        return simpleSplit(text, style.font, style.size, width)

    def measure(self, text: str, style: TextStyle, width: Optional[float] = None) -> float:
        return len(self._lines(text, style, width)) * style.leading

    def draw(self, text: str, style: TextStyle, x: float, top: float, width: Optional[float] = None) -> float:
        lines = self._lines(text, style, width)
        self.pdf.setFont(style.font, style.size)
        self.pdf.setFillColor(HexColor(style.color))
        baseline = self.page_height - top - style.size
        for line in lines:
            self.pdf.drawString(x, baseline, line)
            baseline -= style.leading
        return len(lines) * style.leading

    def new_page(self) -> None:
        self.pdf.showPage()
        self.pages += 1


def document_path(output_dir: Path, prefix: str, window: WeekWindow) -> Path:
    """``<prefix>-<startYYYYMMDD>-<endYYYYMMDD>.pdf`` inside ``output_dir``."""

    return output_dir / f"{prefix}-{window.start:%Y%m%d}-{window.end:%Y%m%d}.pdf"


@contextmanager
def open_pdf(path: Path, page_size: Tuple[float, float], title: str = "") -> Iterator[ReportLabBackend]:
    """Yield a backend writing to ``path``.

    The PDF is written to a temporary sibling and moved into place only after the
    renderer finished, so a failed run never leaves a partial document behind.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")
    pdf = canvas.Canvas(str(tmp_path), pagesize=page_size)
    if title:
        pdf.setTitle(title)
    backend = ReportLabBackend(pdf, page_size)
    try:
        yield backend
        pdf.save()
        os.replace(tmp_path, path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise RenderError(f"Failed to write {path}: {exc}") from exc
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    LOGGER.info("Wrote %s (%s pages)", path, backend.pages)

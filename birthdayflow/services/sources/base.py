"""Row source abstraction: anything returning header + data rows as strings."""

from __future__ import annotations

from typing import List, Protocol, Sequence

Rows = List[List[str]]


class RowSource(Protocol):
    """Source of raw sheet rows. The first row is the header row."""

    def fetch_rows(self) -> Rows:  # pragma: no cover - interface definition
        ...


class StaticRowSource:
    """In-memory source, handy for tests and dry runs."""

    def __init__(self, rows: Sequence[Sequence[object]]) -> None:
        self._rows = [["" if cell is None else str(cell) for cell in row] for row in rows]

    def fetch_rows(self) -> Rows:
        return [list(row) for row in self._rows]

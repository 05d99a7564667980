"""Local CSV / Excel exports of the birthday sheet."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from birthdayflow.core.errors import SourceError

from .base import Rows

LOGGER = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {".csv", ".xlsx", ".xls"}


def _read_frame(path: Path, sheet: str | int) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix in {".xlsx", ".xls"}:
        return pd.read_excel(path, sheet_name=sheet, header=None, dtype=str, keep_default_na=False)
    if suffix == ".csv":
        return pd.read_csv(path, header=None, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    raise SourceError(f"unsupported input file: {path}")


class TableFileSource:
    """Read rows from a CSV or XLSX file; every cell is kept as text."""

    def __init__(self, path: str | Path, sheet: str | int = 0) -> None:
        self.path = Path(path)
        self.sheet = sheet

    def fetch_rows(self) -> Rows:
        if not self.path.exists():
            raise SourceError(f"Source table not found: {self.path}")
        LOGGER.info("Reading source table: %s", self.path)
        try:
            frame = _read_frame(self.path, self.sheet)
        except (ValueError, OSError) as exc:
            raise SourceError(f"Failed to read {self.path}: {exc}") from exc

        rows: Rows = []
        for values in frame.itertuples(index=False, name=None):
            row = ["" if value is None else str(value) for value in values]
            while row and not row[-1].strip():
                row.pop()
            rows.append(row)
        LOGGER.info("Source table loaded: %s rows", len(rows))
        return rows

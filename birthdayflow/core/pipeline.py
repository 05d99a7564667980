from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Callable, List, Optional

from birthdayflow.config import AliasTable, load_alias_table
from birthdayflow.services.layout import generate_envelope_pdf, generate_greeting_pdf
from birthdayflow.services.records import (
    EnrichedRecord,
    SkippedRow,
    WeekWindow,
    build_field_map,
    current_week_window,
    enrich_records,
    filter_week,
    parse_rows,
)
from birthdayflow.services.sources.base import RowSource

from .logger import configure_logging
from .settings import Settings


ProgressCB = Callable[[str, str], None]


@dataclass
class PipelineResult:
    window: WeekWindow
    records: List[EnrichedRecord] = field(default_factory=list)
    skipped: List[SkippedRow] = field(default_factory=list)
    envelope_path: Optional[Path] = None
    greeting_path: Optional[Path] = None

    @property
    def is_empty(self) -> bool:
        return not self.records


class Pipeline:
    """Coordinates Fetch -> Parse -> Match -> Enrich -> Render."""

    def __init__(
        self,
        settings: Settings,
        source: RowSource,
        logger=None,
        aliases: AliasTable | None = None,
    ) -> None:
        self.settings = settings
        self.source = source
        self.logger = logger or configure_logging(log_dir=settings.log_dir).getChild("pipeline")
        self.aliases = aliases if aliases is not None else load_alias_table()

    def collect(self, week_of: date | None = None) -> PipelineResult:
        """Fetch rows and return the enriched celebrations of the week, without rendering."""

        window = current_week_window(self.settings.timezone, week_of)
        rows = self.source.fetch_rows()
        if not rows:
            self.logger.info("Source returned no rows.")
            return PipelineResult(window=window)

        field_map = build_field_map(rows[0], self.aliases)
        if not field_map:
            self.logger.warning("No known column headers found: %s", rows[0])
        people, skipped = parse_rows(
            rows[1:], field_map, timezone=self.settings.timezone, locale=self.settings.locale
        )
        matches = filter_week(people, window)
        self.logger.info(
            "%s records read, %s skipped, %s celebrating %s",
            len(people),
            len(skipped),
            len(matches),
            window.label(),
        )
        return PipelineResult(window=window, records=enrich_records(matches), skipped=skipped)

    def run(self, week_of: date | None = None, progress_cb: ProgressCB | None = None) -> PipelineResult:
        def progress(stage: str, detail: str = "") -> None:
            if progress_cb:
                progress_cb(stage, detail)
            self.logger.info("%s - %s", stage, detail)

        progress("1/3 fetch", "reading birthday sheet")
        result = self.collect(week_of)
        if result.is_empty:
            self.logger.info("No birthdays between %s.", result.window.label())
            return result

        output_dir = Path(self.settings.output_dir)
        progress("2/3 envelopes", f"{len(result.records)} records")
        result.envelope_path = generate_envelope_pdf(
            result.records, result.window, output_dir, locale=self.settings.locale
        )
        progress("3/3 greetings", f"{len(result.records)} records")
        result.greeting_path = generate_greeting_pdf(
            result.records, result.window, output_dir, locale=self.settings.locale
        )
        return result

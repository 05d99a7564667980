"""Typer based command line entry points for birthdayflow."""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer

from birthdayflow.config import load_alias_table
from birthdayflow.core.errors import BirthdayFlowError, ConfigError
from birthdayflow.core.logger import configure_logging, get_logger
from birthdayflow.core.pipeline import Pipeline
from birthdayflow.core.settings import Settings, load_settings
from birthdayflow.services.sources.base import RowSource
from birthdayflow.services.sources.table_file import TableFileSource

app = typer.Typer(help="Weekly birthday envelopes and greeting sheets.")


def _parse_week_of(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise typer.BadParameter("week-of must be formatted as YYYY-MM-DD") from exc


def _build_source(settings: Settings, source: Optional[Path]) -> RowSource:
    if source is not None:
        return TableFileSource(source)
    from birthdayflow.services.sources.google_sheets import GoogleSheetSource

    return GoogleSheetSource.from_settings(settings)


def _build_pipeline(
    source: Optional[Path],
    output_dir: Optional[Path],
    timezone: Optional[str],
    aliases: Optional[Path],
) -> Pipeline:
    settings = load_settings(output_dir=output_dir, timezone=timezone)
    return Pipeline(
        settings=settings,
        source=_build_source(settings, source),
        aliases=load_alias_table(aliases),
    )


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Set global logging level (e.g. DEBUG/INFO/WARNING).",
    ),
) -> None:
    """Configure global CLI behaviour before executing commands."""

    try:
        configure_logging(level=log_level)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc


SOURCE_OPTION = typer.Option(
    None, "--source", exists=True, dir_okay=False, resolve_path=True,
    help="Local CSV/XLSX export instead of the Google Sheet.",
)
WEEK_OF_OPTION = typer.Option(None, "--week-of", help="Any day of the week to process (YYYY-MM-DD).")
TIMEZONE_OPTION = typer.Option(None, "--timezone", help="Override the TIMEZONE setting.")
ALIASES_OPTION = typer.Option(
    None, "--aliases", exists=True, dir_okay=False, help="Alternative header alias YAML file."
)


@app.command("generate")
def generate(
    source: Optional[Path] = SOURCE_OPTION,
    week_of: Optional[str] = WEEK_OF_OPTION,
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", help="Override the OUTPUT_DIR setting."),
    timezone: Optional[str] = TIMEZONE_OPTION,
    aliases: Optional[Path] = ALIASES_OPTION,
) -> None:
    """Render the envelope and greeting PDFs for this week's birthdays."""

    logger = get_logger()
    reference = _parse_week_of(week_of)
    try:
        pipeline = _build_pipeline(source, output_dir, timezone, aliases)
        result = pipeline.run(reference)
    except ConfigError as exc:
        logger.error("generate config_error: %s", exc)
        typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from exc
    except (BirthdayFlowError, OSError) as exc:
        logger.error("generate failed: %s", exc, exc_info=True)
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    if result.is_empty:
        typer.echo(f"No birthdays between {result.window.label()}.")
        return
    typer.echo(f"C5 envelopes: {result.envelope_path}")
    typer.echo(f"Greeting sheet: {result.greeting_path}")


@app.command("list")
def list_birthdays(
    source: Optional[Path] = SOURCE_OPTION,
    week_of: Optional[str] = WEEK_OF_OPTION,
    timezone: Optional[str] = TIMEZONE_OPTION,
    aliases: Optional[Path] = ALIASES_OPTION,
) -> None:
    """Print this week's birthdays without writing any document."""

    reference = _parse_week_of(week_of)
    try:
        result = _build_pipeline(source, None, timezone, aliases).collect(reference)
    except ConfigError as exc:
        typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from exc
    except (BirthdayFlowError, OSError) as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    for skipped in result.skipped:
        typer.secho(f"row {skipped.row_number} skipped: {skipped.reason} {skipped.raw}".rstrip(), err=True)
    if result.is_empty:
        typer.echo(f"No birthdays between {result.window.label()}.")
        return
    for record in result.records:
        typer.echo(f"{record.celebration_date:%d.%m.%Y}  {record.name}")


def main() -> None:  # pragma: no cover - console script
    app()


if __name__ == "__main__":  # pragma: no cover
    main()

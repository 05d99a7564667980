"""Quote and greeting resolution."""

from __future__ import annotations

from datetime import date

import pytest

from birthdayflow.services.records.enrich import (
    DEFAULT_BIBLE_VERSES,
    DEFAULT_GREETINGS,
    StaticText,
    TemplateText,
    enrich_records,
    fill_placeholders,
)
from birthdayflow.services.records.models import MatchedRecord


@pytest.fixture()
def matched(person_factory):
    def _build(name: str = "Anna Muster", **kwargs) -> MatchedRecord:
        return MatchedRecord(person=person_factory(name, **kwargs), celebration_date=date(2026, 6, 3))

    return _build


def test_defaults_cycle_by_position(matched) -> None:
    records = [matched(f"Person {i}") for i in range(13)]
    enriched = enrich_records(records)
    for index, item in enumerate(enriched):
        assert item.bible_verse_resolved == DEFAULT_BIBLE_VERSES[index % len(DEFAULT_BIBLE_VERSES)]
        expected = DEFAULT_GREETINGS[index % len(DEFAULT_GREETINGS)].render(records[index])
        assert item.greeting_resolved == expected


def test_enrichment_is_reproducible(matched) -> None:
    records = [matched(f"Person {i}") for i in range(8)]
    assert enrich_records(records) == enrich_records(records)


def test_own_values_win(matched) -> None:
    record = matched(bible_verse="  Psalm 23,1  ", greeting=" Alles Gute! ")
    enriched = enrich_records([record])[0]
    assert enriched.bible_verse_resolved == "Psalm 23,1"
    assert enriched.greeting_resolved == "Alles Gute!"


def test_placeholders_are_case_insensitive(matched) -> None:
    record = matched("Anna Muster", first_name="Anna")
    text = fill_placeholders("Liebe {{ FirstName }}, liebe {{vorname}} ({{NAME}})", record)
    assert text == "Liebe Anna, liebe Anna (Anna Muster)"


def test_first_name_placeholder_falls_back_to_name(matched) -> None:
    record = matched("Anna Muster", first_name="")
    assert fill_placeholders("Hallo {{firstName}}", record) == "Hallo Anna Muster"


def test_default_templates_prefer_first_name(matched) -> None:
    record = matched("Anna Muster", first_name="Anna")
    greeting = enrich_records([record])[0].greeting_resolved
    assert "Anna," in greeting or "Anna!" in greeting
    assert "Muster" not in greeting


def test_default_variants() -> None:
    assert any(isinstance(item, StaticText) for item in DEFAULT_GREETINGS)
    assert any(isinstance(item, TemplateText) for item in DEFAULT_GREETINGS)


def test_custom_defaults(matched) -> None:
    records = [matched("A"), matched("B"), matched("C")]
    enriched = enrich_records(
        records,
        verses=["v1", "v2"],
        greetings=[StaticText("static"), TemplateText(lambda r: f"hi {r.name}")],
    )
    assert [e.bible_verse_resolved for e in enriched] == ["v1", "v2", "v1"]
    assert [e.greeting_resolved for e in enriched] == ["static", "hi B", "static"]


def test_empty_defaults_rejected(matched) -> None:
    with pytest.raises(ValueError):
        enrich_records([matched()], verses=[])

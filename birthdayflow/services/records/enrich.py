"""Quote and greeting resolution for matched records.

Defaults are picked by batch position (``index % len(defaults)``) so the same
input order always yields the same documents.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Sequence, Union

from .models import EnrichedRecord, MatchedRecord


@dataclass(frozen=True, slots=True)
class StaticText:
    text: str

    def render(self, record: MatchedRecord) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class TemplateText:
    build: Callable[[MatchedRecord], str]

    def render(self, record: MatchedRecord) -> str:
        return self.build(record)


DefaultText = Union[StaticText, TemplateText]


DEFAULT_BIBLE_VERSES: Sequence[str] = (
    "Denn ich weiß wohl, was ich für Gedanken über euch habe, spricht der HERR: Gedanken des "
    "Friedens und nicht des Leides, dass ich euch gebe Zukunft und Hoffnung. (Jeremia 29,11)",
    "Der HERR ist meine Stärke und mein Schild; auf ihn hofft mein Herz, und mir ist geholfen. "
    "(Psalm 28,7)",
    "Der HERR segne dich und behüte dich; der HERR lasse sein Angesicht leuchten über dir und "
    "sei dir gnädig. (4. Mose 6,24-25)",
    "Gott ist unsere Zuflucht und Stärke, eine Hilfe in Nöten, wohl bewährt. (Psalm 46,2)",
    "Denn du bist meine Zuversicht, HERR; du bist meine Hoffnung von Jugend auf. (Psalm 71,5)",
)

DEFAULT_GREETINGS: Sequence[DefaultText] = (
    TemplateText(
        lambda r: f"Liebe(r) {r.person.salutation}, möge Gottes Güte dich an deinem Geburtstag "
        "ganz besonders umgeben und dir neue Kraft schenken."
    ),
    TemplateText(
        lambda r: f"Herzlichen Glückwunsch, {r.person.salutation}! Wir freuen uns mit dir und beten, "
        "dass du in diesem neuen Lebensjahr Gottes Nähe ganz intensiv erlebst."
    ),
    TemplateText(
        lambda r: f"{r.person.salutation}, von Herzen alles Gute! Möge der Herr dir Weisheit, "
        "Freude und Mut für jeden Tag schenken."
    ),
    TemplateText(
        lambda r: f"Zum Geburtstag wünschen wir dir, {r.person.salutation}, dass du überreich "
        "beschenkt wirst mit Segen, Frieden und liebevollen Momenten."
    ),
    TemplateText(
        lambda r: f"Gesegneten Geburtstag, {r.person.salutation}! Gott halte seine schützende Hand "
        "über dir und erfülle dein Herz mit Hoffnung."
    ),
    StaticText(
        "Alles Gute zum Geburtstag! Wir danken Gott für dich und wünschen dir ein gesegnetes "
        "neues Lebensjahr."
    ),
)

_NAME_PLACEHOLDER = re.compile(r"{{\s*name\s*}}", re.IGNORECASE)
_FIRST_NAME_PLACEHOLDER = re.compile(r"{{\s*(?:first_?name|vorname)\s*}}", re.IGNORECASE)


def fill_placeholders(template: str, record: MatchedRecord) -> str:
    """Substitute ``{{name}}`` and ``{{firstName}}`` (also ``{{vorname}}``)."""

    text = _NAME_PLACEHOLDER.sub(lambda _: record.person.name, template)
    return _FIRST_NAME_PLACEHOLDER.sub(lambda _: record.person.salutation, text)


def resolve_verse(record: MatchedRecord, index: int, defaults: Sequence[str] = DEFAULT_BIBLE_VERSES) -> str:
    own = record.person.bible_verse.strip()
    if own:
        return own
    return defaults[index % len(defaults)]


def resolve_greeting(
    record: MatchedRecord, index: int, defaults: Sequence[DefaultText] = DEFAULT_GREETINGS
) -> str:
    own = record.person.greeting.strip()
    if own:
        return fill_placeholders(own, record)
    return defaults[index % len(defaults)].render(record)


def enrich_records(
    records: Sequence[MatchedRecord],
    verses: Sequence[str] = DEFAULT_BIBLE_VERSES,
    greetings: Sequence[DefaultText] = DEFAULT_GREETINGS,
) -> List[EnrichedRecord]:
    if not verses or not greetings:
        raise ValueError("default verse and greeting lists must not be empty")
    return [
        EnrichedRecord(
            matched=record,
            bible_verse_resolved=resolve_verse(record, index, verses),
            greeting_resolved=resolve_greeting(record, index, greetings),
        )
        for index, record in enumerate(records)
    ]

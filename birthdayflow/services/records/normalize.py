"""Text normalization shared by header matching, address dedup and sorting."""

from __future__ import annotations

import re

from unidecode import unidecode

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def simplify(text: object) -> str:
    """Trim, lowercase, transliterate diacritics and drop non-alphanumerics.

    >>> simplify(" Straße ")
    'strasse'
    """

    return _NON_ALNUM.sub("", unidecode(str(text).strip()).lower())


def collation_key(text: str) -> tuple[str, str]:
    """Transliterated, case-folded sort key; the exact text breaks remaining ties.

    Independent of the configured locale, so 'Ärni' sorts with 'arni'.
    """

    return unidecode(text).casefold(), text

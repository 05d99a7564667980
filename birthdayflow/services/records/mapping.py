"""Header mapping for loosely structured sheets."""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, List, Mapping, Sequence

from .models import MULTI_COLUMN_FIELDS, FieldMap
from .normalize import simplify

LOGGER = logging.getLogger(__name__)

AliasTable = Mapping[str, FrozenSet[str]]


def build_field_map(headers: Sequence[object], aliases: AliasTable | None = None) -> FieldMap:
    """Resolve header cells to semantic fields.

    The first matching column wins for single-valued fields; every column matching
    the address aliases is collected in header order. Unrecognised headers are
    ignored, so a sheet without known headers yields an empty map.
    """

    if aliases is None:
        from birthdayflow.config import load_alias_table

        aliases = load_alias_table()
    columns: Dict[str, int] = {}
    address: List[int] = []
    unmatched: List[str] = []

    for index, header in enumerate(headers):
        simplified = simplify("" if header is None else header)
        field = next((key for key, spellings in aliases.items() if simplified in spellings), None)
        if field is None:
            if simplified:
                unmatched.append(str(header))
            continue
        if field in MULTI_COLUMN_FIELDS:
            address.append(index)
        elif field not in columns:
            columns[field] = index

    if unmatched:
        LOGGER.debug("Ignoring unmapped columns: %s", unmatched)
    return FieldMap(
        columns=columns,
        address=tuple(address),
        headers=tuple("" if h is None else str(h) for h in headers),
    )

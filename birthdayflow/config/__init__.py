"""Configuration files shipped with birthdayflow.

Holds the header alias table used to recognise spreadsheet columns. The table is
plain data: adding a spelling means editing ``aliases.yaml``, not code.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, FrozenSet, List, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from birthdayflow.core.errors import ConfigError
from birthdayflow.services.records.models import FIELDS
from birthdayflow.services.records.normalize import simplify


CONFIG_DIR = Path(__file__).resolve().parent
DEFAULT_ALIAS_PATH = CONFIG_DIR / "aliases.yaml"

AliasTable = Mapping[str, FrozenSet[str]]


class AliasFile(BaseModel):
    """Schema of ``aliases.yaml``."""

    model_config = ConfigDict(extra="forbid")

    fields: Dict[str, List[str]] = Field(default_factory=dict)


def load_alias_table(path: str | Path | None = None) -> AliasTable:
    """Load and normalize the alias table.

    Field order follows ``FIELDS`` so a header that happens to match aliases of two
    fields is always claimed by the same one.
    """

    alias_path = Path(path) if path else DEFAULT_ALIAS_PATH
    if not alias_path.exists():
        raise ConfigError(f"Alias file not found: {alias_path}")
    with alias_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigError("Alias file must contain a mapping")
    try:
        parsed = AliasFile.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid alias file {alias_path}: {exc}") from exc

    unknown = sorted(set(parsed.fields) - set(FIELDS))
    if unknown:
        raise ConfigError(f"Unknown fields in alias file: {', '.join(unknown)}")

    table: Dict[str, FrozenSet[str]] = {}
    for field in FIELDS:
        spellings = parsed.fields.get(field, [])
        normalized = frozenset(filter(None, (simplify(str(item)) for item in spellings)))
        if normalized:
            table[field] = normalized
    return table


__all__ = ["AliasTable", "DEFAULT_ALIAS_PATH", "load_alias_table"]

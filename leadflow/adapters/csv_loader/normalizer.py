"""CSV column normalization — handles BOM, trailing spaces, encoding quirks."""

from __future__ import annotations

import re

_TRUE_VALUES = {"1", "true", "yes", "y", "x", "có", "co", "active"}


def normalize_column_name(name: str) -> str:
    """Normalize a CSV column name.

    - Removes BOM characters (\\ufeff)
    - Replaces runs of spaces / non-breaking spaces with a single underscore
    - Lowercases
    - Strips non-word characters (Vietnamese letters are kept)
    """
    name = name.replace("\ufeff", "").strip()
    name = re.sub(r"[\s\u00a0]+", "_", name)
    name = name.lower()
    return re.sub(r"[^\w]", "", name, flags=re.UNICODE)


def clean_string(value: str | None) -> str | None:
    """Strip whitespace and return None for empty strings."""
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def parse_codes(raw: str | None) -> list[str]:
    """Parse code lists like 'PG01, PG02; PG03' into ['PG01', 'PG02', 'PG03'].

    Order is kept, duplicates dropped, codes upper-cased.
    """
    if not raw:
        return []
    parts = re.split(r"[,;\s]+", raw.strip())
    return list(dict.fromkeys(p.strip().upper() for p in parts if p.strip()))


def parse_bool(raw: str | None, default: bool = True) -> bool:
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_VALUES

# core/utils/normalize.py
"""Conversion of stored edition rows into API-shaped records.

Everything here is a pure function: no I/O and no mutation of the input.
Normalizing an already normalized record yields the same record.
"""
import re
from typing import Any, Iterable, List, Optional, Union

from core.models.edition import NormalizedEdition

RUNTIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2}):(\d{2})")
SECONDS_PATTERN = re.compile(r"\d+", re.ASCII)

FALSY_STRINGS = {"", "0", "false", "f", "no", "n", "off"}

OPTIONAL_TEXT_FIELDS = (
    "narrator", "asin", "isbn", "release_date",
    "language", "publisher", "series_name",
)


def _get(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def format_seconds(total: int) -> str:
    """Format a number of seconds as zero-padded HH:MM:SS"""
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def normalize_runtime(runtime: Union[str, int, None]) -> Optional[str]:
    """Normalize a runtime to HH:MM:SS where possible.

    - "H:MM:SS" / "HH:MM:SS" is kept, with the hour padded to two digits
    - an integer (or all-digit string) is a count of seconds
    - anything else is returned unchanged
    """
    if runtime is None or isinstance(runtime, bool):
        return None
    if isinstance(runtime, int):
        return format_seconds(runtime) if runtime >= 0 else str(runtime)

    value = str(runtime).strip()
    if not value:
        return None

    match = RUNTIME_PATTERN.fullmatch(value)
    if match:
        hours, minutes, seconds = match.groups()
        return f"{int(hours):02d}:{minutes}:{seconds}"

    if SECONDS_PATTERN.fullmatch(value):
        return format_seconds(int(value))

    return runtime


def coerce_flag(value: Any) -> bool:
    """Coerce a stored flag (bool, 0/1, "true"/"false", NULL) to a bool"""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() not in FALSY_STRINGS
    return bool(value)


def coerce_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return None


def coerce_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip()) if not isinstance(value, (int, float)) else float(value)
    except (TypeError, ValueError):
        return None
    # NaN is not a position
    return number if number == number else None


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def split_list(value: Union[str, Iterable[str], None]) -> List[str]:
    """Split a comma-joined list, trimming each item and dropping empty ones"""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = list(value)
    return [item.strip() for item in items if item is not None and str(item).strip()]


def join_list(value: Union[str, Iterable[str], None]) -> Optional[str]:
    """Inverse of split_list, used when storing list payloads"""
    items = split_list(value)
    return ", ".join(items) if items else None


def normalize_edition(record: Any) -> NormalizedEdition:
    """Turn one stored edition (ORM row or mapping) into a NormalizedEdition"""
    data = {
        "id": _get(record, "id"),
        "work_id": _get(record, "work_id"),
        "type": _get(record, "type"),
        "format": _get(record, "format"),
        "abridged": coerce_flag(_get(record, "abridged")),
        "explicit": coerce_flag(_get(record, "explicit")),
        "page_count": coerce_int(_get(record, "page_count")),
        "series_position": coerce_float(_get(record, "series_position")),
        "genres": split_list(_get(record, "genres")),
        "tags": split_list(_get(record, "tags")),
        "runtime": normalize_runtime(_get(record, "runtime")),
        "updated_at": _get(record, "updated_at"),
        "title": _get(record, "title"),
    }
    for name in OPTIONAL_TEXT_FIELDS:
        data[name] = optional_text(_get(record, name))

    return NormalizedEdition(**data)

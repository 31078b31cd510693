"""Transaction date parsing and rendering.

Journal dates are ``YYYY`` followed by a month and a day separated by one of
``-``, ``/`` or ``.``; whichever separator appears first must be reused for
the second one (``2024-01/05`` is not a date). Month and day may be one or
two digits. Only coarse range checks are applied (month 1..12, day 1..31);
calendar validity such as February 30th is intentionally not checked.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .options import DateFormatStyle

TRANSACTION_DATE_PREFIX = re.compile(r"^(\d{4})([-/.])(\d{1,2})\2(\d{1,2})", re.ASCII)

_SEPARATORS: dict[str, str] = {
    "YYYY-MM-DD": "-",
    "YYYY/MM/DD": "/",
    "YYYY.MM.DD": ".",
}


@dataclass(frozen=True, slots=True)
class DateComponents:
    year: int
    month: int
    day: int


@dataclass(frozen=True, slots=True)
class DateMatch:
    """A recognized date prefix: the parsed components and the raw text."""

    components: DateComponents
    raw: str


def extract_date_components(text: str) -> DateMatch | None:
    """Parse the date at the very start of ``text``.

    Returns ``None`` when the prefix is not a date or month/day are out of
    range. The caller is expected to pass trimmed text.
    """

    match = TRANSACTION_DATE_PREFIX.match(text)
    if match is None:
        return None

    year, month, day = int(match.group(1)), int(match.group(3)), int(match.group(4))
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return None

    return DateMatch(components=DateComponents(year=year, month=month, day=day), raw=match.group(0))


def format_date(components: DateComponents, style: DateFormatStyle = "YYYY-MM-DD") -> str:
    sep = _SEPARATORS.get(style, "-")
    return f"{components.year:04d}{sep}{components.month:02d}{sep}{components.day:02d}"


def to_iso_date(components: DateComponents) -> str:
    """Render as ``YYYY-MM-DD``; used as a lexicographic sort key."""

    return format_date(components, "YYYY-MM-DD")


__all__ = [
    "TRANSACTION_DATE_PREFIX",
    "DateComponents",
    "DateMatch",
    "extract_date_components",
    "format_date",
    "to_iso_date",
]

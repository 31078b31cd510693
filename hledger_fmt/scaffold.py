"""Monthly journal file scaffolding (``09-sep.journal`` style)."""

from __future__ import annotations

from datetime import date

MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "jan",
    "feb",
    "mar",
    "apr",
    "may",
    "jun",
    "jul",
    "aug",
    "sep",
    "oct",
    "nov",
    "dec",
)


def _month_abbreviation(month: int) -> str:
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise ValueError(f"month must be an integer in 1..12, got {month!r}")
    return MONTH_ABBREVIATIONS[month - 1]


def journal_file_name(month: int) -> str:
    """``journal_file_name(9) == "09-sep.journal"``."""

    abbreviation = _month_abbreviation(month)
    return f"{month:02d}-{abbreviation}.journal"


def journal_file_header(month: int, year: int, today: date) -> str:
    """Initial content for a new monthly journal: a short comment header."""

    title = _month_abbreviation(month).capitalize()
    return f"; {title} {year} Journal\n;\n; Created on {today.isoformat()}\n\n"


__all__ = ["MONTH_ABBREVIATIONS", "journal_file_header", "journal_file_name"]

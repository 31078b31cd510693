"""Chronological reordering of journal transactions.

Sorting never reformats: each transaction keeps its original text, including
the way its date is written. Only the order changes, and transactions that
share a date keep their relative order.
"""

from __future__ import annotations

from .lines import split_lines
from .logging_setup import get_logger
from .segmenter import segment_for_sort

_logger = get_logger("hledger_fmt.sorter")


def sort_journal(text: str) -> str:
    """Return ``text`` with its transactions stably sorted by date.

    Layout of the result: leading content (comments/directives before the
    first transaction), one blank line, then the transactions separated by
    exactly one blank line. A trailing newline is kept when the input had one.
    """

    lines, newline = split_lines(text)
    parsed = segment_for_sort(lines)

    # sorted() is stable, so same-day transactions keep their input order.
    transactions = sorted(parsed.transactions, key=lambda t: t.sort_key)
    _logger.debug("sorting %d transactions", len(transactions))

    blocks: list[str] = []
    if parsed.leading:
        blocks.append(newline.join(parsed.leading))
    blocks.extend(newline.join(t.lines) for t in transactions)

    result = (newline * 2).join(blocks)
    if text.endswith("\n") and not result.endswith("\n"):
        result += newline
    return result


__all__ = ["sort_journal"]

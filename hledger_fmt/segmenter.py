"""Group journal lines into transactions and free text.

A single pass over the lines drives a three-state machine
(``OUTSIDE``, ``IN_TRANSACTION``, ``IN_COMMENT_BLOCK``). Two flavours share
the same classification rules and differ only in how blank lines are read:

- :func:`segment_for_format` (format mode): a blank line always ends the open
  transaction. The output is a flat list of segments in document order, with
  blank separators already collapsed.
- :func:`segment_for_sort` (sort mode): a blank line ends the open
  transaction only when the next non-blank line is itself a header; any other
  blank line is kept inside the transaction so multi-paragraph notes travel
  with it when transactions are reordered.

Nothing here rewrites text; formatting happens in ``hledger_fmt.formatter``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto

from .dates import extract_date_components, to_iso_date
from .lines import (
    is_comment_block_end,
    is_comment_block_start,
    is_comment_line,
    is_transaction_header_line,
)
from .logging_setup import get_logger

_logger = get_logger("hledger_fmt.segmenter")


class SegmenterState(Enum):
    OUTSIDE = auto()
    IN_TRANSACTION = auto()
    IN_COMMENT_BLOCK = auto()


@dataclass(frozen=True, slots=True)
class Transaction:
    """Raw lines of one transaction, header first."""

    header_line: str
    lines: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Passthrough:
    """A line emitted verbatim; blank separators are the empty string."""

    text: str


type Segment = Transaction | Passthrough


@dataclass(frozen=True, slots=True)
class DatedTransaction:
    """A transaction with its ISO ``YYYY-MM-DD`` sort key.

    The key is derived from the header; the stored lines keep the original
    date text.
    """

    sort_key: str
    lines: tuple[str, ...]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True, slots=True)
class SortSegmentation:
    leading: tuple[str, ...] = ()
    transactions: tuple[DatedTransaction, ...] = field(default_factory=tuple)


def segment_for_format(lines: Sequence[str]) -> list[Segment]:
    """Segment lines for a full-document format pass.

    Blank-line handling: no blank segment precedes the first content, exactly
    one blank follows every transaction (extra blanks after it are dropped),
    and at most one trailing blank segment is kept. Blank lines between free
    text lines are preserved as-is (normalized to ``""``).
    """

    segments: list[Segment] = []
    state = SegmenterState.OUTSIDE
    open_lines: list[str] = []
    last_was_transaction = False
    has_content = False

    def close_transaction() -> None:
        segments.append(Transaction(header_line=open_lines[0], lines=tuple(open_lines)))
        open_lines.clear()

    for line in lines:
        trimmed = line.strip()

        if state is SegmenterState.IN_COMMENT_BLOCK:
            segments.append(Passthrough(line))
            if is_comment_block_end(trimmed):
                state = SegmenterState.OUTSIDE
            continue

        if is_comment_block_start(trimmed):
            if state is SegmenterState.IN_TRANSACTION:
                close_transaction()
            segments.append(Passthrough(line))
            state = SegmenterState.IN_COMMENT_BLOCK
            last_was_transaction = False
            has_content = True
            continue

        if not trimmed:
            if state is SegmenterState.IN_TRANSACTION:
                close_transaction()
                segments.append(Passthrough(""))
                state = SegmenterState.OUTSIDE
                last_was_transaction = True
                has_content = True
            elif not last_was_transaction and has_content:
                segments.append(Passthrough(""))
            continue

        if is_comment_line(trimmed):
            if state is SegmenterState.IN_TRANSACTION:
                open_lines.append(line)
            else:
                segments.append(Passthrough(line))
                last_was_transaction = False
                has_content = True
            continue

        if is_transaction_header_line(trimmed):
            if state is SegmenterState.IN_TRANSACTION:
                close_transaction()
                segments.append(Passthrough(""))
            open_lines.append(line)
            state = SegmenterState.IN_TRANSACTION
            last_was_transaction = False
            has_content = True
        elif state is SegmenterState.IN_TRANSACTION:
            open_lines.append(line)
        else:
            segments.append(Passthrough(line))
            last_was_transaction = False
            has_content = True

    if state is SegmenterState.IN_TRANSACTION and open_lines:
        close_transaction()
        segments.append(Passthrough(""))

    if state is SegmenterState.IN_COMMENT_BLOCK:
        _logger.debug("comment block left open at end of input")

    # Collapse trailing blank separators down to one.
    while (
        len(segments) > 1
        and segments[-1] == Passthrough("")
        and segments[-2] == Passthrough("")
    ):
        segments.pop()

    _logger.debug(
        "segmented %d lines into %d transactions",
        len(lines),
        sum(1 for s in segments if isinstance(s, Transaction)),
    )
    return segments


def _next_non_blank_is_header(lines: Sequence[str], start: int) -> bool:
    for candidate in lines[start:]:
        if candidate.strip():
            return is_transaction_header_line(candidate)
    return False


def _strip_trailing_blanks(lines: list[str]) -> list[str]:
    end = len(lines)
    while end > 0 and not lines[end - 1].strip():
        end -= 1
    return lines[:end]


def segment_for_sort(lines: Sequence[str]) -> SortSegmentation:
    """Segment lines for reordering.

    Lines before the first transaction become leading content (trailing
    blanks removed). Everything between two transactions belongs to the
    earlier one. Blank lines outside any transaction after the first header
    are separators and are dropped.
    """

    leading: list[str] = []
    transactions: list[DatedTransaction] = []
    state = SegmenterState.OUTSIDE
    open_lines: list[str] = []
    open_key = ""
    has_seen_transaction = False
    # State to return to when a comment block closes.
    resume_state = SegmenterState.OUTSIDE

    def close_transaction() -> None:
        body = _strip_trailing_blanks(open_lines)
        transactions.append(DatedTransaction(sort_key=open_key, lines=tuple(body)))
        open_lines.clear()

    def keep(line: str) -> None:
        if resume_state is SegmenterState.IN_TRANSACTION:
            open_lines.append(line)
        elif not has_seen_transaction:
            leading.append(line)

    for index, line in enumerate(lines):
        trimmed = line.strip()

        if state is SegmenterState.IN_COMMENT_BLOCK:
            keep(line)
            if is_comment_block_end(trimmed):
                state = resume_state
            continue

        if is_comment_block_start(trimmed):
            resume_state = state
            keep(line)
            state = SegmenterState.IN_COMMENT_BLOCK
            continue

        date = extract_date_components(trimmed)
        if date is not None:
            if state is SegmenterState.IN_TRANSACTION:
                close_transaction()
            has_seen_transaction = True
            open_key = to_iso_date(date.components)
            open_lines.append(line)
            state = resume_state = SegmenterState.IN_TRANSACTION
            continue

        if state is SegmenterState.IN_TRANSACTION:
            if not trimmed and _next_non_blank_is_header(lines, index + 1):
                close_transaction()
                state = resume_state = SegmenterState.OUTSIDE
            else:
                open_lines.append(line)
        elif not has_seen_transaction:
            leading.append(line)

    if state is SegmenterState.IN_COMMENT_BLOCK:
        _logger.debug("comment block left open at end of input")
        state = resume_state
    if state is SegmenterState.IN_TRANSACTION and open_lines:
        close_transaction()

    return SortSegmentation(
        leading=tuple(_strip_trailing_blanks(leading)),
        transactions=tuple(transactions),
    )


__all__ = [
    "DatedTransaction",
    "Passthrough",
    "Segment",
    "SegmenterState",
    "SortSegmentation",
    "Transaction",
    "segment_for_format",
    "segment_for_sort",
]

"""Full-document formatting: transaction headers and posting alignment.

``format_journal`` segments the document (see ``hledger_fmt.segmenter``),
rewrites each transaction and reassembles the text. Free text, comment
blocks and directives pass through verbatim.

Within a transaction:

- The header is rebuilt as ``date [status] [(code)] [description]`` starting
  at column 0, with a trailing ``;`` comment re-appended untouched.
- Every posting with both an account and a recognizable amount is re-emitted
  as ``indent + account + padding + amount`` so that the first *digit* of
  each amount lands on the target column. Postings without an amount, and
  metadata lines, only get their indentation normalized.
- Comment lines stay where they are, verbatim.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .amounts import digits_prefix_length, format_amount_with_style
from .dates import extract_date_components, format_date
from .lines import (
    PostingDetail,
    extract_posting_detail,
    is_comment_line,
    is_metadata_posting_account,
    is_metadata_posting_line,
    split_lines,
)
from .options import FormatterOptions, normalize_formatter_options
from .segmenter import Transaction, segment_for_format

_HEADER_COMMENT = re.compile(r"\s*;.*$")
_HEADER_CODE = re.compile(r"\([^)]*\)")
_AMOUNT_DIGIT = re.compile(r"[0-9]")
_STATUS_MARKERS = ("*", "!")

# Minimum gap between an account name and its amount.
MIN_AMOUNT_GAP = 2


@dataclass(frozen=True, slots=True)
class PreparedPosting:
    """A posting line ready for alignment.

    ``amount`` is the style-converted amount text, or ``None`` when the line
    has no account/amount pair to align.
    """

    detail: PostingDetail
    amount: str | None
    digits_prefix: int


def format_transaction_header(header_line: str, options: FormatterOptions) -> str:
    """Normalize a header line; return it unchanged when it has no valid date."""

    comment_match = _HEADER_COMMENT.search(header_line)
    if comment_match is not None:
        comment = header_line[comment_match.start() :]
        without_comment = header_line[: comment_match.start()]
    else:
        comment = ""
        without_comment = header_line

    trimmed = without_comment.strip()
    if not trimmed:
        return header_line

    date = extract_date_components(trimmed)
    if date is None:
        return header_line

    remainder = trimmed[len(date.raw) :].lstrip()
    status = ""
    if remainder.startswith(_STATUS_MARKERS):
        status = remainder[0]
        remainder = remainder[1:].lstrip()

    code = ""
    code_match = _HEADER_CODE.match(remainder)
    if code_match is not None:
        code = code_match.group(0)
        remainder = remainder[code_match.end() :].lstrip()

    segments = [format_date(date.components, options.date_format), status, code, remainder]
    return " ".join(s for s in segments if s) + comment


def prepare_posting(line: str, options: FormatterOptions) -> PreparedPosting:
    detail = extract_posting_detail(line)
    if is_metadata_posting_line(detail.trimmed) or is_metadata_posting_account(detail.account):
        # Tags are re-indented only and never widen the amount column.
        detail = PostingDetail(trimmed=detail.trimmed, account=None, amount=None)
    if not detail.account:
        return PreparedPosting(detail=detail, amount=None, digits_prefix=0)

    # Text after the account that has no digit before any ";" (an inline
    # comment, say) is not an amount: the line is only re-indented.
    head = (detail.amount or "").split(";", 1)[0]
    if _AMOUNT_DIGIT.search(head) is None:
        return PreparedPosting(detail=detail, amount=None, digits_prefix=0)

    amount = format_amount_with_style(detail.amount, options.negative_commodity_style)
    if not amount:
        return PreparedPosting(detail=detail, amount=None, digits_prefix=0)

    amount = amount.strip()
    return PreparedPosting(detail=detail, amount=amount, digits_prefix=digits_prefix_length(amount))


def target_digits_column(postings: Sequence[PreparedPosting], options: FormatterOptions) -> int:
    """Column where every amount's first digit should land.

    ``fixedColumn`` uses the configured column. ``widest`` takes the larger
    of "longest account + gap" and, for each aligned posting, "its account +
    gap + its sign/symbol width".
    """

    if options.amount_alignment != "widest":
        return options.amount_column_position

    indent = options.indentation_width
    longest_account = max(
        (len(p.detail.account) for p in postings if p.detail.account), default=0
    )
    candidates = [
        indent + len(p.detail.account) + p.digits_prefix + MIN_AMOUNT_GAP
        for p in postings
        if p.detail.account and p.amount
    ]
    return max([indent + longest_account + MIN_AMOUNT_GAP, *candidates])


def render_posting(posting: PreparedPosting, digits_column: int, options: FormatterOptions) -> str:
    indent = " " * options.indentation_width
    detail = posting.detail
    if not detail.trimmed:
        return ""
    if not detail.account or not posting.amount:
        return f"{indent}{detail.trimmed}"

    padding = max(
        MIN_AMOUNT_GAP,
        digits_column - (options.indentation_width + len(detail.account)) - posting.digits_prefix,
    )
    return f"{indent}{detail.account}{' ' * padding}{posting.amount}"


def format_transaction(lines: Sequence[str], options: FormatterOptions) -> list[str]:
    """Format one transaction (header first) and return its new lines."""

    if not lines:
        return []

    header, *body = lines
    formatted = [format_transaction_header(header, options)]

    postings = {
        i: prepare_posting(line, options)
        for i, line in enumerate(body)
        if not is_comment_line(line)
    }
    digits_column = target_digits_column(list(postings.values()), options)

    for i, line in enumerate(body):
        posting = postings.get(i)
        if posting is None:
            formatted.append(line)
        else:
            formatted.append(render_posting(posting, digits_column, options))
    return formatted


def format_journal(
    text: str,
    options: FormatterOptions | Mapping[str, Any] | int | None = None,
) -> str:
    """Format a whole journal document.

    Parameters
    ----------
    text:
        Journal text. CRLF line endings are preserved.
    options:
        Anything :func:`~hledger_fmt.options.normalize_formatter_options`
        accepts; invalid fields fall back to their defaults.

    Returns
    -------
    str
        The formatted text. Every transaction is followed by exactly one
        blank line (so a document ending in a transaction ends with a
        newline); leading blank lines are removed.
    """

    opts = normalize_formatter_options(options)
    lines, newline = split_lines(text)

    output: list[str] = []
    for segment in segment_for_format(lines):
        if isinstance(segment, Transaction):
            output.extend(format_transaction(segment.lines, opts))
        else:
            output.append(segment.text)

    while output and output[0] == "":
        output.pop(0)

    return newline.join(output)


__all__ = [
    "MIN_AMOUNT_GAP",
    "PreparedPosting",
    "format_journal",
    "format_transaction",
    "format_transaction_header",
    "prepare_posting",
    "render_posting",
    "target_digits_column",
]

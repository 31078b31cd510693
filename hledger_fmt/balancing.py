"""Balancing-amount inference for a transaction with one open posting.

Given the lines of a transaction in which exactly one posting has no amount,
:func:`calculate_balancing_amount` computes the amount that brings the
transaction to zero and returns it as insertion text: leading spaces followed
by the formatted amount. The spacing mirrors what ``format_journal`` would
produce for the configured alignment mode, anchored on what the user has
already typed on the current line.

No suggestion (``None``) is a normal outcome, returned when:

- zero or several postings lack an amount,
- the existing amounts use more than one currency,
- the transaction already balances.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .amounts import (
    ParsedAmount,
    digits_prefix_length,
    format_amount_value,
    format_amount_with_style,
    parse_amount,
)
from .formatter import MIN_AMOUNT_GAP
from .lines import (
    ACCOUNT_AMOUNT_SEPARATOR,
    extract_posting_detail,
    is_comment_line,
    is_metadata_posting_account,
    is_metadata_posting_line,
    is_transaction_header_line,
    leading_whitespace_length,
    split_lines,
)
from .logging_setup import get_logger
from .options import FormatterOptions, normalize_formatter_options

_logger = get_logger("hledger_fmt.balancing")

_AMOUNT_START = re.compile(r"[\d$€£¥-]")


@dataclass(frozen=True, slots=True)
class TransactionLines:
    """A transaction located in a document: header index and its lines."""

    header_line_index: int
    lines: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class BalancingContext:
    """What the user has typed so far on the line receiving the suggestion."""

    current_line_text: str | None = None
    cursor_column: int | None = None


@dataclass(frozen=True, slots=True)
class _Posting:
    line: str
    account: str
    amount: ParsedAmount | None


def _collect_postings(lines: Sequence[str]) -> list[_Posting]:
    postings: list[_Posting] = []
    for line in lines:
        trimmed = line.strip()
        if not trimmed or is_comment_line(trimmed) or is_metadata_posting_line(trimmed):
            continue
        detail = extract_posting_detail(line)
        if not detail.account or is_metadata_posting_account(detail.account):
            continue
        amount = parse_amount(detail.amount) if detail.amount else None
        postings.append(_Posting(line=line, account=detail.account, amount=amount))
    return postings


def _account_end_column(line: str, account: str, indent_length: int) -> int:
    index = line.find(account, indent_length)
    if index != -1:
        return index + len(account)
    return indent_length + len(account)


def _digits_column_in_line(line: str, start: int) -> int | None:
    # First ASCII digit after ``start``, not looking past a comment.
    for index in range(max(0, start), len(line)):
        char = line[index]
        if char == ";":
            break
        if "0" <= char <= "9":
            return index
    return None


def _existing_digits_column(posting: _Posting, options: FormatterOptions) -> int | None:
    detail = extract_posting_detail(posting.line)
    if not detail.amount:
        return None

    indent_length = leading_whitespace_length(posting.line)
    account_end = _account_end_column(posting.line, posting.account, indent_length)
    column = _digits_column_in_line(posting.line, account_end)
    if column is not None:
        return column

    formatted = format_amount_with_style(detail.amount, options.negative_commodity_style)
    prefix = digits_prefix_length(formatted.strip()) if formatted else 0
    return indent_length + len(posting.account) + prefix + MIN_AMOUNT_GAP


def calculate_balancing_amount(
    transaction: TransactionLines,
    options: FormatterOptions | Mapping[str, Any] | None,
    account_name: str,
    context: BalancingContext | None = None,
) -> str | None:
    """Return padding + amount that balances ``transaction``, or ``None``.

    Parameters
    ----------
    transaction:
        The transaction lines; the first one is the header and is skipped.
    options:
        Formatter options controlling sign style and alignment.
    account_name:
        Account on the line that will receive the amount.
    context:
        Current line text and cursor column. Without it the suggestion is
        computed as if the cursor sat right after the account name on a
        line indented by ``indentation_width``.
    """

    opts = normalize_formatter_options(options)
    postings = _collect_postings(transaction.lines[1:])

    missing = sum(1 for p in postings if p.amount is None)
    if missing != 1:
        _logger.debug("no balancing suggestion: %d postings without amount", missing)
        return None

    totals: dict[str, Decimal] = {}
    for posting in postings:
        if posting.amount is not None:
            currency = posting.amount.currency
            totals[currency] = totals.get(currency, Decimal(0)) + posting.amount.value

    if len(totals) != 1:
        _logger.debug("no balancing suggestion: %d currencies", len(totals))
        return None

    ((currency, total),) = totals.items()
    balancing_value = -total
    if balancing_value == 0:
        _logger.debug("no balancing suggestion: transaction already balances")
        return None

    formatted = format_amount_value(balancing_value, currency, opts.negative_commodity_style)
    digits_prefix = digits_prefix_length(formatted)

    current_line = (context.current_line_text if context else None) or ""
    if current_line:
        current_indent = leading_whitespace_length(current_line)
        account_end = _account_end_column(current_line, account_name, current_indent)
    else:
        current_indent = opts.indentation_width
        account_end = current_indent + len(account_name)

    cursor_column = account_end
    if context is not None and context.cursor_column is not None:
        cursor_column = context.cursor_column

    minimum_digits_column = account_end + MIN_AMOUNT_GAP + digits_prefix
    cursor_digits_column = max(minimum_digits_column, cursor_column + digits_prefix)

    if opts.amount_alignment == "widest":
        existing_columns = [
            column
            for posting in postings
            if posting.amount is not None
            and (column := _existing_digits_column(posting, opts)) is not None
        ]
        longest_account = max([len(p.account) for p in postings] + [len(account_name)])
        fallback_column = current_indent + longest_account + digits_prefix + MIN_AMOUNT_GAP
        digits_column = max([fallback_column, cursor_digits_column, *existing_columns])
    else:
        digits_column = max(opts.amount_column_position, cursor_digits_column)

    # Only add what is missing beyond the spacing already typed.
    existing_spacing = max(0, cursor_column - account_end)
    base_padding = max(MIN_AMOUNT_GAP, digits_column - account_end - digits_prefix)
    padding = max(0, base_padding - existing_spacing)
    return " " * padding + formatted


def find_transaction_at(lines: Sequence[str], line_index: int) -> TransactionLines | None:
    """Locate the transaction containing ``line_index`` (0-based).

    Walks back to the nearest header, giving up at a blank line, then forward
    to the line before the next blank line or header.
    """

    if not 0 <= line_index < len(lines):
        return None

    header_index = -1
    for index in range(line_index, -1, -1):
        stripped = lines[index].strip()
        if is_transaction_header_line(stripped):
            header_index = index
            break
        if not stripped and index < line_index:
            return None
    if header_index == -1:
        return None

    end_index = line_index
    for index in range(line_index + 1, len(lines)):
        stripped = lines[index].strip()
        if not stripped or is_transaction_header_line(stripped):
            break
        end_index = index

    return TransactionLines(
        header_line_index=header_index,
        lines=tuple(lines[header_index : end_index + 1]),
    )


def _already_has_amount(trimmed: str) -> bool:
    parts = ACCOUNT_AMOUNT_SEPARATOR.split(trimmed)
    return len(parts) > 1 and _AMOUNT_START.search(parts[1]) is not None


def suggest_balancing_amount(
    text: str,
    line_index: int,
    cursor_column: int | None = None,
    options: FormatterOptions | Mapping[str, Any] | None = None,
) -> str | None:
    """Suggest a balancing amount for the posting on ``line_index``.

    Only indented posting lines without an amount qualify; headers,
    comments and metadata lines never get a suggestion. ``cursor_column``
    defaults to the end of the line.
    """

    lines, _newline = split_lines(text)
    if not 0 <= line_index < len(lines):
        return None

    line = lines[line_index]
    trimmed = line.strip()
    if not trimmed or not line[:1].isspace():
        return None
    if is_transaction_header_line(trimmed) or is_comment_line(trimmed):
        return None
    if is_metadata_posting_line(trimmed) or _already_has_amount(trimmed):
        return None

    detail = extract_posting_detail(line)
    if not detail.account or is_metadata_posting_account(detail.account):
        return None

    transaction = find_transaction_at(lines, line_index)
    if transaction is None:
        return None

    return calculate_balancing_amount(
        transaction,
        options,
        detail.account,
        BalancingContext(
            current_line_text=line,
            cursor_column=len(line) if cursor_column is None else cursor_column,
        ),
    )


__all__ = [
    "BalancingContext",
    "TransactionLines",
    "calculate_balancing_amount",
    "find_transaction_at",
    "suggest_balancing_amount",
]

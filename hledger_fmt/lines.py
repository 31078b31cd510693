"""Line classification predicates and posting extraction.

All predicates are pure and accept raw or trimmed lines unless noted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .dates import extract_date_components

COMMENT_PREFIXES = (";", "#", "*")

# Postings separate the account from the amount with 2+ spaces or a tab.
ACCOUNT_AMOUNT_SEPARATOR = re.compile(r"\s{2,}|\t+")

_METADATA_LINE = re.compile(r"[A-Za-z0-9_.-]+:(\s+.*)?")
_METADATA_ACCOUNT = re.compile(r":\s")
_COMMENT_LINE = re.compile(r"(\s*)([#;*])\s?(.*)")
_LINE_BREAK = re.compile(r"\r?\n")

# Used when an account and its amount are separated by a single space only.
_FALLBACK_POSTING = re.compile(
    r"(\S+(?:\s+\S+)*?)\s*"
    r"(\$-?\d+(?:,\d+)*(?:\.\d+)?|-\$\d+(?:,\d+)*(?:\.\d+)?|\d+(?:,\d+)*(?:\.\d+)?)"
    r"(.*)",
    re.ASCII,
)


@dataclass(frozen=True, slots=True)
class PostingDetail:
    """Account/amount split of one posting line.

    ``account`` is ``None`` only for blank lines. ``amount`` is ``None`` when
    no amount could be located; the raw text after the account otherwise.
    """

    trimmed: str
    account: str | None
    amount: str | None


@dataclass(frozen=True, slots=True)
class CommentLine:
    leading_whitespace: str
    char: str
    content: str


def is_blank_line(line: str) -> bool:
    return not line.strip()


def is_comment_line(line: str) -> bool:
    return line.strip().startswith(COMMENT_PREFIXES)


def is_comment_block_start(line: str) -> bool:
    return line.strip() == "comment"


def is_comment_block_end(line: str) -> bool:
    return line.strip() == "end comment"


def is_transaction_header_line(line: str) -> bool:
    return extract_date_components(line.strip()) is not None


def is_metadata_posting_line(trimmed_line: str) -> bool:
    """Whether a trimmed line is a ``key:`` / ``key: value`` tag line.

    Real postings always have a 2+ space or tab gap before their amount, so
    any such gap rules the line out.
    """

    if not trimmed_line:
        return False
    if ACCOUNT_AMOUNT_SEPARATOR.search(trimmed_line):
        return False
    return _METADATA_LINE.fullmatch(trimmed_line) is not None


def is_metadata_posting_account(account: str | None) -> bool:
    """Whether an extracted "account" is really a metadata key."""

    if not account:
        return False
    stripped = account.strip()
    return stripped.endswith(":") or _METADATA_ACCOUNT.search(stripped) is not None


def parse_comment_line(line: str) -> CommentLine | None:
    """Split a commented line into indentation, marker and content.

    A single space after the marker is considered part of the marker.
    """

    match = _COMMENT_LINE.fullmatch(line)
    if match is None:
        return None
    leading, char, content = match.groups()
    return CommentLine(leading_whitespace=leading, char=char, content=content)


def extract_posting_detail(line: str) -> PostingDetail:
    trimmed = line.strip()
    if not trimmed:
        return PostingDetail(trimmed=trimmed, account=None, amount=None)

    parts = ACCOUNT_AMOUNT_SEPARATOR.split(trimmed)
    if len(parts) >= 2:
        return PostingDetail(
            trimmed=trimmed,
            account=parts[0].strip(),
            amount=" ".join(parts[1:]).strip(),
        )

    match = _FALLBACK_POSTING.fullmatch(trimmed)
    if match is not None:
        account, numeric, rest = match.groups()
        return PostingDetail(
            trimmed=trimmed,
            account=account.strip(),
            amount=f"{numeric.strip()}{rest}".strip(),
        )

    return PostingDetail(trimmed=trimmed, account=trimmed, amount=None)


def leading_whitespace_length(line: str) -> int:
    return len(line) - len(line.lstrip())


def split_lines(text: str) -> tuple[list[str], str]:
    """Split ``text`` into lines and report the newline style to rejoin with.

    Both ``\\n`` and ``\\r\\n`` end a line, so line numbers match what an
    editor shows even for mixed endings. The first line break found decides
    the style used when rejoining.
    """

    first = _LINE_BREAK.search(text)
    newline = first.group(0) if first is not None else "\n"
    return _LINE_BREAK.split(text), newline


__all__ = [
    "ACCOUNT_AMOUNT_SEPARATOR",
    "COMMENT_PREFIXES",
    "CommentLine",
    "PostingDetail",
    "extract_posting_detail",
    "is_blank_line",
    "is_comment_block_end",
    "is_comment_block_start",
    "is_comment_line",
    "is_metadata_posting_account",
    "is_metadata_posting_line",
    "is_transaction_header_line",
    "leading_whitespace_length",
    "parse_comment_line",
    "split_lines",
]

import textwrap

import pytest

from hledger_fmt import sort_journal
from hledger_fmt.segmenter import segment_for_sort


def _dedent(s: str) -> str:
    # Keep internal newlines, but normalize indentation for readability.
    return textwrap.dedent(s).lstrip("\n")


def test_sorts_chronologically_and_keeps_leading_content():
    text = _dedent(
        """
        ; header

        2024-03-01 c
          a  $1
          b

        2024-01-01 a
          a  $1
          b
        """
    )
    assert sort_journal(text) == _dedent(
        """
        ; header

        2024-01-01 a
          a  $1
          b

        2024-03-01 c
          a  $1
          b
        """
    )


def test_same_day_transactions_keep_input_order():
    text = "2024-02-01 first\n  a\n\n2024-01-01 early\n  a\n\n2024/02/01 second\n  a"
    assert sort_journal(text) == (
        "2024-01-01 early\n  a\n\n2024-02-01 first\n  a\n\n2024/02/01 second\n  a"
    )


def test_original_date_text_is_not_rewritten():
    out = sort_journal("2024.2.1 b\n  x\n\n2024/1/9 a\n  x\n")
    assert out == "2024/1/9 a\n  x\n\n2024.2.1 b\n  x\n"


def test_blank_line_not_followed_by_header_stays_in_transaction():
    text = _dedent(
        """
        2024-02-01 b
          a  $1
          ; first paragraph

          ; second paragraph

        2024-01-01 a
          a  $1
        """
    )
    out = sort_journal(text)
    assert out.startswith("2024-01-01 a\n  a  $1\n\n2024-02-01 b\n")
    assert "  ; first paragraph\n\n  ; second paragraph\n" in out


def test_moved_transaction_does_not_leave_double_blank():
    text = "2024-02-01 b\n  x\n\n\n2024-01-01 a\n  x\n"
    assert "\n\n\n" not in sort_journal(text)


def test_comment_block_travels_with_its_transaction():
    text = _dedent(
        """
        2024-02-01 b
          x
        comment
        2023-01-01 inside a block
        end comment

        2024-01-01 a
          x
        """
    )
    parsed = segment_for_sort(text.split("\n"))
    assert [t.sort_key for t in parsed.transactions] == ["2024-02-01", "2024-01-01"]
    assert "2023-01-01 inside a block" in parsed.transactions[0].text
    assert sort_journal(text).startswith("2024-01-01 a\n  x\n\n2024-02-01 b\n")


def test_input_without_transactions_is_returned_trimmed():
    assert sort_journal("; only comments\n\n") == "; only comments\n"


def test_crlf_is_preserved():
    out = sort_journal("2024-02-01 b\r\n  x\r\n\r\n2024-01-01 a\r\n  x\r\n")
    assert out == "2024-01-01 a\r\n  x\r\n\r\n2024-02-01 b\r\n  x\r\n"


@pytest.mark.parametrize("newline", ["\n", "\r\n"])
def test_sorting_twice_changes_nothing(newline):
    text = (
        "; leading\naccount a\n\n"
        "2024-03-01 c\n  a  $1\n  ; note one\n\n  ; note two\n\n"
        "2024-01-01 a\n  a  $1\ncomment\n2020-01-01 hidden\nend comment\n\n"
        "2024-02-01 b\n  a  $1\n\n\n"
    ).replace("\n", newline)
    once = sort_journal(text)
    assert sort_journal(once) == once

import re
import textwrap

from hledger_fmt import format_journal
from hledger_fmt.formatter import format_transaction_header
from hledger_fmt.options import FormatterOptions

_FIRST_DIGIT = re.compile(r"[0-9]")


def _dedent(s: str) -> str:
    # Keep internal newlines, but normalize indentation for readability.
    return textwrap.dedent(s).lstrip("\n")


def _digit_columns(text: str) -> list[int]:
    """First-digit column of every indented line that has an amount."""

    columns = []
    for line in text.splitlines():
        if not line.startswith(" "):
            continue
        _account, sep, amount = line.strip().partition("  ")
        if sep:
            amount = amount.lstrip()
            columns.append(len(line) - len(amount) + _FIRST_DIGIT.search(amount).start())
    return columns


GROCERY = (
    "2023-01-05   Grocery Store\n"
    "  expenses:food      $85.50\n"
    "    assets:bank:checking    $-85.50"
)


def test_grocery_scenario_with_defaults():
    assert format_journal(GROCERY) == (
        "2023-01-05 Grocery Store\n"
        "    expenses:food" + " " * 10 + "$85.50\n"
        "    assets:bank:checking  $-85.50\n"
    )


def test_grocery_scenario_sign_before_symbol():
    out = format_journal(GROCERY, {"negativeCommodityStyle": "signBeforeSymbol"})
    assert out.splitlines()[2] == "    assets:bank:checking  -$85.50"
    assert len(set(_digit_columns(out))) == 1


def test_first_digits_share_a_column_within_each_transaction():
    text = _dedent(
        """
        2024-02-01 Mixed
          a  $1
          expenses:household:supplies    USD 12.00
          b  -$1,000.00
          c
        """
    )
    out = format_journal(text, {"negativeCommodityStyle": "signBeforeSymbol"})
    columns = _digit_columns(out)
    assert len(columns) == 3
    assert len(set(columns)) == 1


def test_format_is_idempotent():
    text = _dedent(
        """
        ; opening comment
        2024/3/1 * (42) Rent   ; monthly
            expenses:rent   $1,200
           assets:checking


        2024.03.02 Coffee
          expenses:coffee  $-4.5
            date: 2024-03-02
          liabilities:card
        """
    )
    once = format_journal(text)
    assert format_journal(once) == once


def test_fixed_column_alignment():
    text = "2024-01-01 x\n  a  $5\n  b\n"
    out = format_journal(text, {"amountAlignment": "fixedColumn", "amountColumnPosition": 30})
    assert out == "2024-01-01 x\n    a" + " " * 24 + "$5\n    b\n"


def test_fixed_column_keeps_minimum_gap_for_long_accounts():
    text = "2024-01-01 x\n  expenses:a:very:long:account  $5\n  b\n"
    out = format_journal(text, {"amountAlignment": "fixedColumn", "amountColumnPosition": 10})
    assert out.splitlines()[1] == "    expenses:a:very:long:account  $5"


def test_fixed_column_default_position():
    opts = FormatterOptions(amount_alignment="fixedColumn")
    out = format_journal("2024-01-01 x\n  a  $5\n", opts)
    assert _digit_columns(out) == [42]


def test_header_normalization():
    opts = FormatterOptions(date_format="YYYY/MM/DD")
    header = "2024-1-5   *   (123)   Coffee   ; note"
    assert format_transaction_header(header, opts) == "2024/01/05 * (123) Coffee   ; note"
    assert format_transaction_header("2024-01-05 !Pending", opts) == "2024/01/05 ! Pending"


def test_header_with_invalid_date_is_not_a_transaction():
    text = "2024-13-01 nope\n  a  $5\n"
    assert format_journal(text) == text


def test_comment_lines_inside_transaction_stay_in_place():
    text = "2024-01-01 x\n  ; memo\n  a  $5\n  # other\n  b\n"
    assert format_journal(text) == (
        "2024-01-01 x\n  ; memo\n    a  $5\n  # other\n    b\n"
    )


def test_metadata_lines_are_only_reindented():
    text = "2024-01-01 x\n  a  $5\n      date: 2024-01-02\n  b\n"
    assert format_journal(text).splitlines()[2] == "    date: 2024-01-02"


def test_blank_lines_between_transactions_collapse_to_one():
    text = "2024-01-01 a\n  x  $1\n  y\n\n\n\n2024-01-02 b\n  x  $1\n  y\n"
    assert format_journal(text) == (
        "2024-01-01 a\n    x  $1\n    y\n\n2024-01-02 b\n    x  $1\n    y\n"
    )


def test_adjacent_transactions_get_a_separator():
    text = "2024-01-01 a\n  x  $1\n2024-01-02 b\n  x  $1"
    assert format_journal(text) == "2024-01-01 a\n    x  $1\n\n2024-01-02 b\n    x  $1\n"


def test_leading_blanks_removed_and_comment_block_verbatim():
    text = "\n\ncomment\n2024-01-01 not a txn\n   a  $5\nend comment\n"
    assert format_journal(text) == "comment\n2024-01-01 not a txn\n   a  $5\nend comment\n"


def test_free_text_and_directives_pass_through():
    text = "account assets:bank\ncommodity $1,000.00\n\n2024-01-01 x\n  a  $1\n  b\n"
    out = format_journal(text)
    assert out.startswith("account assets:bank\ncommodity $1,000.00\n\n2024-01-01 x\n")


def test_crlf_line_endings_are_preserved():
    text = "2024-01-01 x\r\n  a  $5\r\n  b\r\n"
    assert format_journal(text) == "2024-01-01 x\r\n    a  $5\r\n    b\r\n"


def test_lone_header_is_formatted():
    assert format_journal("2024/1/2 Only") == "2024-01-02 Only\n"


def test_custom_indentation():
    out = format_journal("2024-01-01 x\n    a  $5\n", {"indentationWidth": 2})
    assert out == "2024-01-01 x\n  a  $5\n"


def test_empty_document():
    assert format_journal("") == ""


def test_mixed_line_endings_split_on_both():
    assert format_journal("2024-01-01 x\n  a  $5\r\n  b\n") == "2024-01-01 x\n    a  $5\n    b\n"


def test_inline_comment_on_posting_is_not_an_amount():
    text = "2024-01-01 x\n  expenses:food  $5\n  assets:bank      ; note\n"
    expected = "2024-01-01 x\n    expenses:food  $5\n    assets:bank      ; note\n"
    assert format_journal(text) == expected

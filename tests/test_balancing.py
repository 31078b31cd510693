import re
from decimal import Decimal

from hledger_fmt import (
    BalancingContext,
    TransactionLines,
    calculate_balancing_amount,
    find_transaction_at,
    parse_amount,
    suggest_balancing_amount,
)

FIXED_30 = {"amountAlignment": "fixedColumn", "amountColumnPosition": 30}


def _txn(*lines: str) -> TransactionLines:
    return TransactionLines(header_line_index=0, lines=("2024-01-01 Groceries", *lines))


def test_balancing_amount_negates_the_single_currency_total():
    txn = _txn("    expenses:food  $50.00", "    assets:bank")
    suggestion = calculate_balancing_amount(txn, None, "assets:bank")
    assert suggestion is not None
    assert suggestion.startswith("  ")
    assert suggestion.strip() == "$-50.00"
    assert parse_amount(suggestion).value + Decimal("50.00") == 0


def test_balancing_amount_respects_negative_style():
    txn = _txn("    expenses:food  $50.00", "    assets:bank")
    suggestion = calculate_balancing_amount(
        txn, {"negativeCommodityStyle": "signBeforeSymbol"}, "assets:bank"
    )
    assert suggestion.strip() == "-$50.00"


def test_balancing_amount_sums_several_postings():
    txn = _txn("    expenses:food  $12.25", "    expenses:tip  $2.75", "    assets:cash")
    assert calculate_balancing_amount(txn, None, "assets:cash").strip() == "$-15.00"


def test_no_suggestion_cases():
    two_missing = _txn("    expenses:food  $5", "    assets:a", "    assets:b")
    assert calculate_balancing_amount(two_missing, None, "assets:a") is None

    none_missing = _txn("    expenses:food  $5", "    assets:bank  $-5")
    assert calculate_balancing_amount(none_missing, None, "assets:bank") is None

    two_currencies = _txn("    expenses:food  $5", "    expenses:fee  EUR 1", "    assets:bank")
    assert calculate_balancing_amount(two_currencies, None, "assets:bank") is None

    balanced = _txn("    expenses:food  $5", "    income:refund  $-5", "    assets:bank")
    assert calculate_balancing_amount(balanced, None, "assets:bank") is None


def test_comments_and_metadata_are_not_postings():
    txn = _txn("    ; memo", "    expenses:food  $5", "    date: 2024-01-02", "    assets:bank")
    assert calculate_balancing_amount(txn, None, "assets:bank").strip() == "$-5.00"


def test_fixed_column_padding_lands_on_configured_column():
    line = "    assets:bank"
    txn = _txn("    expenses:food  $50.00", line)
    context = BalancingContext(current_line_text=line, cursor_column=len(line))
    suggestion = calculate_balancing_amount(txn, FIXED_30, "assets:bank", context)
    assert suggestion == " " * 13 + "$-50.00"
    completed = line + suggestion
    assert completed.index("5") == 30


def test_spacing_already_typed_is_not_repeated():
    line = "    assets:bank   "
    txn = _txn("    expenses:food  $50.00", line)
    context = BalancingContext(current_line_text=line, cursor_column=len(line))
    suggestion = calculate_balancing_amount(txn, FIXED_30, "assets:bank", context)
    assert suggestion == " " * 10 + "$-50.00"
    assert (line + suggestion).index("5") == 30


def test_find_transaction_at():
    lines = [
        "; preamble",
        "",
        "2024-01-01 a",
        "    x  $1",
        "    y",
        "",
        "    orphan",
    ]
    found = find_transaction_at(lines, 4)
    assert found == TransactionLines(2, ("2024-01-01 a", "    x  $1", "    y"))
    assert find_transaction_at(lines, 2).lines == ("2024-01-01 a", "    x  $1", "    y")
    assert find_transaction_at(lines, 6) is None
    assert find_transaction_at(lines, 0) is None
    assert find_transaction_at(lines, 99) is None


DOCUMENT = "2024-01-01 Groceries\n    expenses:food  $50.00\n    assets:bank\n    ; note\n"


def test_suggest_balancing_amount_for_open_posting():
    suggestion = suggest_balancing_amount(DOCUMENT, 2, options=FIXED_30)
    assert suggestion == " " * 13 + "$-50.00"


def test_suggest_balancing_amount_declines_other_lines():
    assert suggest_balancing_amount(DOCUMENT, 0) is None  # header
    assert suggest_balancing_amount(DOCUMENT, 1) is None  # already has an amount
    assert suggest_balancing_amount(DOCUMENT, 3) is None  # comment
    assert suggest_balancing_amount(DOCUMENT, 4) is None  # trailing blank
    assert suggest_balancing_amount(DOCUMENT, 42) is None
    tagged = "2024-01-01 x\n    expenses:food  $5\n    date: 2024-01-02\n    assets:bank\n"
    assert suggest_balancing_amount(tagged, 2) is None
    assert suggest_balancing_amount(tagged, 3).strip() == "$-5.00"


def test_widest_mode_lines_up_with_existing_amounts():
    txn_lines = (
        "    expenses:food" + " " * 22 + "$50.00",
        "    expenses:tip" + " " * 23 + "$10.00",
    )
    for line, padding in (("    assets:bank", 23), ("    assets:bank    ", 19)):
        txn = _txn(*txn_lines, line)
        context = BalancingContext(current_line_text=line, cursor_column=len(line))
        suggestion = calculate_balancing_amount(txn, None, "assets:bank", context)
        assert suggestion == " " * padding + "$-60.00"
        assert re.search(r"[0-9]", line + suggestion).start() == 40

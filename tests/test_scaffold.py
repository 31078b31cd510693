from datetime import date

import pytest

from hledger_fmt.scaffold import journal_file_header, journal_file_name


def test_journal_file_name():
    assert journal_file_name(9) == "09-sep.journal"
    assert journal_file_name(1) == "01-jan.journal"
    assert journal_file_name(12) == "12-dec.journal"


@pytest.mark.parametrize("month", [0, 13, True, "9"])
def test_journal_file_name_rejects_invalid_months(month):
    with pytest.raises(ValueError):
        journal_file_name(month)


def test_journal_file_header():
    header = journal_file_header(9, 2025, date(2025, 9, 1))
    assert header == "; Sep 2025 Journal\n;\n; Created on 2025-09-01\n\n"

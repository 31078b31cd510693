"""Public interface for the ``hledger_fmt`` package.

This module exposes the journal engine's operations and value types as the
stable import surface. There is no runtime logic here, only symbol re-exports.
The command-line interface lives in ``hledger_fmt.cli`` and is not imported
here so that library users don't pay for Typer at import time.
"""

__version__ = "0.1.0"

from .accounts import AccountIndex, account_completions, extract_accounts, extract_include_paths
from .amounts import ParsedAmount, format_amount_value, parse_amount
from .balancing import (
    BalancingContext,
    TransactionLines,
    calculate_balancing_amount,
    find_transaction_at,
    suggest_balancing_amount,
)
from .comments import toggle_comment_lines
from .formatter import format_journal
from .options import DEFAULT_FORMATTER_OPTIONS, FormatterOptions, normalize_formatter_options
from .scaffold import journal_file_header, journal_file_name
from .sorter import sort_journal

__all__ = [
    "__version__",
    # Operations
    "format_journal",
    "sort_journal",
    "toggle_comment_lines",
    "calculate_balancing_amount",
    "suggest_balancing_amount",
    "find_transaction_at",
    "parse_amount",
    "format_amount_value",
    "normalize_formatter_options",
    # Accounts / scaffolding
    "AccountIndex",
    "account_completions",
    "extract_accounts",
    "extract_include_paths",
    "journal_file_name",
    "journal_file_header",
    # Models / types
    "FormatterOptions",
    "DEFAULT_FORMATTER_OPTIONS",
    "ParsedAmount",
    "TransactionLines",
    "BalancingContext",
]

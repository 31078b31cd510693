# ruff: noqa: I001
"""CLI for the ``hledger_fmt`` package.

This module exposes callable command handlers (``cmd_format``, ``cmd_sort``,
...) returning a process exit code, and a Typer-based console interface that
parses arguments and delegates to them. Environment variables are loaded
from a local ``.env`` using ``python-dotenv`` before any option is resolved.
All journal logic lives in the engine modules; this file only does I/O.
"""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from typing import Any, get_args

import typer
from dotenv import load_dotenv
from typer.models import ArgumentInfo, OptionInfo

from . import __version__
from .accounts import AccountCasing, AccountIndex, account_completions
from .balancing import suggest_balancing_amount
from .comments import toggle_comment_lines
from .config import (
    ENV_AMOUNT_ALIGNMENT,
    ENV_AMOUNT_COLUMN,
    ENV_COMMENT_CHAR,
    ENV_DATE_FORMAT,
    ENV_INDENT,
    ENV_NEGATIVE_STYLE,
    ConfigError,
    resolve_formatter_options,
)
from .formatter import format_journal
from .logging_setup import configure_logging, get_logger
from .options import FormatterOptions
from .scaffold import journal_file_header, journal_file_name
from .sorter import sort_journal

_logger = get_logger("hledger_fmt.cli")

ACCOUNT_CASINGS: tuple[str, ...] = get_args(AccountCasing.__value__)


class InputError(Exception):
    """The command was invoked without usable input."""


# ---- Small module-level helpers used by CLI commands -------------------------


def _read_journal(file: Path | None) -> str:
    """Read journal text from ``file`` or standard input.

    Files are read with ``newline=""`` so CRLF endings reach the engine
    untouched.
    """

    if file is None:
        if sys.stdin.isatty():
            raise InputError("no FILE given and standard input is a terminal")
        return sys.stdin.read()
    with open(file, encoding="utf-8", newline="") as f:
        return f.read()


def _write_result(text: str, file: Path | None, in_place: bool) -> None:
    if in_place:
        if file is None:
            raise InputError("--in-place requires FILE")
        with open(file, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        _logger.info("rewrote %s", file)
        return
    sys.stdout.write(text)


def _error(message: object) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def _resolve_options(config_path: Path | None, **flags: Any) -> FormatterOptions:
    return resolve_formatter_options(flags, config_path=config_path)


# ---- Command handlers ---------------------------------------------------------


def cmd_format(
    file: Path | None,
    *,
    in_place: bool = False,
    config_path: Path | None = None,
    **flags: Any,
) -> int:
    """Format a journal and print it (or rewrite ``file`` in place).

    ``flags`` are snake_case option overrides; ``None`` means "not given".
    """

    if in_place and file is None:
        return _error("--in-place requires FILE")
    try:
        options = _resolve_options(config_path, **flags)
        text = _read_journal(file)
    except (ConfigError, InputError, OSError, UnicodeDecodeError) as e:
        return _error(e)

    formatted = format_journal(text, options)
    try:
        _write_result(formatted, file, in_place)
    except (InputError, OSError) as e:
        return _error(e)
    return 0


def cmd_sort(file: Path | None, *, in_place: bool = False) -> int:
    """Sort transactions chronologically without reformatting them."""

    if in_place and file is None:
        return _error("--in-place requires FILE")
    try:
        text = _read_journal(file)
        _write_result(sort_journal(text), file, in_place)
    except (InputError, OSError, UnicodeDecodeError) as e:
        return _error(e)
    return 0


def cmd_toggle_comment(
    file: Path,
    *,
    start: int,
    end: int,
    in_place: bool = False,
    config_path: Path | None = None,
    comment_character: str | None = None,
) -> int:
    """Toggle comments on lines ``start..end`` (1-based, inclusive)."""

    if start < 1 or end < start:
        return _error(f"invalid line range {start}..{end}")
    try:
        options = _resolve_options(config_path, comment_character=comment_character)
        text = _read_journal(file)
        result = toggle_comment_lines(text, start - 1, end - 1, options)
        _write_result(result, file, in_place)
    except (ConfigError, InputError, OSError, UnicodeDecodeError) as e:
        return _error(e)
    return 0


def cmd_balance(
    file: Path,
    *,
    line: int,
    column: int | None = None,
    config_path: Path | None = None,
) -> int:
    """Print the amount that would balance the posting on ``line``.

    ``line`` and ``column`` are 1-based. Returns ``1`` without output on
    stderr when there is nothing to suggest.
    """

    if line < 1 or (column is not None and column < 1):
        return _error("--line and --column are 1-based")
    try:
        options = _resolve_options(config_path)
        text = _read_journal(file)
    except (ConfigError, InputError, OSError, UnicodeDecodeError) as e:
        return _error(e)

    cursor = None if column is None else column - 1
    suggestion = suggest_balancing_amount(text, line - 1, cursor, options)
    if suggestion is None:
        _logger.info("no balancing amount for line %d", line)
        return 1
    print(suggestion)
    return 0


def cmd_accounts(root: Path, *, casing: str = "lowercase") -> int:
    """Print completion candidates for every account under ``root``."""

    if casing not in ACCOUNT_CASINGS:
        return _error(f"--casing must be one of {', '.join(ACCOUNT_CASINGS)}")
    if not root.is_dir():
        return _error(f"not a directory: {root}")

    accounts = AccountIndex(root).accounts()
    for account in account_completions(accounts, casing):  # type: ignore[arg-type]
        print(account)
    return 0


def cmd_new(*, month: int | None = None, directory: Path | None = None) -> int:
    """Create ``MM-mon.journal`` for ``month`` of the current year if absent."""

    today = date.today()
    month = today.month if month is None else month
    try:
        name = journal_file_name(month)
    except ValueError as e:
        return _error(e)

    target = (directory or Path.cwd()) / name
    if target.exists():
        _logger.info("%s already exists; leaving it untouched", target)
        print(target)
        return 0

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "x", encoding="utf-8", newline="") as f:
            f.write(journal_file_header(month, today.year, today))
    except OSError as e:
        return _error(e)
    print(target)
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Format, sort and edit hledger journals. Options come from flags, "
        "HLEDGER_FMT_* environment variables (a local .env is loaded), "
        ".hledger-fmt.toml, then built-in defaults."
    ),
)

# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults). Typer inspects these when used as default values below.
FILE_ARGUMENT: ArgumentInfo = typer.Argument(
    None, help="Journal file. Reads standard input when omitted.", dir_okay=False
)
REQUIRED_FILE_ARGUMENT: ArgumentInfo = typer.Argument(
    ..., help="Journal file.", dir_okay=False
)
IN_PLACE_OPTION: OptionInfo = typer.Option(
    False, "--in-place", "-i", help="Rewrite FILE instead of printing to stdout."
)
COMMENT_CHAR_OPTION: OptionInfo = typer.Option(
    None, "--comment-char", envvar=ENV_COMMENT_CHAR, help="Comment character: ';', '#' or '*'."
)


def _finish(code: int) -> None:
    if code:
        raise typer.Exit(code)


def _config_path(ctx: typer.Context) -> Path | None:
    return (ctx.obj or {}).get("config_path")


@app.command("format")
def format_cmd(
    ctx: typer.Context,
    file: Path | None = FILE_ARGUMENT,
    *,
    alignment: str | None = typer.Option(
        None, envvar=ENV_AMOUNT_ALIGNMENT, help="Amount alignment: widest or fixedColumn."
    ),
    column: int | None = typer.Option(
        None, envvar=ENV_AMOUNT_COLUMN, help="Amount column in fixedColumn mode."
    ),
    indent: int | None = typer.Option(
        None, envvar=ENV_INDENT, help="Spaces before each posting."
    ),
    negative_style: str | None = typer.Option(
        None,
        envvar=ENV_NEGATIVE_STYLE,
        help="Negative amounts: symbolBeforeSign ($-1) or signBeforeSymbol (-$1).",
    ),
    date_format: str | None = typer.Option(
        None, envvar=ENV_DATE_FORMAT, help="YYYY-MM-DD, YYYY/MM/DD or YYYY.MM.DD."
    ),
    comment_char: str | None = COMMENT_CHAR_OPTION,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Align postings and normalize dates and amounts."""

    _finish(
        cmd_format(
            file,
            in_place=in_place,
            config_path=_config_path(ctx),
            amount_alignment=alignment,
            amount_column_position=column,
            indentation_width=indent,
            negative_commodity_style=negative_style,
            date_format=date_format,
            comment_character=comment_char,
        )
    )


@app.command("sort")
def sort_cmd(
    file: Path | None = FILE_ARGUMENT,
    *,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Order transactions by date, keeping same-day order."""

    _finish(cmd_sort(file, in_place=in_place))


@app.command("toggle-comment")
def toggle_comment_cmd(
    ctx: typer.Context,
    file: Path = REQUIRED_FILE_ARGUMENT,
    *,
    start: int = typer.Option(..., help="First line (1-based)."),
    end: int = typer.Option(..., help="Last line (1-based, inclusive)."),
    comment_char: str | None = COMMENT_CHAR_OPTION,
    in_place: bool = IN_PLACE_OPTION,
) -> None:
    """Comment out a line range, or uncomment it when already commented."""

    _finish(
        cmd_toggle_comment(
            file,
            start=start,
            end=end,
            in_place=in_place,
            config_path=_config_path(ctx),
            comment_character=comment_char,
        )
    )


@app.command("balance")
def balance_cmd(
    ctx: typer.Context,
    file: Path = REQUIRED_FILE_ARGUMENT,
    *,
    line: int = typer.Option(..., help="Posting line (1-based)."),
    column: int | None = typer.Option(
        None, help="Cursor column (1-based). Defaults to the end of the line."
    ),
) -> None:
    """Print the amount that balances the posting on --line."""

    _finish(cmd_balance(file, line=line, column=column, config_path=_config_path(ctx)))


@app.command("accounts")
def accounts_cmd(
    root: Path = typer.Argument(Path("."), help="Directory to scan.", file_okay=False),
    casing: str = typer.Option(
        "lowercase", help="Standard account casing: lowercase, uppercase, capitalize, none."
    ),
) -> None:
    """List account completions found in journal files under ROOT."""

    _finish(cmd_accounts(root, casing=casing))


@app.command("new")
def new_cmd(
    month: int | None = typer.Option(None, help="Month 1-12. Defaults to the current month."),
    directory: Path | None = typer.Option(
        None, "--dir", help="Target directory. Defaults to the working directory."
    ),
) -> None:
    """Create this year's monthly journal file (e.g. 09-sep.journal)."""

    _finish(cmd_new(month=month, directory=directory))


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hledger-fmt {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None, "--config", help="Config file. Defaults to ./.hledger-fmt.toml when present."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version."
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures logging before any
    subcommand resolves its options.
    """

    import os

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    # Quiet by default; HLEDGER_FMT_LOG_LEVEL or --verbose opt in.
    if verbose:
        configure_logging("DEBUG")
    else:
        configure_logging(None if os.getenv("HLEDGER_FMT_LOG_LEVEL") else "WARNING")

    ctx.obj = {"config_path": config}


if __name__ == "__main__":  # pragma: no cover - exercised via the console script
    # Running as a module: `python -m hledger_fmt.cli`
    app()

"""Account-name discovery across journal files.

Used for account completion: every indented posting line contributes its
account and all of its parents (``expenses:food:dining`` also yields
``expenses:food`` and ``expenses``). ``include`` / ``!include`` directives
are followed relative to the including file.

:class:`AccountIndex` caches a workspace scan for a short, fixed interval so
repeated completion requests don't rescan the disk.
"""

from __future__ import annotations

import os
import re
import time
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Literal

from .lines import (
    ACCOUNT_AMOUNT_SEPARATOR,
    is_comment_line,
    is_metadata_posting_line,
    is_transaction_header_line,
)
from .logging_setup import get_logger

_logger = get_logger("hledger_fmt.accounts")

type AccountCasing = Literal["lowercase", "uppercase", "capitalize", "none"]

STANDARD_ACCOUNTS: tuple[str, ...] = (
    "assets",
    "liabilities",
    "equity",
    "revenues",
    "income",
    "expenses",
)
JOURNAL_SUFFIXES: tuple[str, ...] = (".journal", ".hledger", ".ledger")
MAX_SCANNED_FILES = 1000
DEFAULT_REFRESH_INTERVAL = 5.0

_INCLUDE = re.compile(r"!?include\s+(.+)")
_ACCOUNT_ONLY = re.compile(r"[^\s;]+(?::[^\s;]+)*")


def _with_parents(account: str) -> list[str]:
    parts = account.split(":")
    return [":".join(parts[:i]) for i in range(1, len(parts) + 1)]


def extract_accounts(text: str) -> set[str]:
    """Collect account names (and their parents) from posting lines."""

    accounts: set[str] = set()
    for line in text.splitlines():
        trimmed = line.strip()
        if not trimmed or is_comment_line(trimmed) or is_metadata_posting_line(trimmed):
            continue
        if is_transaction_header_line(trimmed):
            continue
        if not line[:1].isspace():
            continue

        separated = ACCOUNT_AMOUNT_SEPARATOR.search(trimmed)
        if separated is not None:
            account = trimmed[: separated.start()].strip()
        else:
            match = _ACCOUNT_ONLY.match(trimmed)
            account = match.group(0) if match else ""
        if account:
            accounts.update(_with_parents(account))
    return accounts


def extract_include_paths(text: str) -> list[str]:
    """Return the raw targets of ``include`` / ``!include`` directives."""

    paths: list[str] = []
    for line in text.splitlines():
        match = _INCLUDE.fullmatch(line.strip())
        if match:
            paths.append(match.group(1).strip())
    return paths


def _apply_casing(accounts: Iterable[str], casing: AccountCasing) -> list[str]:
    if casing == "lowercase":
        return [a.lower() for a in accounts]
    if casing == "uppercase":
        return [a.upper() for a in accounts]
    if casing == "capitalize":
        return [a.capitalize() for a in accounts]
    return list(accounts)


def account_completions(accounts: Iterable[str], casing: AccountCasing = "lowercase") -> list[str]:
    """Completion candidates: standard categories first, then known accounts.

    With ``casing="none"`` the standard categories are omitted. Known accounts
    that match a standard category case-insensitively are not repeated.
    """

    standard = [] if casing == "none" else _apply_casing(STANDARD_ACCOUNTS, casing)
    seen = {a.lower() for a in standard}
    discovered = sorted(a for a in set(accounts) if a.lower() not in seen)
    return standard + discovered


class AccountIndex:
    """Workspace-wide account names with a time-boxed cache.

    Parameters
    ----------
    root:
        Directory scanned for ``*.journal``, ``*.hledger`` and ``*.ledger``
        files (``node_modules`` is skipped, at most ``MAX_SCANNED_FILES``).
    refresh_interval:
        Seconds during which :meth:`accounts` returns the cached result.
    clock:
        Monotonic clock, injectable for tests.
    """

    def __init__(
        self,
        root: Path | str,
        *,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.root = Path(root)
        self.refresh_interval = refresh_interval
        self._clock = clock
        self._accounts: frozenset[str] = frozenset()
        self._last_refresh: float | None = None

    def accounts(self) -> frozenset[str]:
        now = self._clock()
        if self._last_refresh is not None and now - self._last_refresh < self.refresh_interval:
            return self._accounts

        self._last_refresh = now
        found: set[str] = set()
        visited: set[Path] = set()
        for path in self._journal_files():
            self._scan_file(path, visited, found)
        self._accounts = frozenset(found)
        _logger.debug("indexed %d accounts from %d files", len(found), len(visited))
        return self._accounts

    def invalidate(self) -> None:
        self._last_refresh = None

    def _journal_files(self) -> list[Path]:
        files: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if d != "node_modules")
            for name in sorted(filenames):
                if name.endswith(JOURNAL_SUFFIXES):
                    files.append(Path(dirpath) / name)
                    if len(files) >= MAX_SCANNED_FILES:
                        return files
        return files

    def _scan_file(self, path: Path, visited: set[Path], found: set[str]) -> None:
        resolved = path.resolve()
        if resolved in visited:
            return
        visited.add(resolved)

        try:
            text = resolved.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            _logger.warning("skipping unreadable journal %s: %s", resolved, exc)
            return

        found.update(extract_accounts(text))
        for include in extract_include_paths(text):
            self._scan_file(resolved.parent / Path(include).expanduser(), visited, found)


__all__ = [
    "JOURNAL_SUFFIXES",
    "STANDARD_ACCOUNTS",
    "AccountCasing",
    "AccountIndex",
    "account_completions",
    "extract_accounts",
    "extract_include_paths",
]
